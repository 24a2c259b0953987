"""
AI Resume Reviser FastAPI Application
Upload a resume, paste a job description, get an ATS-optimized revision back
as text, PDF or DOCX. The analysis itself is done by Google Gemini.
"""

# ============================================================================
# PART 1: IMPORTS
# ============================================================================

import logging
from datetime import datetime

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ats_reviser import __version__
from ats_reviser.config import load_settings, setup_logging
from ats_reviser.controller import ResumeController
from ats_reviser.errors import ReviserError
from ats_reviser.extraction import ACCEPTED_EXTENSIONS
from ats_reviser.rendering import DOCX_FILENAME, PDF_FILENAME

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

settings = load_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)
logger.info("=" * 80)
logger.info("AI Resume Reviser Service Started")
logger.info(f"Gemini model: {settings.model}")
logger.info(f"API Key present: {bool(settings.api_key)}")
logger.info("=" * 80)


# ============================================================================
# PART 2: FASTAPI APP SETUP
# ============================================================================

app = FastAPI(title="AI Resume Reviser", version=__version__)
app.state.controller = ResumeController()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"✓ CORS middleware configured for: {', '.join(settings.cors_origins)}")

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def get_controller(request: Request) -> ResumeController:
    return request.app.state.controller


@app.exception_handler(ReviserError)
async def reviser_error_handler(request: Request, exc: ReviserError):
    logger.error(f"❌ {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# ============================================================================
# PART 3: SESSION ENDPOINTS (user actions)
# ============================================================================

@app.get("/session")
async def get_session(request: Request):
    return get_controller(request).snapshot()


@app.post("/session/resume")
async def select_resume(request: Request, resume_file: UploadFile = File(...)):
    """
    Selects a resume file. Accepts .pdf, .doc and .docx; .doc is rejected
    while parsing and the selection is cleared.
    """
    controller = get_controller(request)
    filename = resume_file.filename or ""
    logger.info(f"📥 Upload received: {filename} (accepted: {', '.join(ACCEPTED_EXTENSIONS)})")
    try:
        await controller.select_file(filename, resume_file.read)
    finally:
        await resume_file.close()
    return controller.snapshot()


@app.delete("/session/resume")
async def remove_resume(request: Request):
    controller = get_controller(request)
    controller.remove_file()
    return controller.snapshot()


@app.put("/session/job-description")
async def update_job_description(request: Request, job_description: str = Form("")):
    controller = get_controller(request)
    controller.set_job_description(job_description)
    return controller.snapshot()


@app.post("/session/analyze")
async def analyze(request: Request):
    """Sends the resume and job description for revision."""
    controller = get_controller(request)
    request_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:19]
    logger.info("=" * 80)
    logger.info(f"🚀 NEW RESUME REVISION REQUEST (ID: {request_id})")
    logger.info("=" * 80)
    await controller.submit()
    logger.info(f"✅ RESUME REVISION COMPLETE (ID: {request_id})")
    return controller.snapshot()


@app.post("/session/reset")
async def reset(request: Request):
    controller = get_controller(request)
    controller.reset()
    return controller.snapshot()


# ============================================================================
# PART 4: RESULT EXPORTS
# ============================================================================

@app.get("/session/result/text", response_class=PlainTextResponse)
async def result_text(request: Request):
    return get_controller(request).export_text()


@app.get("/session/result/pdf")
async def result_pdf(request: Request):
    logger.info("📝 Generating PDF...")
    buffer = get_controller(request).export_pdf()
    return Response(
        content=buffer.getvalue(),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={PDF_FILENAME}"},
    )


@app.get("/session/result/docx")
async def result_docx(request: Request):
    logger.info("📝 Generating DOCX...")
    buffer = get_controller(request).export_docx()
    return Response(
        content=buffer.getvalue(),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={DOCX_FILENAME}"},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# ============================================================================
# PART 5: UVICORN RUNNER
# ============================================================================

if __name__ == "__main__":
    logger.info("🚀 Starting Uvicorn server...")
    logger.info("📍 API will be available at: http://0.0.0.0:8000")
    logger.info("📚 API documentation at: http://0.0.0.0:8000/docs")

    uvicorn.run(app, host="0.0.0.0", port=8000, access_log=False)
