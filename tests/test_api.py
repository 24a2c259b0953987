import unittest

from fastapi.testclient import TestClient

import main
from ats_reviser.controller import ANALYSIS_FAILED_MESSAGE, ResumeController
from ats_reviser.errors import MalformedModelResponse
from ats_reviser.models import AnalysisResult

from conftest import ANALYSIS_JSON, make_docx, make_pdf

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class StubAnalyzer:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    async def analyze(self, resume_text, job_description):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return AnalysisResult.model_validate(ANALYSIS_JSON)


class SessionApiTests(unittest.TestCase):
    def setUp(self):
        self.analyzer = StubAnalyzer()
        main.app.state.controller = ResumeController(analyzer=self.analyzer)
        self.client = TestClient(main.app)

    def _upload(self, filename="resume.pdf", data=None, content_type="application/pdf"):
        data = make_pdf("Jane Doe\nSenior Engineer") if data is None else data
        return self.client.post("/session/resume", files={"resume_file": (filename, data, content_type)})

    def _ready(self):
        self.assertEqual(self._upload().status_code, 200)
        response = self.client.put("/session/job-description", data={"job_description": "Python engineer"})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_initial_session(self):
        body = self.client.get("/session").json()
        self.assertEqual(body["state"], "idle")
        self.assertFalse(body["can_submit"])
        self.assertIsNone(body["result"])

    def test_upload_pdf(self):
        body = self._upload().json()
        self.assertEqual(body["state"], "file_ready")
        self.assertEqual(body["file_name"], "resume.pdf")
        self.assertGreater(body["resume_text_length"], 0)

    def test_upload_docx(self):
        body = self._upload("resume.docx", make_docx(["Jane Doe"]), DOCX_TYPE).json()
        self.assertEqual(body["state"], "file_ready")

    def test_upload_doc_is_rejected_and_cleared(self):
        response = self._upload("resume.doc", b"\xd0\xcf\x11\xe0", "application/msword")

        self.assertEqual(response.status_code, 415)
        self.assertIn(".doc files are not supported", response.json()["error"])
        session = self.client.get("/session").json()
        self.assertEqual(session["state"], "error")
        self.assertIsNone(session["file_name"])

    def test_submit_disabled_without_resume(self):
        body = self.client.put("/session/job-description", data={"job_description": "Python engineer"}).json()
        self.assertFalse(body["can_submit"])

        response = self.client.post("/session/analyze")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.analyzer.calls, 0)

    def test_full_flow_and_downloads(self):
        self.assertTrue(self._ready()["can_submit"])

        body = self.client.post("/session/analyze").json()
        self.assertEqual(body["state"], "result_ready")
        self.assertEqual(body["result"]["original_score"], 48)

        text = self.client.get("/session/result/text")
        self.assertTrue(text.text.startswith("Jane Doe\n"))

        pdf = self.client.get("/session/result/pdf")
        self.assertEqual(pdf.headers["content-type"], "application/pdf")
        self.assertIn("Revised_Resume.pdf", pdf.headers["content-disposition"])
        self.assertTrue(pdf.content.startswith(b"%PDF"))

        docx = self.client.get("/session/result/docx")
        self.assertEqual(docx.headers["content-type"], DOCX_TYPE)
        self.assertIn("Revised_Resume.docx", docx.headers["content-disposition"])

    def test_analysis_failure_is_generic(self):
        self.analyzer.error = MalformedModelResponse()
        self._ready()

        response = self.client.post("/session/analyze")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], ANALYSIS_FAILED_MESSAGE)
        self.assertTrue(self.client.get("/session").json()["can_submit"])

    def test_downloads_need_a_result(self):
        self.assertEqual(self.client.get("/session/result/pdf").status_code, 409)

    def test_reset(self):
        self._ready()
        self.client.post("/session/analyze")

        body = self.client.post("/session/reset").json()

        self.assertEqual(body["state"], "idle")
        self.assertEqual(body["job_description"], "")
        self.assertEqual(self.client.get("/session/result/text").status_code, 409)

    def test_remove_resume(self):
        self._upload()
        body = self.client.delete("/session/resume").json()
        self.assertEqual(body["state"], "idle")
        self.assertIsNone(body["file_name"])

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
