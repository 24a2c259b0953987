"""
Session state and the user actions that move it.

The controller is the only thing that mutates the session. Every action
checks the transition table first; the two slow operations (reading and
parsing the upload, the analysis call) are awaited, and their completion is
dropped if a reset happened while they were pending.
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional, Protocol

from .analysis import AnalysisClient
from .errors import (
    ActionNotAllowed,
    AnalysisRequestFailed,
    ClipboardWriteFailure,
    DocumentParseError,
    IncompleteUserInput,
    MissingCredential,
    ReviserError,
)
from .extraction import extract_text
from .models import AnalysisResult, score_band
from .rendering import render_docx, render_pdf, render_text

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Failed to get analysis from the AI. The model may have returned an invalid response."


class AppState(str, Enum):
    IDLE = "idle"
    PARSING_FILE = "parsing_file"
    FILE_READY = "file_ready"
    ANALYZING = "analyzing"
    RESULT_READY = "result_ready"
    ERROR = "error"


class Action(str, Enum):
    SELECT_FILE = "select_file"
    REMOVE_FILE = "remove_file"
    EDIT_JOB_DESCRIPTION = "edit_job_description"
    SUBMIT = "submit"
    EXPORT = "export"


_EDITABLE = frozenset({AppState.IDLE, AppState.FILE_READY})

# interactive states each action may start from; ERROR resolves to the state it returns to
TRANSITIONS: Dict[Action, FrozenSet[AppState]] = {
    Action.SELECT_FILE: _EDITABLE,
    Action.REMOVE_FILE: _EDITABLE,
    Action.EDIT_JOB_DESCRIPTION: _EDITABLE,
    Action.SUBMIT: frozenset({AppState.FILE_READY}),
    Action.EXPORT: frozenset({AppState.RESULT_READY}),
}


class Analyzer(Protocol):
    async def analyze(self, resume_text: str, job_description: str) -> AnalysisResult:
        ...


@dataclass
class Session:
    state: AppState = AppState.IDLE
    file_name: Optional[str] = None
    resume_text: str = ""
    job_description: str = ""
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    return_state: Optional[AppState] = None


class ResumeController:
    def __init__(self, analyzer: Optional[Analyzer] = None,
                 extract: Callable[[bytes, str], str] = extract_text):
        self.analyzer = analyzer or AnalysisClient()
        self._extract = extract
        self.session = Session()
        self._generation = 0

    @property
    def state(self) -> AppState:
        return self.session.state

    @property
    def interactive_state(self) -> AppState:
        if self.session.state is AppState.ERROR:
            return self.session.return_state or AppState.IDLE
        return self.session.state

    @property
    def is_busy(self) -> bool:
        return self.session.state in (AppState.PARSING_FILE, AppState.ANALYZING)

    @property
    def can_submit(self) -> bool:
        s = self.session
        return (
            self.interactive_state in TRANSITIONS[Action.SUBMIT]
            and bool(s.resume_text.strip())
            and bool(s.job_description.strip())
        )

    def _begin(self, action: Action) -> None:
        """Checks ``action`` against the table and leaves any error state."""
        current = self.interactive_state
        if self.is_busy or current not in TRANSITIONS[action]:
            raise ActionNotAllowed()
        self.session.state = current
        self.session.return_state = None
        self.session.error = None

    def _fail(self, message: str, return_state: AppState) -> None:
        self.session.state = AppState.ERROR
        self.session.error = message
        self.session.return_state = return_state

    def _clear_file(self) -> None:
        self.session.file_name = None
        self.session.resume_text = ""

    # --- user actions ---

    async def select_file(self, filename: str, read: Callable[[], Awaitable[bytes]]) -> None:
        """Reads and parses a newly selected resume file."""
        self._begin(Action.SELECT_FILE)
        generation = self._generation
        s = self.session
        s.state = AppState.PARSING_FILE
        s.file_name = filename
        s.resume_text = ""
        logger.info(f"📥 File selected: {filename}")

        try:
            data = await read()
            if generation != self._generation:
                logger.info("Discarding upload finished after reset")
                return
            text = self._extract(data, filename)
        except ReviserError as e:
            if generation != self._generation:
                logger.info("Discarding upload failure after reset")
                return
            logger.warning(f"⚠️  Could not parse {filename}: {e.message}")
            self._clear_file()
            self._fail(e.message, AppState.IDLE)
            raise
        except Exception as e:
            if generation != self._generation:
                logger.info("Discarding upload failure after reset")
                return
            logger.error(f"❌ Unexpected error during file processing: {e}", exc_info=True)
            self._clear_file()
            self._fail(DocumentParseError.default_message, AppState.IDLE)
            raise DocumentParseError() from e

        s.resume_text = text
        s.state = AppState.FILE_READY
        logger.info(f"✅ Resume ready. Extracted text: {len(text)} characters")

    def remove_file(self) -> None:
        self._begin(Action.REMOVE_FILE)
        self._clear_file()
        self.session.state = AppState.IDLE
        logger.info("🗑️  File removed")

    def set_job_description(self, text: str) -> None:
        self._begin(Action.EDIT_JOB_DESCRIPTION)
        self.session.job_description = text
        logger.debug(f"Job description length: {len(text)} characters")

    async def submit(self) -> Optional[AnalysisResult]:
        """Runs the analysis; returns None if a reset discarded it meanwhile."""
        if self.is_busy:
            raise ActionNotAllowed()
        if not self.can_submit:
            if self.interactive_state not in _EDITABLE:
                raise ActionNotAllowed()
            error = IncompleteUserInput()
            self.session.error = error.message
            raise error

        self._begin(Action.SUBMIT)
        generation = self._generation
        s = self.session
        s.state = AppState.ANALYZING
        s.result = None
        logger.info("🚀 Analyzing and revising resume...")
        logger.info(f"   Resume text length: {len(s.resume_text)} characters")
        logger.info(f"   Job Description length: {len(s.job_description)} characters")

        try:
            result = await self.analyzer.analyze(s.resume_text, s.job_description)
        except ReviserError as e:
            if generation != self._generation:
                logger.info("Discarding analysis failure after reset")
                return None
            message = e.message if isinstance(e, MissingCredential) else ANALYSIS_FAILED_MESSAGE
            self._fail(message, AppState.FILE_READY)
            raise type(e)(message) from e
        except Exception as e:
            if generation != self._generation:
                return None
            logger.error(f"❌ Unexpected error during analysis: {e}", exc_info=True)
            self._fail(ANALYSIS_FAILED_MESSAGE, AppState.FILE_READY)
            raise AnalysisRequestFailed(ANALYSIS_FAILED_MESSAGE) from e

        if generation != self._generation:
            logger.info("Discarding analysis result after reset")
            return None
        s.result = result
        s.state = AppState.RESULT_READY
        logger.info(f"✅ Analysis complete: {result.original_score} → {result.revised_score}")
        return result

    def reset(self) -> None:
        self._generation += 1
        self.session = Session()
        logger.info("🔄 Session reset")

    # --- results ---

    def _result(self) -> AnalysisResult:
        self._begin(Action.EXPORT)
        return self.session.result

    def export_text(self) -> str:
        return render_text(self._result().revised_resume)

    def export_pdf(self) -> io.BytesIO:
        return render_pdf(self._result().revised_resume)

    def export_docx(self) -> io.BytesIO:
        return render_docx(self._result().revised_resume)

    def copy_text(self, write: Callable[[str], Any]) -> str:
        """Hands the plain-text rendering to a clipboard writer."""
        text = self.export_text()
        try:
            write(text)
        except Exception as e:
            logger.error(f"❌ Failed to copy text: {e}")
            error = ClipboardWriteFailure()
            self.session.error = error.message
            raise error from e
        return text

    def snapshot(self) -> Dict[str, Any]:
        s = self.session
        view: Dict[str, Any] = {
            "state": s.state.value,
            "file_name": s.file_name,
            "resume_text_length": len(s.resume_text),
            "job_description": s.job_description,
            "can_submit": self.can_submit,
            "is_busy": self.is_busy,
            "error": s.error,
            "result": None,
        }
        if s.result is not None:
            view["result"] = {
                "original_score": s.result.original_score,
                "original_band": score_band(s.result.original_score),
                "revised_score": s.result.revised_score,
                "revised_band": score_band(s.result.revised_score),
                "feedback": s.result.feedback_points(),
            }
        return view
