"""
Error kinds surfaced to the user.

Every error carries the message shown in the UI and the HTTP status the web
surface answers with.
"""

from typing import Optional


class ReviserError(Exception):
    status_code = 400
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnsupportedFileType(ReviserError):
    status_code = 415
    default_message = "Unsupported file type. Please upload a .pdf or .docx file."


class LegacyFormatUnsupported(ReviserError):
    status_code = 415
    default_message = ".doc files are not supported. Please save as .docx or .pdf."


class DocumentParseError(ReviserError):
    status_code = 422
    default_message = "Failed to parse file."


class IncompleteUserInput(ReviserError):
    default_message = "Please provide both your resume and the job description."


class MissingCredential(ReviserError):
    status_code = 500
    default_message = "API key is not configured. Set GEMINI_API_KEY."


class AnalysisRequestFailed(ReviserError):
    status_code = 502
    default_message = "Failed to get analysis from the AI. The model may have returned an invalid response."


class MalformedModelResponse(ReviserError):
    status_code = 502
    default_message = "Failed to parse the AI's response. The format was invalid."


class ClipboardWriteFailure(ReviserError):
    status_code = 500
    default_message = "Copy failed."


class ActionNotAllowed(ReviserError):
    status_code = 409
    default_message = "That action is not available right now."
