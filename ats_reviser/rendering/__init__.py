"""Resume renderers: plain text, paginated PDF and DOCX."""

from .common import DOCX_FILENAME, PDF_FILENAME
from .pdf import layout_pdf, render_pdf
from .text import render_text
from .word import render_docx

__all__ = ["render_text", "render_pdf", "render_docx", "layout_pdf", "PDF_FILENAME", "DOCX_FILENAME"]
