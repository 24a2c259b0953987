"""
Uploaded resume ➜ plain text.

PDF goes through PyMuPDF, DOCX through python-docx. Each library sits behind
the same narrow ``extract_text(data) -> str`` interface so nothing else in the
app touches their document objects.
"""

import io
import logging
from typing import Dict, Protocol

import fitz  # PyMuPDF
from docx import Document
from docx.table import Table

from .errors import DocumentParseError, LegacyFormatUnsupported, UnsupportedFileType

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = (".pdf", ".doc", ".docx")


class TextExtractor(Protocol):
    def extract_text(self, data: bytes) -> str:
        ...


class PdfTextExtractor:
    """Page-by-page text, each page followed by a newline."""

    def extract_text(self, data: bytes) -> str:
        full_text = ""
        with fitz.open(stream=data, filetype="pdf") as doc:
            logger.info(f"✅ PDF opened successfully. Pages: {len(doc)}")
            for page_num, page in enumerate(doc):
                page_text = page.get_text("text")
                full_text += page_text + "\n"
                logger.debug(f"  Page {page_num + 1}: Extracted {len(page_text)} characters")
        return full_text


class DocxTextExtractor:
    """Raw text of body paragraphs and table cells, in document order."""

    def extract_text(self, data: bytes) -> str:
        doc = Document(io.BytesIO(data))
        lines = []
        for block in doc.iter_inner_content():
            if isinstance(block, Table):
                for row in block.rows:
                    for cell in row.cells:
                        lines.extend(p.text for p in cell.paragraphs)
            else:
                lines.append(block.text)
        logger.debug(f"  DOCX: Extracted {len(lines)} lines")
        return "\n".join(lines)


EXTRACTORS: Dict[str, TextExtractor] = {
    "pdf": PdfTextExtractor(),
    "docx": DocxTextExtractor(),
}


def file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()


def extract_text(data: bytes, filename: str) -> str:
    """
    Extracts the text of an uploaded resume.

    Raises LegacyFormatUnsupported for .doc, UnsupportedFileType for anything
    that is neither .pdf nor .docx, and DocumentParseError when the library
    cannot read the bytes.
    """
    extension = file_extension(filename)
    logger.info(f"📄 Starting resume parsing: {filename} ({len(data)} bytes)")

    if extension == "doc":
        raise LegacyFormatUnsupported()
    extractor = EXTRACTORS.get(extension)
    if extractor is None:
        raise UnsupportedFileType()

    try:
        text = extractor.extract_text(data)
    except Exception as e:
        logger.error(f"❌ Error parsing {extension.upper()}: {e}", exc_info=True)
        raise DocumentParseError() from e

    logger.info(f"✅ Parsing complete. Total text length: {len(text)} characters")
    return text
