import pytest

from ats_reviser.errors import DocumentParseError, LegacyFormatUnsupported, UnsupportedFileType
from ats_reviser.extraction import extract_text, file_extension

from conftest import make_docx, make_pdf


def test_pdf_text_is_extracted_page_by_page():
    data = make_pdf("Jane Doe\nSenior Engineer", "Education\nB.S. Computer Science")

    text = extract_text(data, "resume.pdf")

    assert text.index("Jane Doe") < text.index("B.S. Computer Science")
    assert "Senior Engineer" in text
    assert text.endswith("\n")


def test_extension_is_case_insensitive():
    text = extract_text(make_pdf("Jane Doe"), "RESUME.PDF")
    assert "Jane Doe" in text


def test_docx_paragraphs_and_tables():
    data = make_docx(
        ["Jane Doe", "Backend engineer"],
        table_rows=[("Languages", "Python, Go")],
    )

    text = extract_text(data, "resume.docx")

    assert text.splitlines()[:2] == ["Jane Doe", "Backend engineer"]
    assert "Languages" in text
    assert "Python, Go" in text


def test_legacy_doc_is_rejected():
    with pytest.raises(LegacyFormatUnsupported) as exc_info:
        extract_text(b"\xd0\xcf\x11\xe0", "resume.doc")
    assert ".doc files are not supported" in exc_info.value.message


@pytest.mark.parametrize("filename", ["resume.txt", "resume.rtf", "resume"])
def test_other_types_are_rejected(filename):
    with pytest.raises(UnsupportedFileType):
        extract_text(b"plain text", filename)


@pytest.mark.parametrize("filename", ["broken.pdf", "broken.docx"])
def test_unreadable_bytes(filename):
    with pytest.raises(DocumentParseError):
        extract_text(b"this is not really a document", filename)


def test_file_extension():
    assert file_extension("my.resume.DOCX") == "docx"
    assert file_extension("noext") == ""
