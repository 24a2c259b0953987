import io

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn

from ats_reviser.rendering import render_docx


def _open(resume):
    return Document(io.BytesIO(render_docx(resume).getvalue()))


def test_named_styles(resume):
    doc = _open(resume)
    names = {style.name for style in doc.styles}

    assert {"Contact", "Section Heading", "Job Title", "Company"} <= names
    heading = doc.styles["Section Heading"]
    assert heading.font.bold is True
    assert heading.element.pPr.find(qn("w:pBdr")) is not None


def test_title_and_contact_line(resume):
    paragraphs = _open(resume).paragraphs

    assert paragraphs[0].text == "JANE DOE"
    assert paragraphs[0].style.name == "Title"
    assert paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert paragraphs[1].style.name == "Contact"
    assert paragraphs[1].text == "Austin, TX | +1 555 010 2020 | jane.doe@example.com | https://linkedin.com/in/janedoe"


def test_section_headings_in_order(resume):
    headings = [p.text for p in _open(resume).paragraphs if p.style.name == "Section Heading"]
    assert headings == ["SUMMARY", "SKILLS", "PROFESSIONAL EXPERIENCE", "EDUCATION"]


def test_skills_table(resume):
    doc = _open(resume)

    assert len(doc.tables) == 1
    rows = [[cell.text for cell in row.cells] for row in doc.tables[0].rows]
    assert rows == [
        ["Programming Languages:", "Python, Go, SQL"],
        ["Cloud Technologies:", "Azure DevOps, Kubernetes, Terraform"],
    ]


def test_experience_blocks(resume):
    paragraphs = _open(resume).paragraphs
    titles = [p.text for p in paragraphs if p.style.name == "Job Title"]
    companies = [p.text for p in paragraphs if p.style.name == "Company"]
    bullets = [p.text for p in paragraphs if p.style.name == "List Bullet"]

    assert titles[:2] == ["Senior Software Engineer\tJan 2020 - Present", "Software Engineer\tJun 2016 - Dec 2019"]
    assert titles[2] == "B.S. Computer Science\tMay 2016"
    assert companies == ["Initech | Austin, TX", "Globex", "University of Texas | Austin, TX"]
    assert bullets == [a for entry in resume.experience for a in entry.achievements]
