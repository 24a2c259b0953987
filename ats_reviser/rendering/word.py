"""DOCX rendering with python-docx named styles."""

import io
import logging

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Inches, Pt

from ..models import StructuredResume
from . import common

logger = logging.getLogger(__name__)

FONT_NAME = "Calibri"
MARGIN = Inches(0.7)
PAGE_WIDTH = Inches(8.5)
CONTENT_WIDTH = Emu(PAGE_WIDTH - MARGIN * 2)

# pPr children that must come after w:pBdr
_PBDR_SUCCESSORS = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)


def _add_bottom_border(style) -> None:
    """Single rule under every paragraph of ``style``."""
    pPr = style.element.get_or_add_pPr()
    pBdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "auto")
    pBdr.append(bottom)
    pPr.insert_element_before(pBdr, *_PBDR_SUCCESSORS)


def _add_paragraph_style(doc, name: str, size: int = 11, bold: bool = False, italic: bool = False):
    style = doc.styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
    style.base_style = doc.styles["Normal"]
    style.font.size = Pt(size)
    style.font.bold = bold
    style.font.italic = italic
    return style


def _setup_styles(doc) -> None:
    normal = doc.styles["Normal"]
    normal.font.name = FONT_NAME
    normal.font.size = Pt(11)
    normal.paragraph_format.space_before = Pt(0)
    normal.paragraph_format.space_after = Pt(0)

    contact = _add_paragraph_style(doc, "Contact", size=10)
    contact.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.CENTER

    heading = _add_paragraph_style(doc, "Section Heading", size=12, bold=True)
    heading.font.all_caps = True
    _add_bottom_border(heading)
    heading.paragraph_format.space_before = Pt(12)
    heading.paragraph_format.space_after = Pt(6)
    heading.paragraph_format.keep_with_next = True

    job_title = _add_paragraph_style(doc, "Job Title", bold=True)
    job_title.paragraph_format.keep_with_next = True
    job_title.paragraph_format.tab_stops.add_tab_stop(CONTENT_WIDTH, WD_TAB_ALIGNMENT.RIGHT)

    company = _add_paragraph_style(doc, "Company", italic=True)
    company.paragraph_format.keep_with_next = True


def _add_title_with_date(doc, title: str, date: str) -> None:
    p = doc.add_paragraph(style="Job Title")
    p.add_run(title)
    if date:
        run_date = p.add_run(f"\t{date}")
        run_date.font.bold = False


def render_docx(resume: StructuredResume) -> io.BytesIO:
    """Generates a .docx file from the structured resume."""
    logger.debug("🔧 Creating DOCX file...")
    doc = Document()
    _setup_styles(doc)

    for section in doc.sections:
        section.page_width = PAGE_WIDTH
        section.page_height = Inches(11)
        section.top_margin = MARGIN
        section.bottom_margin = MARGIN
        section.left_margin = MARGIN
        section.right_margin = MARGIN

    # --- CONTACT INFO ---
    contact = resume.contact
    logger.debug(f"  Adding contact info: {contact.name}")
    p_name = doc.add_paragraph(common.clean(contact.name).upper(), style="Title")
    p_name.alignment = WD_ALIGN_PARAGRAPH.CENTER
    contact_text = common.contact_line(contact)
    if contact_text:
        doc.add_paragraph(contact_text, style="Contact")
    doc.add_paragraph()

    # --- SUMMARY ---
    if common.has_summary(resume):
        doc.add_paragraph(common.SUMMARY, style="Section Heading")
        doc.add_paragraph(common.clean(resume.summary))

    # --- SKILLS ---
    if resume.skills:
        logger.debug(f"  Adding Skills section ({len(resume.skills)} categories)")
        doc.add_paragraph(common.SKILLS, style="Section Heading")
        table = doc.add_table(rows=0, cols=2)
        table.autofit = False
        category_width = Emu(int(CONTENT_WIDTH * 0.2))
        widths = (category_width, Emu(CONTENT_WIDTH - category_width))
        for category in resume.skills:
            cells = table.add_row().cells
            run_category = cells[0].paragraphs[0].add_run(f"{common.clean(category.category)}:")
            run_category.font.bold = True
            cells[1].paragraphs[0].add_run(common.skills_text(category.skills))
            for cell, width in zip(cells, widths):
                cell.width = width

    # --- EXPERIENCE ---
    if resume.experience:
        logger.debug(f"  Adding Experience section ({len(resume.experience)} entries)")
        doc.add_paragraph(common.EXPERIENCE, style="Section Heading")
        for entry in resume.experience:
            _add_title_with_date(doc, common.clean(entry.role), common.clean(entry.dates))
            doc.add_paragraph(common.place_line(entry.location, entry.company), style="Company")
            for achievement in common.achievements(entry):
                doc.add_paragraph(achievement, style="List Bullet")
            doc.add_paragraph()

    # --- EDUCATION ---
    if resume.education:
        logger.debug(f"  Adding Education section ({len(resume.education)} entries)")
        doc.add_paragraph(common.EDUCATION, style="Section Heading")
        for entry in resume.education:
            _add_title_with_date(doc, common.clean(entry.degree), common.clean(entry.graduation_date))
            doc.add_paragraph(common.place_line(entry.location, entry.institution), style="Company")
            doc.add_paragraph()

    # --- SAVE TO BUFFER ---
    buffer = io.BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    logger.debug(f"✅ DOCX file created. Size: {len(buffer.getvalue())} bytes")
    return buffer
