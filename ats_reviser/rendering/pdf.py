"""
Paginated PDF rendering.

Two passes. ``layout_pdf`` turns the resume into blocks of already-wrapped
lines and places them top to bottom with a single cursor: a block that does
not fit in what is left of the page starts a new one, a line never straddles
two pages, and a section heading always lands on the same page as the first
block beneath it. ``render_pdf`` then draws the resulting page plan with the
reportlab canvas.
"""

import io
import logging
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..models import EducationEntry, ExperienceEntry, SkillCategory, StructuredResume
from . import common

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2
RIGHT_EDGE = PAGE_WIDTH - MARGIN

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

SZ_NAME = 26
SZ_CONTACT = 10
SZ_HEADING = 12
SZ_BODY = 11

LEADING = 1.25
CATEGORY_WIDTH = 120
BULLET_INDENT = 10
BULLET_TEXT_INDENT = 20
HEADING_SPACE_BEFORE = 14
HEADING_RULE_GAP = 5
HEADING_SPACE_AFTER = 10


@dataclass(frozen=True)
class Fragment:
    text: str
    font: str
    size: float
    x: float
    align: str = "left"  # left | center | right


@dataclass(frozen=True)
class Line:
    kind: str  # text | heading | rule | spacer
    height: float
    baseline: float = 0.0
    fragments: Tuple[Fragment, ...] = ()
    rule_at: Optional[float] = None


@dataclass
class Block:
    lines: List[Line]
    keep_with_next: bool = False

    @property
    def height(self) -> float:
        return sum(line.height for line in self.lines)

    @property
    def first_line_height(self) -> float:
        for line in self.lines:
            if line.kind != "spacer":
                return line.height
        return 0.0


@dataclass(frozen=True)
class PlacedLine:
    line: Line
    top: float  # distance from the top edge of the page


@dataclass
class Page:
    lines: List[PlacedLine] = field(default_factory=list)


# --- line builders ---

def _wrap(text: str, font: str, size: float, width: float) -> List[str]:
    return simpleSplit(text, font, size, width) if text else []


def _text_line(*fragments: Fragment) -> Line:
    size = max(f.size for f in fragments)
    return Line(kind="text", height=size * LEADING, baseline=size, fragments=fragments)


def _spacer(height: float) -> Line:
    return Line(kind="spacer", height=height)


def _paragraph(text: str, font: str, size: float, x: float = MARGIN, width: float = CONTENT_WIDTH,
               align: str = "left") -> List[Line]:
    anchor = {"left": x, "center": PAGE_WIDTH / 2, "right": RIGHT_EDGE}[align]
    return [_text_line(Fragment(chunk, font, size, anchor, align)) for chunk in _wrap(text, font, size, width)]


def _heading(title: str) -> Line:
    baseline = HEADING_SPACE_BEFORE + SZ_HEADING
    return Line(
        kind="heading",
        height=baseline + HEADING_RULE_GAP + HEADING_SPACE_AFTER,
        baseline=baseline,
        fragments=(Fragment(title.upper(), FONT_BOLD, SZ_HEADING, MARGIN),),
        rule_at=baseline + HEADING_RULE_GAP,
    )


def _title_with_date(title: str, date: str) -> List[Line]:
    """Bold title on the left, date flush right on the first line."""
    date = common.clean(date)
    date_width = stringWidth(date, FONT, SZ_BODY) + 10 if date else 0
    title_lines = _wrap(title, FONT_BOLD, SZ_BODY, CONTENT_WIDTH - date_width) or [""]
    lines = []
    for i, chunk in enumerate(title_lines):
        fragments = [Fragment(chunk, FONT_BOLD, SZ_BODY, MARGIN)]
        if i == 0 and date:
            fragments.append(Fragment(date, FONT, SZ_BODY, RIGHT_EDGE, "right"))
        lines.append(_text_line(*fragments))
    return lines


# --- blocks ---

def _header_block(resume: StructuredResume) -> Block:
    lines = _paragraph(common.clean(resume.contact.name), FONT_BOLD, SZ_NAME, align="center")
    lines += _paragraph(common.contact_line(resume.contact), FONT, SZ_CONTACT, align="center")
    lines.append(Line(kind="rule", height=12, rule_at=4))
    return Block(lines)


def _skill_block(category: SkillCategory) -> Block:
    label = _wrap(f"{common.clean(category.category)}:", FONT_BOLD, SZ_BODY, CATEGORY_WIDTH - 5)
    skills = _wrap(common.skills_text(category.skills), FONT, SZ_BODY, CONTENT_WIDTH - CATEGORY_WIDTH)
    lines = []
    for label_chunk, skills_chunk in zip_longest(label, skills):
        fragments = []
        if label_chunk:
            fragments.append(Fragment(label_chunk, FONT_BOLD, SZ_BODY, MARGIN))
        if skills_chunk:
            fragments.append(Fragment(skills_chunk, FONT, SZ_BODY, MARGIN + CATEGORY_WIDTH))
        lines.append(_text_line(*fragments))
    lines.append(_spacer(4))
    return Block(lines)


def _bullet_block(text: str) -> Block:
    chunks = _wrap(text, FONT, SZ_BODY, CONTENT_WIDTH - BULLET_TEXT_INDENT)
    lines = []
    for i, chunk in enumerate(chunks):
        fragments = [Fragment(chunk, FONT, SZ_BODY, MARGIN + BULLET_TEXT_INDENT)]
        if i == 0:
            fragments.insert(0, Fragment("•", FONT, SZ_BODY, MARGIN + BULLET_INDENT))
        lines.append(_text_line(*fragments))
    lines.append(_spacer(3))
    return Block(lines)


def _experience_blocks(entry: ExperienceEntry) -> List[Block]:
    lines = _title_with_date(common.clean(entry.role), entry.dates)
    lines += _paragraph(common.place_line(entry.location, entry.company), FONT_ITALIC, SZ_BODY)
    bullets = [_bullet_block(text) for text in common.achievements(entry)]
    header = Block(lines, keep_with_next=bool(bullets))
    if bullets:
        bullets[-1].lines.append(_spacer(8))
    else:
        header.lines.append(_spacer(8))
    return [header] + bullets


def _education_block(entry: EducationEntry) -> Block:
    lines = _title_with_date(common.clean(entry.degree), entry.graduation_date or "")
    lines += _paragraph(common.place_line(entry.location, entry.institution), FONT_ITALIC, SZ_BODY)
    lines.append(_spacer(6))
    return Block(lines)


def build_blocks(resume: StructuredResume) -> List[Block]:
    """Resume ➜ ordered blocks; section headings keep with what follows."""
    blocks = [_header_block(resume)]

    def section(title: str, content: List[Block]) -> None:
        blocks.append(Block([_heading(title)], keep_with_next=True))
        blocks.extend(content)

    if common.has_summary(resume):
        section(common.SUMMARY, [Block(_paragraph(common.clean(resume.summary), FONT, SZ_BODY))])
    if resume.skills:
        section(common.SKILLS, [_skill_block(category) for category in resume.skills])
    if resume.experience:
        section(common.EXPERIENCE, [b for entry in resume.experience for b in _experience_blocks(entry)])
    if resume.education:
        section(common.EDUCATION, [_education_block(entry) for entry in resume.education])
    return blocks


# --- pagination ---

def _chain(blocks: List[Block], start: int, usable: float) -> Tuple[float, int]:
    """Height needed by the block at ``start`` and the blocks it is kept with, and the chain's last index."""
    total = 0.0
    j = start
    while blocks[j].keep_with_next and j + 1 < len(blocks):
        total += blocks[j].height
        j += 1
    last = blocks[j]
    if total + last.height <= usable:
        return total + last.height, j
    # the chain cannot fit on any page: only its first line has to travel with it
    return total + last.first_line_height, j


def paginate(blocks: List[Block], page_height: float = PAGE_HEIGHT, margin: float = MARGIN) -> List[Page]:
    bottom = page_height - margin
    usable = bottom - margin
    pages = [Page()]
    y = margin
    committed = -1  # blocks up to this index were already measured with their chain

    for i, block in enumerate(blocks):
        if i > committed:
            needed, committed = _chain(blocks, i, usable)
            if pages[-1].lines and y + needed > bottom:
                pages.append(Page())
                y = margin

        for line in block.lines:
            if line.kind == "spacer":
                # spacers never push content to a new page
                if pages[-1].lines and y + line.height <= bottom:
                    y += line.height
                continue
            if pages[-1].lines and y + line.height > bottom:
                pages.append(Page())
                y = margin
            pages[-1].lines.append(PlacedLine(line, y))
            y += line.height

    return pages


def layout_pdf(resume: StructuredResume) -> List[Page]:
    return paginate(build_blocks(resume))


# --- drawing ---

def _draw_page(pdf: canvas.Canvas, page: Page) -> None:
    for placed in page.lines:
        line = placed.line
        y = PAGE_HEIGHT - (placed.top + line.baseline)
        for fragment in line.fragments:
            pdf.setFont(fragment.font, fragment.size)
            if fragment.align == "center":
                pdf.drawCentredString(fragment.x, y, fragment.text)
            elif fragment.align == "right":
                pdf.drawRightString(fragment.x, y, fragment.text)
            else:
                pdf.drawString(fragment.x, y, fragment.text)
        if line.rule_at is not None:
            rule_y = PAGE_HEIGHT - (placed.top + line.rule_at)
            pdf.setStrokeGray(0.6 if line.kind == "heading" else 0.8)
            pdf.setLineWidth(0.75)
            pdf.line(MARGIN, rule_y, RIGHT_EDGE, rule_y)


def render_pdf(resume: StructuredResume) -> io.BytesIO:
    """Generates a .pdf file from the structured resume."""
    logger.debug("🔧 Creating PDF file...")
    pages = layout_pdf(resume)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(f"{common.clean(resume.contact.name)} - Resume")
    for page in pages:
        _draw_page(pdf, page)
        pdf.showPage()
    pdf.save()

    buffer.seek(0)
    logger.debug(f"✅ PDF file created. Pages: {len(pages)}, Size: {len(buffer.getvalue())} bytes")
    return buffer
