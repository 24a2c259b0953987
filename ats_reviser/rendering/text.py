"""Plain-text rendering, used for the copy-to-clipboard output."""

from typing import List

from ..models import StructuredResume
from . import common


def render_text(resume: StructuredResume) -> str:
    lines: List[str] = [common.clean(resume.contact.name)]
    contact = common.contact_line(resume.contact)
    if contact:
        lines.append(contact)
    lines.append("")

    if common.has_summary(resume):
        lines += [common.SUMMARY, common.clean(resume.summary), ""]

    if resume.skills:
        lines.append(common.SKILLS)
        for category in resume.skills:
            lines.append(f"{common.clean(category.category)}: {common.skills_text(category.skills)}".rstrip())
        lines.append("")

    if resume.experience:
        lines.append(common.EXPERIENCE)
        for entry in resume.experience:
            lines.append(common.experience_header(entry))
            lines += [f"• {achievement}" for achievement in common.achievements(entry)]
            lines.append("")

    if resume.education:
        lines.append(common.EDUCATION)
        lines += [common.education_line(entry) for entry in resume.education]

    return "\n".join(lines).rstrip("\n") + "\n"
