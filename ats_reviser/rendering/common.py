"""Pieces shared by the text, PDF and DOCX renderings."""

from typing import List, Optional

from ..models import EducationEntry, ExperienceEntry, ResumeContact, StructuredResume

SUMMARY = "SUMMARY"
SKILLS = "SKILLS"
EXPERIENCE = "PROFESSIONAL EXPERIENCE"
EDUCATION = "EDUCATION"

CONTACT_SEPARATOR = " | "

PDF_FILENAME = "Revised_Resume.pdf"
DOCX_FILENAME = "Revised_Resume.docx"


def clean(text: Optional[str]) -> str:
    """Flattens line breaks into spaces and trims."""
    if not text:
        return ""
    return " ".join(text.replace("\r", " ").replace("\n", " ").split())


def clean_bullet_text(text: str) -> str:
    """Remove common bullet markers from the start of bullet text."""
    text = clean(text)
    if text.startswith("- ") or text.startswith("• ") or text.startswith("* "):
        text = text[2:].strip()
    elif text.startswith("-") or text.startswith("•") or text.startswith("*"):
        text = text[1:].strip()
    return text


def join_present(parts: List[Optional[str]], separator: str = CONTACT_SEPARATOR) -> str:
    return separator.join(p for p in (clean(part) for part in parts) if p)


def contact_line(contact: ResumeContact) -> str:
    return join_present([contact.location, contact.phone, contact.email, contact.linkedin])


def experience_header(entry: ExperienceEntry) -> str:
    return join_present([join_present([entry.role, entry.company], ", "), entry.location, entry.dates])


def education_line(entry: EducationEntry) -> str:
    return join_present([join_present([entry.degree, entry.institution], ", "), entry.location, entry.graduation_date])


def place_line(location: Optional[str], organisation: str) -> str:
    """Company/institution plus optional location, for the two-line entry blocks."""
    return join_present([organisation, location])


def skills_text(skills: List[str]) -> str:
    return ", ".join(s for s in (clean(skill) for skill in skills) if s)


def achievements(entry: ExperienceEntry) -> List[str]:
    return [a for a in (clean_bullet_text(text) for text in entry.achievements) if a]


def has_summary(resume: StructuredResume) -> bool:
    return bool(clean(resume.summary))
