"""Revision prompt and the response schema handed to Gemini."""

import re

RESUME_REVISION_PROMPT_TEMPLATE = """As an expert ATS Optimization Specialist and professional resume writer, your primary goal is to revise the provided resume to achieve an ATS match score of over 85% against the target job description. You will deconstruct the original resume and the job description, then construct a new, optimized resume within a structured JSON format.

Current Resume:
---
[Insert Resume Here]
---

Target Job Description:
---
[Insert Job Description Here]
---

Follow these instructions meticulously to generate the content for the JSON fields:

1.  **originalAtsScore & revisedAtsScore**:
    *   Calculate a score from 0-100 representing how well the resume aligns with the job description based on keywords, skills, and experience.
    *   The 'originalAtsScore' is for the provided resume.
    *   The 'revisedAtsScore' is for the resume you are creating. This score MUST be significantly higher, reflecting the goal of 85%+.

2.  **feedback**:
    *   Provide a concise, bulleted list (using markdown like '*') of the key changes you made and why. Be specific. For example: "* Infused 'Azure DevOps' and 'CI/CD pipeline' throughout the experience section to align with core job requirements."

3.  **revisedResume (Structured JSON Object)**:
    *   **contact**: Parse the name, email, phone, location, and LinkedIn from the original resume. If a field is not present, omit it.
    *   **summary**: Write a concise, powerful summary (2-4 sentences) tailored to the job description and packed with relevant keywords from the JD.
    *   **skills**: Create an array of skill objects. Each object must have a 'category' (e.g., "Programming Languages", "Cloud Technologies") and a 'skills' array containing specific skills from the job description.
    *   **experience**:
        *   For each job entry from the original resume, create a corresponding object.
        *   **You MUST NOT change the employment dates (dates field) or duration for any role.** The timeline must remain exactly as in the original.
        *   Rewrite the bullet points ('achievements') to highlight quantifiable results. Use strong action verbs (e.g., Spearheaded, Architected, Optimized, Delivered).
        *   If the resume mentions a technology and the JD requires an equivalent, replace it in the achievements.
        *   Strategically weave keywords from the JD into the achievement descriptions.
    *   **education**: Parse the degree, institution, and graduation date for each educational entry.

The final output MUST be a valid JSON object matching the provided schema.
"""

REQUIRED_RESPONSE_FIELDS = ("originalAtsScore", "revisedAtsScore", "feedback", "revisedResume")

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}

CONTACT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": _STRING,
        "email": _STRING,
        "phone": _STRING,
        "linkedin": _STRING,
        "location": _STRING,
    },
    "required": ["name"],
}

EXPERIENCE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "role": _STRING,
        "company": _STRING,
        "location": _STRING,
        "dates": _STRING,
        "achievements": _STRING_LIST,
    },
    "required": ["role", "company", "dates", "achievements"],
}

EDUCATION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "degree": _STRING,
        "institution": _STRING,
        "location": _STRING,
        "graduationDate": _STRING,
    },
    "required": ["degree", "institution"],
}

SKILL_CATEGORY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "category": _STRING,
        "skills": _STRING_LIST,
    },
    "required": ["category", "skills"],
}

REVISED_RESUME_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "contact": CONTACT_SCHEMA,
        "summary": _STRING,
        "skills": {"type": "ARRAY", "items": SKILL_CATEGORY_SCHEMA},
        "experience": {"type": "ARRAY", "items": EXPERIENCE_SCHEMA},
        "education": {"type": "ARRAY", "items": EDUCATION_SCHEMA},
    },
    "required": ["contact", "summary", "skills", "experience", "education"],
}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "originalAtsScore": {"type": "NUMBER", "description": "ATS score for the original resume (0-100)."},
        "revisedAtsScore": {"type": "NUMBER", "description": "ATS score for the revised resume (0-100), aiming for 85%+."},
        "feedback": {
            "type": "STRING",
            "description": "Concise feedback on the changes made, using markdown for lists (e.g., '* Point 1').",
        },
        "revisedResume": REVISED_RESUME_SCHEMA,
    },
    "required": list(REQUIRED_RESPONSE_FIELDS),
}


_PLACEHOLDER_RE = re.compile(r"\[Insert (Resume|Job Description) Here\]")


def build_revision_prompt(resume_text: str, job_description: str) -> str:
    # one pass, so placeholder-like text inside the inputs stays verbatim
    values = {"Resume": resume_text, "Job Description": job_description}
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], RESUME_REVISION_PROMPT_TEMPLATE)
