import copy
import io

import fitz
import pytest
from docx import Document

from ats_reviser.models import AnalysisResult, StructuredResume

RESUME_JSON = {
    "contact": {
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "phone": "+1 555 010 2020",
        "linkedin": "https://linkedin.com/in/janedoe",
        "location": "Austin, TX",
    },
    "summary": "Backend engineer with eight years of experience building Python services on Azure.",
    "skills": [
        {"category": "Programming Languages", "skills": ["Python", "Go", "SQL"]},
        {"category": "Cloud Technologies", "skills": ["Azure DevOps", "Kubernetes", "Terraform"]},
    ],
    "experience": [
        {
            "role": "Senior Software Engineer",
            "company": "Initech",
            "location": "Austin, TX",
            "dates": "Jan 2020 - Present",
            "achievements": [
                "Architected a CI/CD pipeline on Azure DevOps, cutting release time by 40%.",
                "Delivered a FastAPI billing service handling 2M requests per day.",
                "Spearheaded migration of 30 services to Kubernetes.",
            ],
        },
        {
            "role": "Software Engineer",
            "company": "Globex",
            "dates": "Jun 2016 - Dec 2019",
            "achievements": [
                "Optimized PostgreSQL queries, reducing report latency by 65%.",
                "Built internal tooling in Go used by 120 engineers.",
                "Mentored four junior developers through code review.",
            ],
        },
    ],
    "education": [
        {
            "degree": "B.S. Computer Science",
            "institution": "University of Texas",
            "location": "Austin, TX",
            "graduationDate": "May 2016",
        }
    ],
}

ANALYSIS_JSON = {
    "originalAtsScore": 48,
    "revisedAtsScore": 91,
    "feedback": (
        "* Infused 'Azure DevOps' and 'CI/CD pipeline' throughout the experience section.\n"
        "* Rephrased achievements to include quantifiable metrics."
    ),
    "revisedResume": RESUME_JSON,
}


@pytest.fixture
def resume_json():
    return copy.deepcopy(RESUME_JSON)


@pytest.fixture
def analysis_json():
    return copy.deepcopy(ANALYSIS_JSON)


@pytest.fixture
def resume(resume_json):
    return StructuredResume.model_validate(resume_json)


@pytest.fixture
def analysis_result(analysis_json):
    return AnalysisResult.model_validate(analysis_json)


@pytest.fixture
def long_resume(resume_json):
    """Enough experience to need several pages."""
    entries = []
    for i in range(12):
        entries.append({
            "role": f"Engineer {i}",
            "company": f"Company {i}",
            "location": "Remote",
            "dates": f"Jan {2000 + i} - Dec {2000 + i}",
            "achievements": [
                f"Achievement {i}-{j}: improved throughput of the ingestion pipeline by {10 + j}% "
                f"while reducing infrastructure spend across three regions and two clouds."
                for j in range(4)
            ],
        })
    resume_json["experience"] = entries
    resume_json["summary"] = " ".join(["Seasoned engineer focused on reliable distributed systems."] * 12)
    return StructuredResume.model_validate(resume_json)


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs, table_rows=()) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=0, cols=len(table_rows[0]))
        for row in table_rows:
            cells = table.add_row().cells
            for cell, text in zip(cells, row):
                cell.text = text
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def pdf_text(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return "\n".join(page.get_text("text") for page in doc)


def docx_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.extend(cell.text for cell in row.cells)
    return "\n".join(lines)


def squash(text: str) -> str:
    return " ".join(text.split())
