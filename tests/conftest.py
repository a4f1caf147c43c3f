import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from llm_manager import LLMResponseError, LLMUnavailableError, reset_llm
from resume_model import ResumeData

SAMPLE_RESUME_TEXT = """Jane Doe
jane.doe@example.com | (555) 123-4567 | San Francisco, CA 94105
linkedin.com/in/janedoe | https://github.com/janedoe | https://janedoe.dev

SUMMARY
Senior software engineer with 8 years of experience building scalable web platforms and leading small teams.

EXPERIENCE
Senior Software Engineer at Acme Corp | San Francisco, CA
Jan 2020 - Present
• Led migration of monolith to microservices, cutting deploy time by 40%
• Mentored five engineers across two product teams
Software Engineer - Globex
06/2016 - 12/2019
• Built internal analytics dashboards used by 200 analysts

EDUCATION
Bachelor of Science in Computer Science - Stanford University - 2016

SKILLS
Python, JavaScript, React, PostgreSQL, Docker
AWS | Kubernetes
"""


class FakeLLM:
    """Scripted stand-in for LLMManager: returns queued dicts or raises."""

    def __init__(self, responses=None, available=True, error=None):
        self.responses = list(responses or [])
        self.available = available
        self.provider = "fake" if available else None
        self.error = error
        self.prompts = []

    def generate_json(self, prompt, temperature=0.4, max_tokens=6000):
        self.prompts.append(prompt)
        if not self.available:
            raise LLMUnavailableError("No LLM provider available")
        if self.error is not None:
            raise self.error
        if not self.responses:
            raise LLMResponseError("No scripted response left")
        return self.responses.pop(0)


@pytest.fixture(autouse=True)
def fresh_llm():
    reset_llm()
    yield
    reset_llm()


@pytest.fixture
def sample_text():
    return SAMPLE_RESUME_TEXT


@pytest.fixture
def offline_llm():
    return FakeLLM(available=False)


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def sample_resume():
    return ResumeData.from_dict({
        "personalInfo": {
            "fullName": "Jane Doe",
            "email": "jane.doe@example.com",
            "phone": "(555) 123-4567",
            "location": "San Francisco, CA",
            "summary": "Engineer.",
        },
        "workExperience": [
            {
                "id": "work_1",
                "company": "Acme Corp",
                "position": "Senior Software Engineer",
                "startDate": "2020-01",
                "endDate": "2022-01",
                "description": "Built services",
            },
        ],
        "education": [
            {"id": "edu_1", "school": "Stanford University", "degree": "BS", "field": "Computer Science"},
        ],
        "skills": [
            {"id": "s1", "name": "Python", "level": "expert", "category": "Technical"},
            {"id": "s2", "name": "React", "level": "advanced", "category": "Technical"},
        ],
        "selectedTemplate": "modern",
    })


def build_pdf(lines):
    """Small real PDF with one line of text per entry."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    y = 720
    for line in lines:
        pdf.drawString(72, y, line)
        y -= 18
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes():
    return build_pdf([
        "Jane Doe",
        "jane.doe@example.com",
        "Senior Software Engineer at Acme Corp",
        "Skills: Python, React, Docker",
    ])
