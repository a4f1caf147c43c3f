import pytest

from resume_builder_templates import (
    TEMPLATES,
    get_template,
    list_templates,
    render_html,
    suggest_template,
    visible_sections,
)
from resume_model import RESUME_TEMPLATES, ResumeData


def test_registry_covers_every_template_name():
    assert tuple(TEMPLATES) == RESUME_TEMPLATES
    assert [t["name"] for t in list_templates()] == list(RESUME_TEMPLATES)


def test_get_template_falls_back_to_modern():
    assert get_template("EXECUTIVE").name == "executive"
    assert get_template("unknown").name == "modern"
    assert get_template(None).name == "modern"


@pytest.mark.parametrize("industry, experience, expected", [
    ("tech", "entry", "modern"),
    ("finance", None, "classic"),
    ("healthcare", "entry", "minimal"),
    ("healthcare", "senior", None),
    (None, None, None),
])
def test_suggest_template(industry, experience, expected):
    assert suggest_template(industry, experience) == expected


def test_visible_sections_follow_template_order(sample_resume):
    assert visible_sections(sample_resume, get_template("technical")) == [
        "summary", "skills", "workExperience", "education",
    ]
    assert visible_sections(ResumeData(), get_template("modern")) == []


def test_render_html(sample_resume):
    sample_resume.selectedTemplate = "classic"
    html = render_html(sample_resume)

    assert "template-classic" in html
    assert "Jane Doe" in html
    assert "Senior Software Engineer" in html
    assert "Projects" not in html


def test_render_html_escapes_user_text():
    resume = ResumeData.from_dict({"personalInfo": {"fullName": "<script>x</script>"}})
    html = render_html(resume, "minimal")
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html
