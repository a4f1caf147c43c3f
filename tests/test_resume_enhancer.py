import pytest

from llm_manager import LLMError
from resume_enhancer import (
    FALLBACK_SUMMARY,
    MARKET_SKILLS,
    add_skills,
    apply_job_optimizations,
    apply_suggestion,
    fallback_suggestions,
    generate_enhancements,
    normalize_enhancement_type,
    quick_enhance,
)
from resume_model import ResumeData


def test_normalize_enhancement_type():
    assert normalize_enhancement_type("Skills") == "skills"
    assert normalize_enhancement_type(None) == "comprehensive"
    assert normalize_enhancement_type("bogus") == "comprehensive"


def test_fallback_suggestions(sample_resume):
    suggestions = fallback_suggestions(sample_resume)

    assert [s["id"] for s in suggestions] == ["summary_enhancement", "skills_enhancement"]
    assert suggestions[0]["applicableData"]["value"] == FALLBACK_SUMMARY
    added = suggestions[1]["applicableData"]["value"]
    assert [s["name"] for s in added] == MARKET_SKILLS


def test_fallback_suggestions_skip_present_skills():
    resume = ResumeData.from_dict({
        "personalInfo": {"summary": "s" * 120},
        "skills": [{"name": name} for name in MARKET_SKILLS],
    })
    assert fallback_suggestions(resume) == []


def test_generate_enhancements_from_model(make_llm, sample_resume):
    llm = make_llm([{"suggestions": [{"id": "a", "title": "Add metrics"}, "junk"]}])

    suggestions = generate_enhancements(sample_resume, "experience", llm=llm)

    assert suggestions == [{"id": "a", "title": "Add metrics"}]
    assert "experience descriptions" in llm.prompts[0]


def test_generate_enhancements_non_list_is_empty(make_llm, sample_resume):
    assert generate_enhancements(sample_resume, llm=make_llm([{"suggestions": "nope"}])) == []


def test_generate_enhancements_fallback(make_llm, sample_resume):
    llm = make_llm(error=LLMError("quota"))
    assert generate_enhancements(sample_resume, llm=llm) == fallback_suggestions(sample_resume)


def test_apply_summary_suggestion_returns_copy(sample_resume):
    updated = apply_suggestion(sample_resume, {"section": "personalInfo", "field": "summary", "value": "New"})

    assert updated.personalInfo.summary == "New"
    assert sample_resume.personalInfo.summary == "Engineer."


def test_apply_skills_suggestion_dedupes(sample_resume):
    updated = apply_suggestion(sample_resume, {
        "section": "skills",
        "field": "add",
        "value": [{"name": "python"}, {"name": "Docker", "level": "advanced"}],
    })

    assert [s.name for s in updated.skills] == ["Python", "React", "Docker"]
    assert updated.skills[-1].level == "advanced"


def test_apply_experience_field_by_index(sample_resume):
    updated = apply_suggestion(sample_resume, {
        "section": "experience",
        "index": "0",
        "field": "description",
        "value": "Cut costs by 30%",
    })
    assert updated.workExperience[0].description == "Cut costs by 30%"


@pytest.mark.parametrize("data", [
    {},
    {"section": "hobbies", "field": "x", "value": "y"},
    {"section": "workExperience", "index": 5, "field": "description", "value": "x"},
    {"section": "workExperience", "index": 0, "field": "salary", "value": "x"},
    {"section": "skills", "field": "remove", "value": "Python"},
])
def test_apply_suggestion_rejects_bad_data(sample_resume, data):
    with pytest.raises(ValueError):
        apply_suggestion(sample_resume, data)


def test_add_skills_accepts_strings():
    resume = ResumeData()
    assert add_skills(resume, ["Go", "go", "Rust"]) == 2
    assert [s.name for s in resume.skills] == ["Go", "Rust"]


def test_quick_enhance_applies_model_changes(make_llm, sample_resume):
    llm = make_llm([{
        "personalInfo": {"summary": "Sharper summary"},
        "skillsToAdd": ["Docker", "Python"],
        "experienceEnhancements": [{"id": "work_1", "enhancement": "Shipped 12 services"}],
    }])

    updated = quick_enhance(sample_resume, llm=llm)

    assert updated.personalInfo.summary == "Sharper summary"
    assert [s.name for s in updated.skills] == ["Python", "React", "Docker"]
    assert updated.workExperience[0].description == "Shipped 12 services"


def test_quick_enhance_without_model_is_a_no_op(make_llm, sample_resume):
    assert quick_enhance(sample_resume, llm=make_llm(available=False)) is sample_resume
    assert quick_enhance(sample_resume, llm=make_llm(error=LLMError("down"))) is sample_resume


def test_apply_job_optimizations(sample_resume):
    updated = apply_job_optimizations(
        sample_resume,
        add_skills_list=["Django"],
        job_title="Backend Engineer",
        enhance_summary=True,
    )

    assert [s.name for s in updated.skills] == ["Python", "React", "Django"]
    assert updated.personalInfo.summary == (
        "Engineer. Seeking opportunities as Backend Engineer to leverage expertise in Python, React."
    )
