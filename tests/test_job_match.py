from datetime import date

from job_match import analyze_job_match, compare_skills, fallback_job_match, job_terms
from llm_manager import LLMError
from resume_model import ResumeData

JOB = "We need Python, Django and React experience with AWS."


def test_job_terms_in_vocabulary_order():
    assert job_terms(JOB) == ["Python", "React", "Django", "AWS"]


def test_compare_skills():
    resume = ResumeData.from_dict({"skills": ["Python", "react", "Excel"]})
    assert compare_skills(resume, JOB) == {
        "matchedSkills": ["Python", "react"],
        "missingSkills": ["Django", "AWS"],
    }


def test_compare_skills_keeps_symbols_apart():
    resume = ResumeData.from_dict({"skills": ["C#"]})
    assert compare_skills(resume, "Strong C++ required.") == {
        "matchedSkills": [],
        "missingSkills": ["C++"],
    }


def test_compare_skills_does_not_hide_longer_terms():
    resume = ResumeData.from_dict({"skills": ["CSS", "Testing"]})

    result = compare_skills(resume, "Tailwind CSS, Unit Testing and Integration Testing.")

    assert result["matchedSkills"] == ["CSS", "Testing"]
    assert result["missingSkills"] == ["Tailwind CSS", "Unit Testing", "Integration Testing"]


def test_compare_skills_accepts_spelling_variants():
    resume = ResumeData.from_dict({"skills": ["NodeJS"]})
    assert compare_skills(resume, "We run Node.js services.") == {
        "matchedSkills": ["NodeJS"],
        "missingSkills": [],
    }


def test_fallback_scores_experience_only():
    resume = ResumeData.from_dict({
        "workExperience": [{"company": "Acme", "position": "Dev", "startDate": "2015-01", "endDate": "2020-01"}],
    })

    result = fallback_job_match(resume, JOB, today=date(2024, 1, 1))

    assert result["compatibilityScore"] == 50
    assert result["verdict"] == "MAYBE"
    assert result["redFlags"] == [
        "Weak or missing professional summary",
        "No projects to demonstrate practical skills",
    ]
    assert result["criticalGaps"][0]["severity"] == "MAJOR"
    assert result["competitionAnalysis"]["candidateLevel"] == "MID"
    assert result["missingSkills"] == ["Python", "React", "Django", "AWS"]


def test_fallback_score_is_capped():
    resume = ResumeData.from_dict({
        "personalInfo": {"summary": "s" * 150},
        "workExperience": [{"company": "Acme", "position": "Dev", "startDate": "2015-01", "endDate": "2020-01"}],
        "projects": [{"title": "Tool"}],
        "certifications": [{"name": "AWS SA"}],
        "skills": [f"Skill{i}" for i in range(10)],
    })

    result = fallback_job_match(resume, JOB)

    assert result["compatibilityScore"] == 85
    assert result["verdict"] == "STRONG_MATCH"
    assert result["redFlags"] == []
    assert result["strengths"][0]["relevance"] == "MEDIUM"


def test_fallback_for_beginner():
    result = fallback_job_match(ResumeData(), JOB)

    assert result["compatibilityScore"] == 30
    assert result["verdict"] == "REJECT"
    assert result["criticalGaps"][0]["severity"] == "DEALBREAKER"
    assert "Extremely limited professional experience" in result["redFlags"]
    assert result["competitionAnalysis"]["candidateLevel"] == "BEGINNER"


def test_analyze_job_match_adds_skill_comparison(make_llm):
    resume = ResumeData.from_dict({"skills": ["Python"]})
    llm = make_llm([{"compatibilityScore": 42, "verdict": "MAYBE", "missingSkills": ["Kafka"]}])

    result = analyze_job_match(resume, JOB, llm=llm)

    assert result["compatibilityScore"] == 42
    assert result["matchedSkills"] == ["Python"]
    assert result["missingSkills"] == ["Kafka"]
    assert JOB in llm.prompts[0]


def test_analyze_job_match_falls_back(make_llm):
    result = analyze_job_match(ResumeData(), JOB, llm=make_llm(error=LLMError("down")))
    assert result["verdict"] == "REJECT"
