from datetime import date

from resume_model import ResumeData, WorkExperience
from resume_utils import (
    calculate_duration,
    calculate_total_experience,
    load_resume_data,
    parse_year_month,
    render_resume_for_analysis,
    render_resume_for_job_match,
    save_resume_data,
)


def test_parse_year_month():
    assert parse_year_month("2021-06") == (2021, 6)
    assert parse_year_month("2019") == (2019, 1)
    assert parse_year_month("2019-13") is None
    assert parse_year_month("Jan 2020") is None
    assert parse_year_month("") is None


def test_calculate_duration():
    assert calculate_duration("2020-01", "2021-03") == "1 year 2 months"
    assert calculate_duration("2020-01", "2022-01") == "2 years"
    assert calculate_duration("2020-01", "2020-02") == "1 month"
    assert calculate_duration("", "2020-02") == "Unknown duration"


def test_calculate_duration_current_uses_today():
    assert calculate_duration("2020-01", "", current=True, today=date(2022, 1, 15)) == "2 years"


def test_total_experience_ignores_negative_spans():
    work = [
        WorkExperience(startDate="2018-01", endDate="2020-01"),
        WorkExperience(startDate="2020-01", endDate="2020-07"),
        WorkExperience(startDate="2021-01", endDate="2020-01"),
        WorkExperience(startDate="", endDate=""),
    ]
    assert calculate_total_experience(work) == 2.5


def test_render_for_analysis_uses_placeholders():
    text = render_resume_for_analysis(ResumeData())
    assert "Name: Not provided" in text
    assert "No professional summary provided" in text


def test_render_for_job_match_flags_gaps(sample_resume):
    text = render_resume_for_job_match(sample_resume, today=date(2024, 1, 1))
    assert "WORK EXPERIENCE (1 positions):" in text
    assert "Duration: 2 years" in text
    assert "PROJECTS: None listed - MAJOR RED FLAG for technical roles" in text
    assert text.endswith("TOTAL PROFESSIONAL EXPERIENCE: ~2.0 years")


def test_save_and_load_yaml(tmp_path, sample_resume):
    path = save_resume_data(tmp_path / "resume.yml", sample_resume)
    loaded = load_resume_data(path)
    assert loaded.personalInfo.fullName == "Jane Doe"
    assert [s.name for s in loaded.skills] == ["Python", "React"]


def test_save_and_load_json(tmp_path, sample_resume):
    path = save_resume_data(tmp_path / "nested" / "resume.json", sample_resume)
    loaded = load_resume_data(path)
    assert loaded.personalInfo.email == "jane.doe@example.com"
    assert loaded.workExperience[0].id == "work_1"
    assert [s.name for s in loaded.skills] == ["Python", "React"]


def test_load_empty_json(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")
    assert load_resume_data(path).personalInfo.fullName == ""
