import io

import pytest
from docx import Document

from llm_manager import LLMResponseError
from resume_parser import (
    DOCX_MIME,
    RAW_CONTENT_TITLE,
    UploadError,
    ai_structure_from_text,
    build_resume_data_from_text,
    clean_extracted_text,
    convert_date_to_iso,
    extract_pdf_text,
    extract_text,
    import_resume,
    merge_structured,
    parse_pdf_upload,
    parse_text_to_resume_data,
    skill_pattern,
    structure_pdf_text,
    validate_upload,
)
from resume_model import ResumeData


# ---------------------------------------------------------------------------
# Upload validation and extraction
# ---------------------------------------------------------------------------

def test_validate_upload_by_mime_or_extension():
    assert validate_upload("resume.pdf", None, 100, 1000) == "pdf"
    assert validate_upload("resume", DOCX_MIME, 100, 1000) == "docx"
    assert validate_upload("notes.TXT", "application/octet-stream", 100, 1000) == "txt"


def test_validate_upload_rejects_other_types():
    with pytest.raises(UploadError, match="PDF, DOCX or TXT"):
        validate_upload("photo.png", "image/png", 100, 1000)


def test_validate_upload_rejects_legacy_doc():
    with pytest.raises(UploadError, match="Legacy .doc"):
        validate_upload("resume.doc", "application/msword", 100, 1000)


def test_validate_upload_rejects_large_files():
    limit = 1024 * 1024
    with pytest.raises(UploadError, match="less than 1MB"):
        validate_upload("resume.pdf", "application/pdf", limit + 1, limit)


def test_extract_text_from_docx():
    doc = Document()
    doc.add_paragraph("Jane Doe")
    doc.add_paragraph("jane.doe@example.com")
    buffer = io.BytesIO()
    doc.save(buffer)

    text = extract_text("resume.docx", buffer.getvalue())

    assert text.splitlines()[:2] == ["Jane Doe", "jane.doe@example.com"]


def test_extract_text_from_txt_ignores_bad_bytes():
    assert extract_text("resume.txt", b"Jane Doe\xff\nEngineer") == "Jane Doe\nEngineer"


def test_extract_pdf_text_with_pypdf2(pdf_bytes):
    text, pages, _ = extract_pdf_text(pdf_bytes)
    assert "Jane Doe" in text
    assert "Acme Corp" in text
    assert pages == 1


def test_extract_pdf_text_falls_back_to_string_literals():
    data = b"%PDF-1.4 not really a pdf (Hello World) (Resume Text Here) (x)"
    text, _, _ = extract_pdf_text(data)
    assert text == "Hello World Resume Text Here"


def test_extract_pdf_text_dumps_printable_text_last():
    data = b"%PDF-1.4 broken\x00\x01 Jane Doe Senior Engineer at Acme Corp since 2019 in Austin"
    text, _, _ = extract_pdf_text(data)
    assert text == "%PDF-1.4 broken Jane Doe Senior Engineer at Acme Corp since 2019 in Austin"


def test_extract_pdf_text_without_text_raises():
    with pytest.raises(UploadError):
        extract_pdf_text(b"\x00\x01\x02")


def test_clean_extracted_text():
    raw = "Jane\x00 Doe\x07\n\n\n  Engineer  ======== done"
    assert clean_extracted_text(raw) == "Jane Doe Engineer = done"
    assert clean_extracted_text(raw, keep_newlines=True) == "Jane Doe\n\nEngineer = done"


# ---------------------------------------------------------------------------
# Heuristic parser
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value, expected", [
    ("Jan 2020", "2020-01"),
    ("September 2019", "2019-09"),
    ("Dec. 2021", "2021-12"),
    ("03/2019", "2019-03"),
    ("2018", "2018"),
    ("", ""),
])
def test_convert_date_to_iso(value, expected):
    assert convert_date_to_iso(value) == expected


def test_heuristic_contact_details(sample_text):
    info = build_resume_data_from_text(sample_text).personalInfo

    assert info.fullName == "Jane Doe"
    assert info.email == "jane.doe@example.com"
    assert info.phone == "(555) 123-4567"
    assert info.location == "San Francisco, CA 94105"
    assert info.linkedin == "linkedin.com/in/janedoe"
    assert info.github == "https://github.com/janedoe"
    assert info.website == "https://janedoe.dev"
    assert info.summary.startswith("Senior software engineer with 8 years")


def test_heuristic_work_experience(sample_text):
    jobs = build_resume_data_from_text(sample_text).workExperience

    assert [(j.position, j.company) for j in jobs] == [
        ("Senior Software Engineer", "Acme Corp"),
        ("Software Engineer", "Globex"),
    ]
    assert jobs[0].location == "San Francisco, CA"
    assert jobs[0].startDate == "2020-01"
    assert jobs[0].current is True
    assert jobs[0].endDate == ""
    assert jobs[0].description.splitlines() == [
        "• Led migration of monolith to microservices, cutting deploy time by 40%",
        "• Mentored five engineers across two product teams",
    ]
    assert (jobs[1].startDate, jobs[1].endDate, jobs[1].current) == ("2016-06", "2019-12", False)


def test_heuristic_education(sample_text):
    education = build_resume_data_from_text(sample_text).education

    assert len(education) == 1
    assert education[0].degree == "Bachelor of Science"
    assert education[0].field == "Computer Science"
    assert education[0].institution == "Stanford University"
    assert education[0].graduationDate == "2016"


def test_heuristic_skills_from_section(sample_text):
    skills = build_resume_data_from_text(sample_text).skills

    assert [s.name for s in skills] == [
        "Python", "JavaScript", "React", "PostgreSQL", "Docker", "AWS", "Kubernetes",
    ]
    assert all(s.level == "intermediate" and s.category == "Technical" for s in skills)


def test_heuristic_skills_keyword_scan_without_section():
    skills = build_resume_data_from_text("Experienced with python and Go services on AWS.").skills
    assert [s.name for s in skills] == ["Python", "Go", "AWS"]


def test_heuristic_skills_are_capped():
    text = "Skills: " + ", ".join(f"Skill{i}" for i in range(30))
    assert len(build_resume_data_from_text(text).skills) == 15


def test_heuristic_keeps_raw_content_section(sample_text):
    sections = build_resume_data_from_text(sample_text).customSections
    assert sections[0].title == RAW_CONTENT_TITLE
    assert sections[0].content == sample_text[:2000]


def test_heuristic_summary_falls_back_to_first_paragraph():
    text = "Not a name line here\n\nA long first paragraph that talks about the candidate and their work history."
    summary = build_resume_data_from_text(text).personalInfo.summary
    assert summary == "A long first paragraph that talks about the candidate and their work history."


def test_short_terms_match_case_sensitively():
    assert skill_pattern("Go").search("Built services in Go")
    assert not skill_pattern("Go").search("a good engineer")
    assert not skill_pattern("R").search("React developer")
    assert skill_pattern("Node.js").search("node.js backend")


# ---------------------------------------------------------------------------
# AI structuring and the fallback chain
# ---------------------------------------------------------------------------

AI_REPLY = {
    "personalInfo": {
        "fullName": "  Jane A. Doe ",
        "email": "JANE@EXAMPLE.COM",
        "phone": "tel: (555) 123-4567 ext",
        "location": "",
        "summary": "x" * 1500,
    },
    "skills": ["Python", "python", "Go", 42, {"name": "Rust"}, "PYTHON"],
    "workExperience": [
        {"company": "Acme", "position": "Engineer", "isCurrentJob": True, "description": "d" * 3000},
        {"company": "", "position": "Ghost"},
    ],
    "education": [{"school": "MIT", "degree": "BS"}, {"field": "Nothing"}],
    "certifications": [{"name": "AWS SA", "issuer": "Amazon", "dateObtained": "2021-05"}, {"issuer": "None"}],
    "projects": [{"name": "Tool", "technologies": ["Python"]}],
}


def test_ai_structure_validates_and_clamps(make_llm, sample_text):
    llm = make_llm([dict(AI_REPLY)])
    resume = ai_structure_from_text(sample_text, llm)

    info = resume.personalInfo
    assert info.fullName == "Jane A. Doe"
    assert info.email == "jane@example.com"
    assert info.phone == "(555) 123-4567"
    assert len(info.summary) == 1000
    assert [s.name for s in resume.skills] == ["Python", "Go", "Rust"]
    assert len(resume.workExperience) == 1
    assert resume.workExperience[0].current is True
    assert len(resume.workExperience[0].description) == 2000
    assert [e.institution for e in resume.education] == ["MIT"]
    assert resume.certifications[0].date == "2021-05"
    assert resume.projects[0].title == "Tool"
    assert "RESUME TEXT TO ANALYZE" in llm.prompts[0]


def test_ai_structure_returns_none_on_failure(make_llm, sample_text):
    assert ai_structure_from_text(sample_text, make_llm(error=LLMResponseError("bad json"))) is None
    assert ai_structure_from_text(sample_text, make_llm(available=False)) is None
    assert ai_structure_from_text("too short", make_llm([{}])) is None


def test_merge_prefers_non_empty_ai_values():
    heuristic = ResumeData.from_dict({
        "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com", "location": "Austin, TX"},
        "skills": ["Python"],
        "education": [{"school": "MIT"}],
    })
    ai = ResumeData.from_dict({
        "personalInfo": {"fullName": "Jane A. Doe", "email": ""},
        "skills": ["Go"],
    })

    merged = merge_structured(heuristic, ai)

    assert merged.personalInfo.fullName == "Jane A. Doe"
    assert merged.personalInfo.email == "jane@example.com"
    assert merged.personalInfo.location == "Austin, TX"
    assert [s.name for s in merged.skills] == ["Go"]
    assert merged.education[0].institution == "MIT"


def test_merge_dedupes_skills_ignoring_case():
    heuristic = ResumeData.from_dict({"skills": ["Python", "python", "Docker"]})
    merged = merge_structured(heuristic, ResumeData())
    assert [s.name for s in merged.skills] == ["Python", "Docker"]


def test_parse_text_without_ai_is_heuristic(sample_text, offline_llm):
    resume = parse_text_to_resume_data(sample_text, offline_llm)
    assert resume.personalInfo.fullName == "Jane Doe"
    assert len(resume.workExperience) == 2


def test_import_resume_txt_with_ai(make_llm, sample_text):
    llm = make_llm([{"personalInfo": {"fullName": "Jane Doe"}, "skills": ["Leadership"]}])
    resume = import_resume("resume.txt", sample_text.encode(), "text/plain", llm=llm)

    assert [s.name for s in resume.skills] == ["Leadership"]
    assert resume.personalInfo.email == "jane.doe@example.com"
    assert len(resume.workExperience) == 2


def test_import_resume_dumps_raw_text_when_nothing_found(offline_llm):
    raw = "just some lowercase notes without any recognisable structure at all, nothing to parse here"
    resume = import_resume("notes.txt", raw.encode(), "text/plain", llm=offline_llm)

    assert resume.personalInfo.fullName == ""
    assert resume.workExperience == []
    assert resume.personalInfo.summary == raw[:500]


def test_import_resume_rejects_empty_text(offline_llm):
    with pytest.raises(UploadError, match="No text could be extracted"):
        import_resume("empty.txt", b"   ", "text/plain", llm=offline_llm)


def test_import_resume_pdf(pdf_bytes, offline_llm):
    resume = import_resume("resume.pdf", pdf_bytes, "application/pdf", llm=offline_llm)
    assert resume.personalInfo.email == "jane.doe@example.com"
    assert resume.personalInfo.fullName == "Jane Doe"


def test_structure_pdf_text(make_llm):
    llm = make_llm([{"personalInfo": {"fullName": "Jane Doe"}}])
    assert structure_pdf_text("Jane Doe, engineer at Acme Corp", llm) == {"personalInfo": {"fullName": "Jane Doe"}}
    assert structure_pdf_text("short", llm) is None


def test_structure_pdf_text_truncates_input(make_llm):
    llm = make_llm([{}])
    structure_pdf_text("y" * 9000, llm)
    assert "y" * 8000 in llm.prompts[0]
    assert "y" * 8001 not in llm.prompts[0]


def test_parse_pdf_upload_shape(pdf_bytes, offline_llm):
    result = parse_pdf_upload("cv.pdf", pdf_bytes, llm=offline_llm)

    assert "Jane Doe" in result["text"]
    assert "\n" not in result["text"]
    assert result["structuredData"] is None
    assert result["pages"] == 1
    assert result["info"]["title"] == "cv.pdf"
    assert set(result["info"]) == {"title", "author", "subject"}
