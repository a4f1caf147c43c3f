from __future__ import annotations

import json
import re
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Tuple

import yaml

from config import load_json
from resume_model import ResumeData, WorkExperience

_YEAR_MONTH_RE = re.compile(r"^\s*(\d{4})(?:[-/](\d{1,2}))?")


def load_resume_data(path: Path) -> ResumeData:
    """
    Load a saved resume. Supports JSON and YAML.

    This is the local stand-in for the browser's per-user storage.
    """
    path = Path(path)
    if path.suffix.lower() in {".yml", ".yaml"}:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    elif path.stat().st_size:
        data = load_json(path)
    else:
        data = {}
    return ResumeData.from_dict(data)


def save_resume_data(path: Path, resume: ResumeData) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = resume.to_dict()
    if path.suffix.lower() in {".yml", ".yaml"}:
        path.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8")
    else:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def parse_year_month(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """``"2021-06"`` -> ``(2021, 6)``; a bare year counts as January."""
    if not value:
        return None
    match = _YEAR_MONTH_RE.match(value)
    if not match:
        return None
    year = int(match.group(1))
    month = int(match.group(2) or 1)
    if not 1 <= month <= 12:
        return None
    return year, month


def _months_between(start: Tuple[int, int], end: Tuple[int, int]) -> int:
    return (end[0] - start[0]) * 12 + (end[1] - start[1])


def _span_months(start_date: str, end_date: str, current: bool, today: Optional[date]) -> Optional[int]:
    start = parse_year_month(start_date)
    if start is None:
        return None
    today = today or date.today()
    end = None if current else parse_year_month(end_date)
    if end is None:
        end = (today.year, today.month)
    return _months_between(start, end)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n != 1 else ''}"


def calculate_duration(
    start_date: Optional[str],
    end_date: Optional[str] = None,
    current: bool = False,
    today: Optional[date] = None,
) -> str:
    """Human readable tenure, e.g. ``"2 years 3 months"``."""
    months = _span_months(start_date or "", end_date or "", current, today)
    if months is None:
        return "Unknown duration"
    years, remaining = divmod(months, 12) if months >= 0 else (0, months)
    if years == 0:
        return _plural(months, "month")
    if remaining == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} {_plural(remaining, 'month')}"


def calculate_total_experience(work: Iterable[WorkExperience], today: Optional[date] = None) -> float:
    """Total years of experience, one decimal place. Negative spans count as zero."""
    total = 0
    for exp in work:
        months = _span_months(exp.startDate, exp.endDate, exp.current, today)
        if months is None:
            continue
        total += max(0, months)
    return round(total / 12, 1)


def _or(value: str, fallback: str) -> str:
    return value if value else fallback


def _technologies(technologies: list[str], fallback: str) -> str:
    return ", ".join(technologies) if technologies else fallback


def render_resume_for_analysis(resume: ResumeData) -> str:
    """Plain-text resume used by the analysis prompt."""
    info = resume.personalInfo
    parts: list[str] = [
        "PERSONAL INFORMATION:",
        f"Name: {_or(info.fullName, 'Not provided')}",
        f"Email: {_or(info.email, 'Not provided')}",
        f"Phone: {_or(info.phone, 'Not provided')}",
        f"Location: {_or(info.location, 'Not provided')}",
        f"LinkedIn: {_or(info.linkedin, 'Not provided')}",
        f"Website: {_or(info.website, 'Not provided')}",
        "",
        "PROFESSIONAL SUMMARY:",
        _or(info.summary, "No professional summary provided"),
        "",
        "WORK EXPERIENCE:",
    ]
    for idx, exp in enumerate(resume.workExperience, start=1):
        end = exp.endDate or ("Present" if exp.current else "No end date")
        parts.append(f"{idx}. {_or(exp.position, 'No position')} at {_or(exp.company, 'No company')}")
        parts.append(f"   Duration: {_or(exp.startDate, 'No start date')} - {end}")
        parts.append(f"   Description: {_or(exp.description, 'No description provided')}")

    parts += ["", "EDUCATION:"]
    for idx, edu in enumerate(resume.education, start=1):
        parts.append(f"{idx}. {_or(edu.degree, 'No degree')} in {_or(edu.field, 'No field')}")
        parts.append(f"   Institution: {_or(edu.institution, 'No institution')}")
        parts.append(f"   Graduation: {edu.graduationDate or edu.endDate or 'No graduation date'}")

    parts += ["", "SKILLS:"]
    for idx, skill in enumerate(resume.skills, start=1):
        parts.append(f"{idx}. {skill.name} ({skill.level}) - {_or(skill.category, 'No category')}")

    if resume.projects:
        parts += ["", "PROJECTS:"]
        for idx, project in enumerate(resume.projects, start=1):
            parts.append(f"{idx}. {_or(project.title, 'No title')}")
            parts.append(f"   Description: {_or(project.description, 'No description')}")
            parts.append(f"   Technologies: {_technologies(project.technologies, 'None listed')}")

    if resume.certifications:
        parts += ["", "CERTIFICATIONS:"]
        for idx, cert in enumerate(resume.certifications, start=1):
            parts.append(f"{idx}. {cert.name} from {cert.issuer} ({cert.date})")

    return "\n".join(parts).strip()


def render_resume_for_enhancement(resume: ResumeData) -> str:
    """Plain-text resume used by the enhancement prompt."""
    info = resume.personalInfo
    na = "Not provided"
    parts: list[str] = [
        "PERSONAL INFO:",
        f"Name: {_or(info.fullName, na)}",
        f"Title: {_or(info.title, na)}",
        f"Email: {_or(info.email, na)}",
        f"Phone: {_or(info.phone, na)}",
        f"Location: {_or(info.location, na)}",
        f"Summary: {_or(info.summary, na)}",
        "",
        "WORK EXPERIENCE:",
    ]
    if resume.workExperience:
        for idx, exp in enumerate(resume.workExperience, start=1):
            end = "Present" if exp.current else _or(exp.endDate, na)
            parts.append(f"{idx}. {_or(exp.position, na)} at {_or(exp.company, na)}")
            parts.append(f"   Duration: {_or(exp.startDate, na)} - {end}")
            parts.append(f"   Description: {_or(exp.description, na)}")
    else:
        parts.append("No work experience provided")

    parts += ["", "EDUCATION:"]
    if resume.education:
        for idx, edu in enumerate(resume.education, start=1):
            parts.append(f"{idx}. {_or(edu.degree, na)} in {_or(edu.field, na)}")
            parts.append(f"   School: {_or(edu.institution, na)}")
            parts.append(f"   Graduation: {_or(edu.graduationDate, na)}")
            parts.append(f"   GPA: {_or(edu.gpa, na)}")
    else:
        parts.append("No education provided")

    parts += ["", "SKILLS:"]
    if resume.skills:
        parts.extend(f"- {s.name} ({_or(s.level, 'Not specified')})" for s in resume.skills)
    else:
        parts.append("No skills provided")

    parts += ["", "PROJECTS:"]
    if resume.projects:
        for idx, project in enumerate(resume.projects, start=1):
            parts.append(f"{idx}. {_or(project.title, na)}")
            parts.append(f"   Description: {_or(project.description, na)}")
            parts.append(f"   Technologies: {_technologies(project.technologies, na)}")
            parts.append(f"   URL: {_or(project.link, na)}")
    else:
        parts.append("No projects provided")

    parts += ["", "CERTIFICATIONS:"]
    if resume.certifications:
        parts.extend(f"- {c.name} from {c.issuer} ({c.date})" for c in resume.certifications)
    else:
        parts.append("No certifications provided")

    parts += ["", "LANGUAGES:"]
    if resume.languages:
        parts.extend(f"- {lang.name}: {lang.proficiency}" for lang in resume.languages)
    else:
        parts.append("No languages provided")

    return "\n".join(parts).strip()


def render_resume_for_job_match(resume: ResumeData, today: Optional[date] = None) -> str:
    """Plain-text resume for the job-match prompt, with red flags called out."""
    info = resume.personalInfo
    parts: list[str] = [
        "CANDIDATE PROFILE:",
        f"Name: {_or(info.fullName, 'Unknown')}",
        f"Email: {_or(info.email, 'Not provided')}",
        f"Location: {_or(info.location, 'Unknown')}",
        "",
        "PROFESSIONAL SUMMARY:",
        _or(info.summary, "No professional summary - RED FLAG"),
        "",
        f"WORK EXPERIENCE ({len(resume.workExperience)} positions):",
    ]
    for idx, exp in enumerate(resume.workExperience, start=1):
        duration = calculate_duration(exp.startDate, exp.endDate, exp.current, today)
        parts.append(f"{idx}. {_or(exp.position, 'Unknown Position')} at {_or(exp.company, 'Unknown Company')}")
        parts.append(f"   Duration: {duration}")
        parts.append(f"   Description: {_or(exp.description, 'No description provided - RED FLAG')}")

    parts += ["", f"EDUCATION ({len(resume.education)} entries):"]
    for idx, edu in enumerate(resume.education, start=1):
        parts.append(f"{idx}. {_or(edu.degree, 'Unknown')} in {_or(edu.field, 'Unknown')}")
        parts.append(f"   Institution: {_or(edu.institution, 'Unknown')}")
        parts.append(f"   Graduated: {edu.graduationDate or edu.endDate or 'Unknown'}")

    parts += ["", f"TECHNICAL SKILLS ({len(resume.skills)} listed):"]
    for idx, skill in enumerate(resume.skills, start=1):
        parts.append(f"{idx}. {skill.name} ({skill.level}) - {_or(skill.category, 'Uncategorized')}")

    if resume.projects:
        parts += ["", f"PROJECTS ({len(resume.projects)} listed):"]
        for idx, project in enumerate(resume.projects, start=1):
            parts.append(f"{idx}. {_or(project.title, 'Unnamed Project')}")
            parts.append(f"   Description: {_or(project.description, 'No description')}")
            parts.append(f"   Technologies: {_technologies(project.technologies, 'None listed')}")
    else:
        parts += ["", "PROJECTS: None listed - MAJOR RED FLAG for technical roles"]

    if resume.certifications:
        parts += ["", f"CERTIFICATIONS ({len(resume.certifications)} listed):"]
        for idx, cert in enumerate(resume.certifications, start=1):
            parts.append(f"{idx}. {cert.name} from {cert.issuer} ({cert.date})")
    else:
        parts += ["", "CERTIFICATIONS: None listed"]

    total_years = calculate_total_experience(resume.workExperience, today)
    parts.append(f"TOTAL PROFESSIONAL EXPERIENCE: ~{total_years} years")
    return "\n".join(parts).strip()
