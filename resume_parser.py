"""
Resume Parsing Utilities

Turn an uploaded resume (PDF/DOCX/TXT) into Resume Data:
- extract_text: raw text from the uploaded bytes
- build_resume_data_from_text: deterministic, regex-based extraction of
  contact details, summary, skills, work history and education
- ai_structure_from_text: the same job done by the language model, with
  every field validated and clamped
- import_resume: the full fallback chain used on import
  (structured AI parse -> heuristic parse -> raw text dump)
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from docx import Document as DocxDocument
from PyPDF2 import PdfReader

from config import get_settings
from enhanced_prompts import PDF_STRUCTURE_PROMPT, UPLOAD_STRUCTURE_PROMPT
from llm_manager import LLMError, LLMManager, get_llm
from resume_model import (
    Certification,
    CustomSection,
    Education,
    PersonalInfo,
    Project,
    ResumeData,
    Skill,
    WorkExperience,
    new_id,
)

logger = logging.getLogger("ResumeParser")


class UploadError(ValueError):
    """The uploaded file cannot be turned into resume text."""


PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"
TXT_MIME = "text/plain"

_MIME_KINDS = {PDF_MIME: "pdf", DOCX_MIME: "docx", DOC_MIME: "doc", TXT_MIME: "txt"}

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(\+?1?[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")
LINKEDIN_RE = re.compile(r"(https?://)?(www\.)?linkedin\.com/in/[^\s,;|]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"(https?://)?(www\.)?github\.com/[^\s,;|]+", re.IGNORECASE)
URL_RE = re.compile(r"https?://[^\s,;|]+", re.IGNORECASE)

NAME_WORD_RE = re.compile(r"^[A-Z][a-z]+(?:[-'][A-Z]?[a-z]+)*$")

LOCATION_PATTERNS = [
    re.compile(r"([A-Za-z ]+),\s*([A-Z]{2})\s*(\d{5})\b"),  # City, State ZIP
    re.compile(r"([A-Za-z ]+),\s*([A-Z]{2})\b"),  # City, State
    re.compile(r"([A-Za-z ]+),\s*([A-Za-z ]+)"),  # City, Country
]

SECTION_HEADING_RE = re.compile(
    r"^(?:professional\s+|work\s+|technical\s+|core\s+|key\s+|personal\s+|academic\s+|relevant\s+)?"
    r"(?:summary|profile|objective|about(?:\s+me)?|experience|employment(?:\s+(?:history|background))?"
    r"|work\s+history|career\s+history|education|background|qualifications|skills|competencies"
    r"|expertise|technologies|projects|portfolio|certifications?|licenses?|credentials|languages"
    r"|awards|achievements|interests|references|publications|volunteer(?:ing)?(?:\s+experience)?)"
    r"\s*:?$",
    re.IGNORECASE,
)
EXPERIENCE_HEADING_RE = re.compile(
    r"^(?:work\s+|professional\s+)*(?:experience|employment\s+(?:history|background)|career\s+history|work\s+history)\s*:?$",
    re.IGNORECASE,
)
EDUCATION_HEADING_RE = re.compile(
    r"^(?:education|academic\s+background|academic\s+qualifications|qualifications)\s*:?$",
    re.IGNORECASE,
)
SUMMARY_LABEL_RE = re.compile(
    r"^(?:professional\s+|career\s+)?(?:summary|objective|about(?:\s+me)?|profile)\b\s*(?::\s*(.*)|$)",
    re.IGNORECASE,
)
SKILL_LABEL_RE = re.compile(
    r"^(?:technical\s+skills|key\s+skills|core\s+skills|skills?|core\s+competencies|technical\s+expertise"
    r"|technologies|programming\s+languages?|tools|proficient\s+(?:in|with)|experienced\s+(?:in|with)"
    r"|knowledge\s+of|software|platforms|frameworks)\s*(?::\s*(.*)|$)",
    re.IGNORECASE,
)

JOB_PATTERNS = [
    re.compile(r"^(.+?)\s+(?:at|@)\s+(.+?)(?:\s*[|•]\s*(.+?))?$", re.IGNORECASE),  # Position at Company | Location
    re.compile(r"^(.+?)\s*[-–—]\s*(.+?)(?:\s*[|•]\s*(.+?))?$", re.IGNORECASE),  # Position - Company | Location
    re.compile(r"^(.+?),\s*(.+?)(?:\s*[|•]\s*(.+?))?$", re.IGNORECASE),  # Position, Company | Location
    re.compile(r"^(.+?)\s*\|\s*(.+?)(?:\s*[|•]\s*(.+?))?$", re.IGNORECASE),  # Position | Company | Location
]
DATE_PATTERNS = [
    re.compile(r"([A-Za-z]+\.?\s+\d{4})\s*(?:[-–—]|to)\s*([A-Za-z]+\.?\s+\d{4}|present|current)", re.IGNORECASE),
    re.compile(r"(\d{1,2}/\d{4})\s*(?:[-–—]|to)\s*(\d{1,2}/\d{4}|present|current)", re.IGNORECASE),
    re.compile(r"(\d{4})\s*(?:[-–—]|to)\s*(\d{4}|present|current)", re.IGNORECASE),
    re.compile(r"\b(present|current)\b", re.IGNORECASE),
]
BULLET_RE = re.compile(r"^[•\-\*▪►◦·]\s*")

DEGREE_RE = re.compile(
    r"(bachelor|master|phd|ph\.d|doctorate|associate|certificate|diploma|\bB\.?S\.?c?\b|\bB\.?A\.?\b"
    r"|\bM\.?S\.?c?\b|\bM\.?A\.?\b|\bMBA\b)",
    re.IGNORECASE,
)
SCHOOL_RE = re.compile(r"(university|college|institute|school|academy)", re.IGNORECASE)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")

_MONTHS = {
    "jan": "01", "feb": "02", "mar": "03", "apr": "04", "may": "05", "jun": "06",
    "jul": "07", "aug": "08", "sep": "09", "oct": "10", "nov": "11", "dec": "12",
}
MONTH_RE = re.compile(
    r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?(?![a-z])",
    re.IGNORECASE,
)

MAX_HEURISTIC_SKILLS = 15
MAX_HEURISTIC_JOBS = 10
MAX_HEURISTIC_EDUCATION = 3
RAW_CONTENT_TITLE = "Original Resume Content"

TECHNICAL_SKILLS = [
    # Programming Languages
    'JavaScript', 'Python', 'Java', 'C++', 'C#', 'PHP', 'Ruby', 'Go', 'Swift', 'Kotlin', 'TypeScript',
    'Scala', 'Rust', 'R', 'MATLAB', 'Perl',
    # Frontend
    'React', 'Angular', 'Vue.js', 'HTML', 'CSS', 'SASS', 'LESS', 'Bootstrap', 'Tailwind CSS', 'jQuery',
    'Webpack', 'Vite', 'Next.js', 'Nuxt.js',
    # Backend
    'Node.js', 'Express', 'Django', 'Flask', 'Spring', 'Laravel', 'ASP.NET', 'Ruby on Rails', 'FastAPI',
    'Gin', 'Echo',
    # Databases
    'SQL', 'MongoDB', 'PostgreSQL', 'MySQL', 'Redis', 'Oracle', 'SQLite', 'Cassandra', 'DynamoDB',
    'Firebase', 'Supabase',
    # Cloud & DevOps
    'AWS', 'Azure', 'GCP', 'Google Cloud', 'Docker', 'Kubernetes', 'Jenkins', 'CI/CD', 'Terraform',
    'Ansible', 'Helm',
    # Tools & Software
    'Git', 'GitHub', 'GitLab', 'Jira', 'Linux', 'Windows', 'macOS', 'Figma', 'Photoshop', 'Illustrator',
    'Sketch', 'InVision',
    # Data & Analytics
    'Machine Learning', 'AI', 'Data Science', 'Tableau', 'Power BI', 'Excel', 'Pandas', 'NumPy',
    'TensorFlow', 'PyTorch',
    # Mobile
    'iOS', 'Android', 'React Native', 'Flutter', 'Xamarin', 'Ionic', 'Cordova',
    # Testing & Quality
    'Jest', 'Cypress', 'Selenium', 'Unit Testing', 'Integration Testing', 'TDD', 'BDD',
    # Other
    'GraphQL', 'REST API', 'Microservices', 'Blockchain', 'IoT', 'Agile', 'Scrum', 'Kanban', 'SOLID',
    'Design Patterns',
]


def skill_pattern(term: str) -> re.Pattern:
    """Whole-term matcher; one- and two-letter terms ('R', 'Go', 'AI') match case-sensitively."""
    flags = 0 if len(term) <= 2 else re.IGNORECASE
    return re.compile(r"(?<![A-Za-z0-9+#])" + re.escape(term) + r"(?![A-Za-z0-9+#])", flags)


# ---------------------------------------------------------------------------
# Upload validation and text extraction
# ---------------------------------------------------------------------------

def validate_upload(filename: str, content_type: str | None, size: int, max_bytes: int | None = None) -> str:
    """Return the upload kind ('pdf', 'docx' or 'txt') or raise UploadError."""
    ext = Path(filename or "").suffix.lower().lstrip(".")
    kinds = {_MIME_KINDS.get((content_type or "").split(";")[0].strip().lower())}
    if ext in ("pdf", "docx", "txt", "doc"):
        kinds.add(ext)

    kind = next((k for k in ("pdf", "docx", "txt") if k in kinds), None)
    if kind is None and "doc" not in kinds:
        raise UploadError("Please upload a PDF, DOCX or TXT file")

    limit = max_bytes if max_bytes is not None else get_settings().max_upload_bytes
    if size > limit:
        raise UploadError(f"File size must be less than {limit // (1024 * 1024)}MB")

    if kind is None:
        raise UploadError("Legacy .doc files are not supported. Please upload a PDF, DOCX, or TXT.")
    return kind


def _pdf_string_literals(data: bytes) -> str:
    chunks = re.findall(r"\(([^)]+)\)", data.decode("latin-1"))
    return " ".join(c for c in chunks if len(c) > 1)


def _printable_dump(data: bytes) -> str:
    text = data.decode("utf-8", errors="ignore")
    text = re.sub(r"[^\x20-\x7E\n\r\t]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def extract_pdf_text(data: bytes) -> Tuple[str, int, Dict[str, str]]:
    """
    Extract text from PDF bytes.

    Returns (text, page_count, metadata). PyPDF2 first; for PDFs it cannot read,
    the string literals inside the file and finally a printable-ASCII dump.
    """
    pages = 1
    meta: Dict[str, str] = {}
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = len(reader.pages) or 1
        texts: List[str] = []
        for page in reader.pages[:50]:
            try:
                texts.append(page.extract_text() or "")
            except Exception as e:
                logger.debug(f"Skipping unreadable PDF page: {e}")
                continue
        info = reader.metadata or {}
        meta = {
            "author": str(info.get("/Author") or ""),
            "subject": str(info.get("/Subject") or ""),
        }
        text = "\n".join(texts).strip()
        if len(text) > 10:
            return text, pages, meta
    except Exception as e:
        logger.warning(f"PyPDF2 could not read PDF, using fallback extraction: {e}")

    text = _pdf_string_literals(data)
    if len(text) >= 10:
        return text, pages, meta

    text = _printable_dump(data)
    if len(text) > 50:
        return text, pages, meta

    raise UploadError("No readable text could be extracted from PDF")


def extract_docx_text(data: bytes) -> str:
    try:
        doc = DocxDocument(io.BytesIO(data))
    except Exception as e:
        raise UploadError(f"Unable to read DOCX file: {e}") from e
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text.strip() for cell in row.cells if cell.text.strip()))
    return "\n".join(lines).strip()


def extract_text(filename: str, data: bytes, content_type: str | None = None) -> str:
    """Extract plain text from a resume upload (PDF, DOCX, or TXT)."""
    kind = validate_upload(filename, content_type, len(data), max_bytes=len(data))
    if kind == "pdf":
        text, _, _ = extract_pdf_text(data)
        return clean_extracted_text(text, keep_newlines=True)
    if kind == "docx":
        return extract_docx_text(data)
    return data.decode("utf-8", errors="ignore")


def clean_extracted_text(text: str, keep_newlines: bool = False) -> str:
    """Strip control characters, normalise whitespace and collapse long character runs."""
    if not text:
        return ""
    text = text.replace("\x00", "")
    text = re.sub(r"[\x01-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]", " ", text)
    if keep_newlines:
        text = re.sub(r"[ \t\r]+", " ", text)
        text = re.sub(r" *\n *", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
    else:
        text = re.sub(r"\s+", " ", text)
    text = re.sub(r"(.)\1{5,}", r"\1", text)
    return text.strip()


def _clean_for_ai(text: str) -> str:
    text = re.sub(r"[^\x20-\x7E\n\r\t]", " ", text)
    text = re.sub(r"\s+", " ", text)
    return re.sub(r"(.)\1{4,}", r"\1", text).strip()


# ---------------------------------------------------------------------------
# Heuristic parser
# ---------------------------------------------------------------------------

def convert_date_to_iso(date_str: str) -> str:
    """'Jan 2020' -> '2020-01', '03/2019' -> '2019-03'; anything else is returned tidied."""
    if not date_str:
        return ""
    value = date_str.strip()
    slash = re.fullmatch(r"(\d{1,2})/(\d{4})", value)
    if slash:
        return f"{slash.group(2)}-{int(slash.group(1)):02d}"
    value = MONTH_RE.sub(lambda m: _MONTHS[m.group(1)[:3].lower()], value)
    value = re.sub(r"\s+", "-", value)
    return re.sub(r"^(\d{2})-(\d{4})$", r"\2-\1", value)


def _is_heading(line: str) -> bool:
    return bool(SECTION_HEADING_RE.match(line.strip()))


def _section_lines(lines: List[str], heading_re: re.Pattern) -> Optional[List[str]]:
    """Lines under the first heading matching ``heading_re``, up to the next heading."""
    for idx, line in enumerate(lines):
        if heading_re.match(line.strip()):
            body = []
            for following in lines[idx + 1:]:
                if _is_heading(following):
                    break
                body.append(following)
            return body
    return None


def _guess_name(lines: List[str], email: str, phone: str) -> str:
    """First of the top five lines that reads as 2-4 capitalised words."""
    for line in lines[:5]:
        if not 5 < len(line) < 60:
            continue
        words = [w for w in line.split(" ") if w]
        if not 2 <= len(words) <= 4:
            continue
        if not all(NAME_WORD_RE.match(w) for w in words):
            continue
        if line in email or line in phone:
            continue
        return line
    return ""


def _guess_location(lines: List[str]) -> str:
    header = lines[:10]
    for pattern in LOCATION_PATTERNS:
        for line in header:
            if "@" in line:
                line = EMAIL_RE.sub(" ", line)
            match = pattern.search(line)
            if match:
                return match.group(0).strip()
    return ""


def _extract_skills(lines: List[str], text: str) -> List[Skill]:
    names: List[str] = []
    seen = set()

    def add(name: str) -> None:
        key = name.lower()
        if key in seen or len(names) >= MAX_HEURISTIC_SKILLS:
            return
        seen.add(key)
        names.append(name)

    for idx, line in enumerate(lines):
        match = SKILL_LABEL_RE.match(line.strip())
        if not match:
            continue
        block = [match.group(1) or ""]
        for following in lines[idx + 1:]:
            if not following.strip() or _is_heading(following):
                break
            block.append(following)
        for block_line in block:
            # "Languages: Python, Go" -> keep the part after the sub-label
            if ":" in block_line:
                block_line = block_line.split(":", 1)[1]
            for part in re.split(r"[,•·|;]", block_line):
                part = BULLET_RE.sub("", part.strip()).strip()
                if 1 < len(part) < 30:
                    add(part)
        if names:
            break

    if not names:
        for skill in TECHNICAL_SKILLS:
            if skill_pattern(skill).search(text):
                add(skill)

    return [
        Skill(id=new_id(index=idx), name=name, level="intermediate", category="Technical")
        for idx, name in enumerate(names)
    ]


def _match_date(line: str) -> Optional[re.Match]:
    for pattern in DATE_PATTERNS:
        match = pattern.search(line)
        if match:
            return match
    return None


def _apply_dates(job: Dict[str, Any], match: re.Match) -> None:
    groups = [g for g in match.groups() if g]
    if len(groups) == 1:
        if groups[0].lower() in ("present", "current"):
            job["current"] = True
        return
    job["startDate"] = groups[0]
    end = groups[1]
    job["current"] = end.lower() in ("present", "current")
    job["endDate"] = "" if job["current"] else end


def _looks_like_sentence(line: str) -> bool:
    return line.endswith(".") or len(line.split()) > 12


def _match_job(line: str) -> Optional[re.Match]:
    for pattern in JOB_PATTERNS:
        match = pattern.match(line)
        if match:
            return match
    return None


def _finish_job(job: Dict[str, Any], descriptions: List[str], index: int) -> Optional[WorkExperience]:
    if not (job.get("position") and job.get("company")):
        return None
    current = bool(job.get("current"))
    return WorkExperience(
        id=new_id(index=index),
        company=job["company"],
        position=job["position"],
        location=job.get("location", ""),
        startDate=convert_date_to_iso(job.get("startDate", "")),
        endDate="" if current else convert_date_to_iso(job.get("endDate", "")),
        current=current,
        description="\n".join(descriptions)[:500],
    )


def _extract_work_experience(lines: List[str]) -> List[WorkExperience]:
    section = _section_lines(lines, EXPERIENCE_HEADING_RE)
    if not section:
        return []

    jobs: List[WorkExperience] = []
    job: Dict[str, Any] = {}
    descriptions: List[str] = []

    for raw in section:
        if len(jobs) >= MAX_HEURISTIC_JOBS:
            break
        line = raw.strip()
        if len(line) < 3:
            continue

        if BULLET_RE.match(line):
            if job:
                descriptions.append("• " + BULLET_RE.sub("", line))
            continue

        date_match = _match_date(line)
        remainder = line
        if date_match:
            remainder = (line[:date_match.start()] + line[date_match.end():]).strip(" |,•-–—()\t")

        # A date line right under a job header belongs to that job
        if date_match and (len(remainder) < 3 or (job and not job.get("startDate") and not job.get("current"))):
            if job:
                _apply_dates(job, date_match)
                if len(remainder) >= 3 and not job.get("location"):
                    job["location"] = remainder
            continue

        job_match = None
        if len(line) < 120 and not _looks_like_sentence(remainder):
            job_match = _match_job(remainder)
        if job_match:
            finished = _finish_job(job, descriptions, len(jobs))
            if finished:
                jobs.append(finished)
            job = {
                "position": job_match.group(1).strip(),
                "company": job_match.group(2).strip(),
                "location": (job_match.group(3) or "").strip(),
                "startDate": "",
                "endDate": "",
                "current": False,
            }
            descriptions = []
            if date_match:
                _apply_dates(job, date_match)
            continue

        if date_match and job:
            _apply_dates(job, date_match)
            continue

        if 15 < len(line) < 300 and job:
            descriptions.append(line)

    if len(jobs) < MAX_HEURISTIC_JOBS:
        finished = _finish_job(job, descriptions, len(jobs))
        if finished:
            jobs.append(finished)
    return jobs


def _extract_education(lines: List[str]) -> List[Education]:
    section = _section_lines(lines, EDUCATION_HEADING_RE)
    if not section:
        return []

    entries: List[Education] = []
    for idx, raw in enumerate(section):
        if len(entries) >= MAX_HEURISTIC_EDUCATION:
            break
        line = raw.strip()
        if not line or not (DEGREE_RE.search(line) or SCHOOL_RE.search(line)):
            continue

        parts = [p.strip() for p in re.split(r"[-–—|]", line) if p.strip()]
        named = [p for p in parts if not YEAR_RE.fullmatch(p)] or parts
        institution = next((p for p in named if SCHOOL_RE.search(p)), named[-1])
        degree = next((p for p in named if DEGREE_RE.search(p)), named[0])

        field_of_study = ""
        if " in " in degree:
            degree, field_of_study = [s.strip() for s in degree.split(" in ", 1)]
        field_of_study = YEAR_RE.sub("", field_of_study).strip(" ,")

        year = YEAR_RE.findall(line)
        entries.append(Education(
            id=new_id(index=idx),
            institution=YEAR_RE.sub("", institution).strip(" ,"),
            degree=YEAR_RE.sub("", degree).strip(" ,"),
            field=field_of_study,
            graduationDate=year[-1] if year else "",
        ))
    return entries


def _extract_summary(lines: List[str], text: str) -> str:
    for idx, line in enumerate(lines):
        match = SUMMARY_LABEL_RE.match(line.strip())
        if not match:
            continue
        block = [match.group(1) or ""]
        for following in lines[idx + 1:]:
            if not following.strip() or _is_heading(following):
                break
            block.append(following.strip())
        summary = " ".join(b for b in block if b).strip()
        if summary:
            return summary[:500]

    paragraphs = [p for p in text.split("\n\n") if len(p.strip()) > 50]
    if paragraphs:
        return paragraphs[0].replace("\n", " ").strip()[:300]
    return ""


def build_resume_data_from_text(text: str) -> ResumeData:
    """Heuristic, regex-only parse of raw resume text."""
    text = text or ""
    raw_lines = text.split("\n")
    lines = [l.strip() for l in raw_lines if l.strip()]

    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    linkedin_match = LINKEDIN_RE.search(text)
    github_match = GITHUB_RE.search(text)
    website = next(
        (
            url for url in URL_RE.findall(text)
            if "linkedin.com" not in url.lower() and "github.com" not in url.lower()
        ),
        "",
    )
    email = email_match.group(0) if email_match else ""
    phone = phone_match.group(0).strip() if phone_match else ""

    personal = PersonalInfo(
        fullName=_guess_name(lines, email, phone),
        email=email,
        phone=phone,
        location=_guess_location(lines),
        linkedin=linkedin_match.group(0) if linkedin_match else "",
        github=github_match.group(0) if github_match else "",
        website=website,
        summary=_extract_summary(raw_lines, text),
    )

    resume = ResumeData(
        personalInfo=personal,
        workExperience=_extract_work_experience(raw_lines),
        education=_extract_education(raw_lines),
        skills=_extract_skills(raw_lines, text),
        customSections=[
            CustomSection(id=new_id(index=999), title=RAW_CONTENT_TITLE, content=text[:2000])
        ] if text.strip() else [],
    )
    logger.debug(
        f"Heuristic parse: name={bool(personal.fullName)} work={len(resume.workExperience)} "
        f"education={len(resume.education)} skills={len(resume.skills)}"
    )
    return resume


# ---------------------------------------------------------------------------
# AI structuring
# ---------------------------------------------------------------------------

def _clip(value: Any, limit: int | None = None) -> str:
    text = "" if value is None else str(value).strip()
    return text[:limit] if limit else text


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def validate_structured_data(parsed: Dict[str, Any]) -> ResumeData:
    """Clamp and filter the model's JSON into Resume Data."""
    resume = ResumeData()

    info = parsed.get("personalInfo")
    if isinstance(info, dict):
        resume.personalInfo = PersonalInfo(
            fullName=_clip(info.get("fullName"), 100),
            email=_clip(info.get("email")).lower(),
            phone=re.sub(r"[^\d\-\(\)\+\s]", "", _clip(info.get("phone"))).strip(),
            location=_clip(info.get("location"), 100),
            linkedin=_clip(info.get("linkedin")),
            github=_clip(info.get("github")),
            website=_clip(info.get("website")),
            summary=_clip(info.get("summary"), 1000),
        )

    names: List[str] = []
    seen = set()
    for item in _list(parsed.get("skills")):
        name = item.get("name") if isinstance(item, dict) else item
        if not isinstance(name, str) or not name.strip():
            continue
        if name.strip().lower() not in seen:
            seen.add(name.strip().lower())
            names.append(name.strip())
    resume.skills = [
        Skill(id=new_id("skill", i), name=name[:50], level="intermediate", category="Technical")
        for i, name in enumerate(names[:30])
    ]

    work = [w for w in _list(parsed.get("workExperience")) if isinstance(w, dict) and w.get("company") and w.get("position")]
    resume.workExperience = [
        WorkExperience(
            id=_clip(w.get("id")) or new_id("work", i),
            company=_clip(w.get("company"), 100),
            position=_clip(w.get("position"), 100),
            location=_clip(w.get("location"), 100),
            startDate=_clip(w.get("startDate")),
            endDate=_clip(w.get("endDate")),
            current=bool(w.get("isCurrentJob") or w.get("current")),
            description=_clip(w.get("description"), 2000),
        )
        for i, w in enumerate(work[:8])
    ]

    education = [e for e in _list(parsed.get("education")) if isinstance(e, dict) and (e.get("school") or e.get("institution") or e.get("degree"))]
    resume.education = [
        Education(
            id=_clip(e.get("id")) or new_id("edu", i),
            institution=_clip(e.get("school") or e.get("institution"), 100),
            degree=_clip(e.get("degree"), 100),
            field=_clip(e.get("field"), 100),
            graduationDate=_clip(e.get("graduationDate")),
        )
        for i, e in enumerate(education[:5])
    ]

    certs = [c for c in _list(parsed.get("certifications")) if isinstance(c, dict) and c.get("name")]
    resume.certifications = [
        Certification(
            id=_clip(c.get("id")) or new_id("cert", i),
            name=_clip(c.get("name"), 100),
            issuer=_clip(c.get("issuer"), 100),
            date=_clip(c.get("dateObtained") or c.get("date")),
            description=_clip(c.get("description"), 500),
        )
        for i, c in enumerate(certs[:8])
    ]

    projects = [p for p in _list(parsed.get("projects")) if isinstance(p, dict) and (p.get("name") or p.get("title"))]
    resume.projects = [
        Project(
            id=_clip(p.get("id")) or new_id("proj", i),
            title=_clip(p.get("name") or p.get("title"), 100),
            description=_clip(p.get("description"), 1000),
            technologies=[_clip(t, 50) for t in _list(p.get("technologies")) if _clip(t)],
        )
        for i, p in enumerate(projects[:6])
    ]
    return resume


def ai_structure_from_text(raw_text: str, llm: Optional[LLMManager] = None) -> Optional[ResumeData]:
    """Structured parse by the language model; ``None`` whenever it cannot be trusted."""
    if not raw_text or len(raw_text) < 20:
        return None
    llm = llm or get_llm()
    if not llm.available:
        return None

    prompt = UPLOAD_STRUCTURE_PROMPT.format(resume_text=_clean_for_ai(raw_text)[:20000])
    try:
        parsed = llm.generate_json(prompt, temperature=0.1)
    except LLMError as e:
        logger.warning(f"AI structuring failed: {e}")
        return None

    resume = validate_structured_data(parsed)
    logger.info(
        f"AI structured data: work={len(resume.workExperience)} education={len(resume.education)} "
        f"skills={len(resume.skills)} certifications={len(resume.certifications)} "
        f"projects={len(resume.projects)}"
    )
    return resume


def structure_pdf_text(text: str, llm: Optional[LLMManager] = None) -> Optional[Dict[str, Any]]:
    """Smaller structuring prompt used by the PDF route; returns the model's raw JSON."""
    if not text or len(text) < 20:
        return None
    llm = llm or get_llm()
    if not llm.available:
        return None
    try:
        return llm.generate_json(PDF_STRUCTURE_PROMPT.format(resume_text=text[:8000]), temperature=0.1)
    except LLMError as e:
        logger.warning(f"AI structuring of PDF text failed: {e}")
        return None


# ---------------------------------------------------------------------------
# Fallback chain
# ---------------------------------------------------------------------------

def _unique_skills(skills: List[Skill]) -> List[Skill]:
    seen = set()
    unique = []
    for skill in skills:
        key = skill.name.strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique.append(skill)
    return unique


def merge_structured(heuristic: ResumeData, ai: ResumeData) -> ResumeData:
    """Overlay the AI parse on the heuristic one: non-empty AI values win."""
    personal = PersonalInfo(**heuristic.personalInfo.to_dict())
    for key, value in ai.personalInfo.to_dict().items():
        if value:
            setattr(personal, key, value)

    return ResumeData(
        personalInfo=personal,
        workExperience=ai.workExperience or heuristic.workExperience,
        education=ai.education or heuristic.education,
        skills=_unique_skills(ai.skills or heuristic.skills),
        projects=ai.projects or heuristic.projects,
        certifications=ai.certifications or heuristic.certifications,
        languages=heuristic.languages,
        references=heuristic.references,
        customSections=heuristic.customSections,
        selectedTemplate=heuristic.selectedTemplate,
    )


def parse_text_to_resume_data(raw_text: str, llm: Optional[LLMManager] = None) -> ResumeData:
    heuristic = build_resume_data_from_text(raw_text)
    ai = ai_structure_from_text(raw_text, llm)
    if ai is None:
        return heuristic
    return merge_structured(heuristic, ai)


def import_resume(
    filename: str,
    data: bytes,
    content_type: str | None = None,
    llm: Optional[LLMManager] = None,
    max_bytes: int | None = None,
) -> ResumeData:
    """
    Import an uploaded resume file.

    Structured AI parse over a heuristic parse; when neither finds a name or
    any work history, the raw text becomes the summary so nothing is lost.
    """
    validate_upload(filename, content_type, len(data), max_bytes)
    raw_text = extract_text(filename, data, content_type)
    if not raw_text or len(raw_text.strip()) < 10:
        raise UploadError("No text could be extracted from the file. Please try a DOCX or TXT file.")

    resume = parse_text_to_resume_data(raw_text, llm)
    if not resume.personalInfo.fullName and not resume.workExperience:
        resume.personalInfo.summary = raw_text[:500]
    return resume


def parse_pdf_upload(filename: str, data: bytes, llm: Optional[LLMManager] = None) -> Dict[str, Any]:
    """Text, optional AI structure and basic info for an uploaded PDF."""
    text, pages, meta = extract_pdf_text(data)
    if not text or len(text) < 10:
        raise UploadError("No readable text found")
    clean_text = clean_extracted_text(text)
    return {
        "text": clean_text,
        "structuredData": structure_pdf_text(clean_text, llm),
        "pages": pages,
        "info": {
            "title": filename or "Resume",
            "author": meta.get("author", ""),
            "subject": meta.get("subject", ""),
        },
    }
