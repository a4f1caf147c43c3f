"""
Resume Data model

The editor keeps one Resume Data object per browser. It travels as camelCase
JSON between the browser and the routes, so every dataclass here has a
tolerant ``from_dict`` (accepting the alias keys older clients and the AI
structuring step produce) and a ``to_dict`` that emits the canonical keys
plus the aliases the templates and prompts read.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

RESUME_TEMPLATES = ("modern", "classic", "minimal", "creative", "executive", "technical")
DEFAULT_TEMPLATE = "modern"

SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")
LANGUAGE_PROFICIENCIES = ("basic", "conversational", "proficient", "fluent", "native")


def new_id(prefix: str = "", index: int = 0) -> str:
    """Millisecond-timestamp id, optionally prefixed (``work_1712345678901_0``)."""
    stamp = int(time.time() * 1000)
    if prefix:
        return f"{prefix}_{stamp}_{index}"
    return str(stamp + index)


def _text(data: Dict[str, Any], *keys: str) -> str:
    """First non-empty value among ``keys``, as a string."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            if value.strip():
                return value
            continue
        return str(value)
    return ""


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


@dataclass
class PersonalInfo:
    fullName: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""
    summary: str = ""
    title: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "PersonalInfo":
        data = _as_dict(data)
        return cls(
            fullName=_text(data, "fullName", "name"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            location=_text(data, "location"),
            linkedin=_text(data, "linkedin"),
            github=_text(data, "github"),
            website=_text(data, "website"),
            summary=_text(data, "summary"),
            title=_text(data, "title"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fullName": self.fullName,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "linkedin": self.linkedin,
            "github": self.github,
            "website": self.website,
            "summary": self.summary,
            "title": self.title,
        }


@dataclass
class WorkExperience:
    id: str = ""
    company: str = ""
    position: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    current: bool = False
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "WorkExperience":
        data = _as_dict(data)
        return cls(
            id=_text(data, "id") or new_id("work", index),
            company=_text(data, "company"),
            position=_text(data, "position", "title"),
            location=_text(data, "location"),
            startDate=_text(data, "startDate"),
            endDate=_text(data, "endDate"),
            current=bool(data.get("current") or data.get("isCurrentJob")),
            description=_text(data, "description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "company": self.company,
            "position": self.position,
            "location": self.location,
            "startDate": self.startDate,
            "endDate": self.endDate,
            "current": self.current,
            "isCurrentJob": self.current,
            "description": self.description,
        }


@dataclass
class Education:
    id: str = ""
    institution: str = ""
    degree: str = ""
    field: str = ""
    startDate: str = ""
    endDate: str = ""
    graduationDate: str = ""
    current: bool = False
    gpa: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Education":
        data = _as_dict(data)
        return cls(
            id=_text(data, "id") or new_id("edu", index),
            institution=_text(data, "institution", "school"),
            degree=_text(data, "degree"),
            field=_text(data, "field"),
            startDate=_text(data, "startDate"),
            endDate=_text(data, "endDate"),
            graduationDate=_text(data, "graduationDate"),
            current=bool(data.get("current")),
            gpa=_text(data, "gpa"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "institution": self.institution,
            "school": self.institution,
            "degree": self.degree,
            "field": self.field,
            "startDate": self.startDate,
            "endDate": self.endDate,
            "graduationDate": self.graduationDate,
            "current": self.current,
            "gpa": self.gpa,
        }


@dataclass
class Skill:
    id: str = ""
    name: str = ""
    level: str = "intermediate"
    category: str = ""

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "Skill":
        if isinstance(data, str):
            return cls(id=new_id("skill", index), name=data.strip(), category="Technical")
        data = _as_dict(data)
        level = _text(data, "level").lower()
        return cls(
            id=_text(data, "id") or new_id("skill", index),
            name=_text(data, "name").strip(),
            level=level if level in SKILL_LEVELS else "intermediate",
            category=_text(data, "category"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "level": self.level, "category": self.category}


@dataclass
class Project:
    id: str = ""
    title: str = ""
    description: str = ""
    technologies: List[str] = field(default_factory=list)
    link: str = ""
    github: str = ""
    startDate: str = ""
    endDate: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Project":
        data = _as_dict(data)
        technologies = data.get("technologies") or []
        if isinstance(technologies, str):
            technologies = [t.strip() for t in technologies.split(",") if t.strip()]
        return cls(
            id=_text(data, "id") or new_id("proj", index),
            title=_text(data, "title", "name"),
            description=_text(data, "description"),
            technologies=[str(t) for t in _as_list(technologies)],
            link=_text(data, "link", "url"),
            github=_text(data, "github"),
            startDate=_text(data, "startDate"),
            endDate=_text(data, "endDate"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "name": self.title,
            "description": self.description,
            "technologies": list(self.technologies),
            "link": self.link,
            "url": self.link,
            "github": self.github,
            "startDate": self.startDate,
            "endDate": self.endDate,
        }


@dataclass
class Certification:
    id: str = ""
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiryDate: str = ""
    credentialId: str = ""
    link: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Certification":
        data = _as_dict(data)
        return cls(
            id=_text(data, "id") or new_id("cert", index),
            name=_text(data, "name"),
            issuer=_text(data, "issuer"),
            date=_text(data, "date", "dateObtained"),
            expiryDate=_text(data, "expiryDate", "expirationDate"),
            credentialId=_text(data, "credentialId"),
            link=_text(data, "link", "url"),
            description=_text(data, "description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "issuer": self.issuer,
            "date": self.date,
            "dateObtained": self.date,
            "expiryDate": self.expiryDate,
            "credentialId": self.credentialId,
            "link": self.link,
            "description": self.description,
        }


@dataclass
class Language:
    id: str = ""
    name: str = ""
    proficiency: str = "conversational"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Language":
        data = _as_dict(data)
        proficiency = _text(data, "proficiency").lower()
        return cls(
            id=_text(data, "id") or new_id("lang", index),
            name=_text(data, "name", "language"),
            proficiency=proficiency if proficiency in LANGUAGE_PROFICIENCIES else "conversational",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "language": self.name, "proficiency": self.proficiency}


@dataclass
class CustomSection:
    id: str = ""
    title: str = ""
    content: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "CustomSection":
        data = _as_dict(data)
        return cls(
            id=_text(data, "id") or new_id("section", index),
            title=_text(data, "title"),
            content=_text(data, "content"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "content": self.content}


@dataclass
class ResumeData:
    personalInfo: PersonalInfo = field(default_factory=PersonalInfo)
    workExperience: List[WorkExperience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    references: List[Dict[str, Any]] = field(default_factory=list)
    customSections: List[CustomSection] = field(default_factory=list)
    selectedTemplate: str = DEFAULT_TEMPLATE

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "ResumeData":
        data = _as_dict(data)
        template = _text(data, "selectedTemplate").lower()
        return cls(
            personalInfo=PersonalInfo.from_dict(data.get("personalInfo")),
            workExperience=[WorkExperience.from_dict(w, i) for i, w in enumerate(_as_list(data.get("workExperience")))],
            education=[Education.from_dict(e, i) for i, e in enumerate(_as_list(data.get("education")))],
            skills=[s for s in (Skill.from_dict(s, i) for i, s in enumerate(_as_list(data.get("skills")))) if s.name],
            projects=[Project.from_dict(p, i) for i, p in enumerate(_as_list(data.get("projects")))],
            certifications=[Certification.from_dict(c, i) for i, c in enumerate(_as_list(data.get("certifications")))],
            languages=[Language.from_dict(l, i) for i, l in enumerate(_as_list(data.get("languages")))],
            references=[r for r in _as_list(data.get("references")) if isinstance(r, dict)],
            customSections=[CustomSection.from_dict(c, i) for i, c in enumerate(_as_list(data.get("customSections")))],
            selectedTemplate=template if template in RESUME_TEMPLATES else DEFAULT_TEMPLATE,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personalInfo": self.personalInfo.to_dict(),
            "workExperience": [w.to_dict() for w in self.workExperience],
            "education": [e.to_dict() for e in self.education],
            "skills": [s.to_dict() for s in self.skills],
            "projects": [p.to_dict() for p in self.projects],
            "certifications": [c.to_dict() for c in self.certifications],
            "languages": [l.to_dict() for l in self.languages],
            "references": list(self.references),
            "customSections": [c.to_dict() for c in self.customSections],
            "selectedTemplate": self.selectedTemplate,
        }


def empty_resume(template: str = DEFAULT_TEMPLATE) -> ResumeData:
    return ResumeData(selectedTemplate=template if template in RESUME_TEMPLATES else DEFAULT_TEMPLATE)


def has_content(resume: ResumeData) -> bool:
    """True once the editor has anything worth previewing."""
    return bool(
        resume.personalInfo.fullName
        or resume.workExperience
        or resume.education
        or resume.skills
    )


def replace_with_extracted(current: ResumeData, extracted: ResumeData) -> ResumeData:
    """Swap in imported data wholesale, keeping only the chosen template."""
    return ResumeData(
        personalInfo=extracted.personalInfo,
        workExperience=list(extracted.workExperience),
        education=list(extracted.education),
        skills=list(extracted.skills),
        projects=list(extracted.projects),
        certifications=list(extracted.certifications),
        languages=list(extracted.languages),
        references=list(extracted.references),
        customSections=list(extracted.customSections),
        selectedTemplate=current.selectedTemplate,
    )


def coerce_resume(value: Any) -> Optional[ResumeData]:
    """Accept either a ResumeData or its JSON dict; ``None`` for anything else."""
    if isinstance(value, ResumeData):
        return value
    if isinstance(value, dict):
        return ResumeData.from_dict(value)
    return None
