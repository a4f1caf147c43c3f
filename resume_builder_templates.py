"""
Resume templates

Six visual templates share one Resume Data object; a template only decides
colours, fonts, header alignment, section order and how skills are drawn.
The same TemplateStyle drives both the HTML preview and the PDF export.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from resume_model import DEFAULT_TEMPLATE, ResumeData
from resume_utils import calculate_duration

TEMPLATE_DIR = Path(__file__).parent / "templates"

SECTION_TITLES = {
    "summary": "Professional Summary",
    "workExperience": "Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
    "languages": "Languages",
    "customSections": "Additional Information",
}


@dataclass(frozen=True)
class TemplateStyle:
    name: str
    label: str
    description: str
    accent: str  # hex colour for headings and rules
    heading_font: str  # reportlab font names
    body_font: str
    header_align: str  # 'left' or 'center'
    section_order: tuple
    skill_mode: str  # 'tags', 'inline', 'grouped' or 'levels'
    uppercase_headings: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["section_order"] = list(self.section_order)
        return data


_STANDARD_ORDER = (
    "summary", "workExperience", "education", "skills", "projects",
    "certifications", "languages", "customSections",
)

TEMPLATES: Dict[str, TemplateStyle] = {
    "modern": TemplateStyle(
        name="modern",
        label="Modern",
        description="Clean layout with a blue accent, suited to tech and startup roles",
        accent="#2563eb",
        heading_font="Helvetica-Bold",
        body_font="Helvetica",
        header_align="left",
        section_order=_STANDARD_ORDER,
        skill_mode="tags",
    ),
    "classic": TemplateStyle(
        name="classic",
        label="Classic",
        description="Traditional serif layout for finance, law and other conservative industries",
        accent="#1f2937",
        heading_font="Times-Bold",
        body_font="Times-Roman",
        header_align="center",
        section_order=_STANDARD_ORDER,
        skill_mode="inline",
    ),
    "minimal": TemplateStyle(
        name="minimal",
        label="Minimal",
        description="Understated single column that keeps entry-level resumes uncluttered",
        accent="#6b7280",
        heading_font="Helvetica",
        body_font="Helvetica",
        header_align="left",
        section_order=("summary", "education", "workExperience", "skills", "projects",
                       "certifications", "languages", "customSections"),
        skill_mode="inline",
        uppercase_headings=False,
    ),
    "creative": TemplateStyle(
        name="creative",
        label="Creative",
        description="Bold purple accent with projects up front for design and marketing roles",
        accent="#7c3aed",
        heading_font="Helvetica-Bold",
        body_font="Helvetica",
        header_align="center",
        section_order=("summary", "projects", "workExperience", "skills", "education",
                       "certifications", "languages", "customSections"),
        skill_mode="tags",
    ),
    "executive": TemplateStyle(
        name="executive",
        label="Executive",
        description="Formal layout that leads with experience for senior leadership roles",
        accent="#0f172a",
        heading_font="Times-Bold",
        body_font="Times-Roman",
        header_align="center",
        section_order=("summary", "workExperience", "education", "certifications", "skills",
                       "projects", "languages", "customSections"),
        skill_mode="grouped",
    ),
    "technical": TemplateStyle(
        name="technical",
        label="Technical",
        description="Skills and projects first, with skill levels, for engineering roles",
        accent="#059669",
        heading_font="Courier-Bold",
        body_font="Helvetica",
        header_align="left",
        section_order=("summary", "skills", "workExperience", "projects", "education",
                       "certifications", "languages", "customSections"),
        skill_mode="levels",
    ),
}


def get_template(name: Optional[str]) -> TemplateStyle:
    """Template by name; unknown names get the modern template."""
    return TEMPLATES.get((name or "").lower(), TEMPLATES[DEFAULT_TEMPLATE])


def list_templates() -> List[Dict[str, Any]]:
    return [t.to_dict() for t in TEMPLATES.values()]


def suggest_template(industry: Optional[str] = None, experience: Optional[str] = None) -> Optional[str]:
    """Template suggested by the guided setup answers, or None to keep the current one."""
    if industry == "tech":
        return "modern"
    if industry == "finance":
        return "classic"
    if experience == "entry":
        return "minimal"
    return None


def group_skills(resume: ResumeData) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for skill in resume.skills:
        groups.setdefault(skill.category or "Technical", []).append(skill.name)
    return groups


def has_section(resume: ResumeData, section: str) -> bool:
    if section == "summary":
        return bool(resume.personalInfo.summary)
    return bool(getattr(resume, section, None))


def visible_sections(resume: ResumeData, template: TemplateStyle) -> List[str]:
    """Sections to draw, in template order, skipping empty ones."""
    return [s for s in template.section_order if has_section(resume, s)]


def format_range(start: str, end: str, current: bool) -> str:
    end_text = "Present" if current else end
    return " - ".join(p for p in (start, end_text) if p)


def contact_items(resume: ResumeData) -> List[str]:
    info = resume.personalInfo
    return [v for v in (info.email, info.phone, info.location, info.linkedin, info.github, info.website) if v]


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.globals.update(format_range=format_range, calculate_duration=calculate_duration)


def render_html(resume: ResumeData, template_name: Optional[str] = None) -> str:
    """Render the HTML preview of a resume in its selected (or the given) template."""
    template = get_template(template_name or resume.selectedTemplate)
    return _env.get_template("resume_preview.html").render(
        resume=resume,
        info=resume.personalInfo,
        style=template,
        sections=visible_sections(resume, template),
        titles=SECTION_TITLES,
        contacts=contact_items(resume),
        skill_groups=group_skills(resume),
    )
