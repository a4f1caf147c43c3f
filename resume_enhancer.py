"""
Resume enhancement: improvement suggestions and applying them to Resume Data.

Suggestions carry an ``applicableData`` block ({section, field, index, value})
so the editor can apply one with a single click; ``apply_suggestion`` is that
click on the server side.
"""
from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from enhanced_prompts import ENHANCEMENT_FOCUS, ENHANCEMENT_PROMPT, QUICK_ENHANCE_PROMPT
from llm_manager import LLMError, LLMManager, get_llm
from resume_model import ResumeData, Skill, new_id
from resume_utils import render_resume_for_enhancement

logger = logging.getLogger("ResumeEnhancer")

ENHANCEMENT_TYPES = tuple(ENHANCEMENT_FOCUS)
DEFAULT_ENHANCEMENT_TYPE = "comprehensive"

MARKET_SKILLS = ["Problem Solving", "Team Leadership", "Project Management", "Communication", "Critical Thinking"]

FALLBACK_SUMMARY = (
    "Results-driven professional with expertise in modern technologies and proven track record "
    "of delivering high-impact solutions. Experienced in leading cross-functional teams and "
    "driving organizational growth through innovative approaches."
)

# Section names the model and the editor use interchangeably
_SECTION_ALIASES = {
    "experience": "workExperience",
    "work": "workExperience",
    "workexperience": "workExperience",
    "personal": "personalInfo",
    "personalinfo": "personalInfo",
    "summary": "personalInfo",
    "skill": "skills",
    "skills": "skills",
    "education": "education",
    "project": "projects",
    "projects": "projects",
}

_FIELD_ALIASES = {
    "isCurrentJob": "current",
    "school": "institution",
    "name": "title",
    "url": "link",
}


def normalize_enhancement_type(value: Optional[str]) -> str:
    value = (value or "").strip().lower()
    return value if value in ENHANCEMENT_TYPES else DEFAULT_ENHANCEMENT_TYPE


def fallback_suggestions(resume: ResumeData) -> List[Dict[str, Any]]:
    suggestions: List[Dict[str, Any]] = []

    summary = resume.personalInfo.summary or ""
    if len(summary) < 100:
        suggestions.append({
            "id": "summary_enhancement",
            "type": "summary",
            "title": "Enhance Professional Summary",
            "description": (
                "Create a compelling professional summary that highlights your key "
                "achievements and value proposition"
            ),
            "priority": "high",
            "confidence": 90,
            "impact": "Increases recruiter engagement by 65%",
            "category": "Content",
            "before": summary,
            "after": FALLBACK_SUMMARY,
            "applicableData": {"section": "personalInfo", "field": "summary", "value": FALLBACK_SUMMARY},
        })

    current = {s.name.lower() for s in resume.skills}
    missing = [skill for skill in MARKET_SKILLS if skill.lower() not in current]
    if missing:
        suggestions.append({
            "id": "skills_enhancement",
            "type": "skill",
            "title": "Add In-Demand Skills",
            "description": "Include highly sought-after skills that are trending in the current job market",
            "priority": "high",
            "confidence": 85,
            "impact": "Improves ATS compatibility by 40%",
            "category": "Skills",
            "after": ", ".join(missing),
            "applicableData": {
                "section": "skills",
                "field": "add",
                "value": [{"name": skill, "level": "intermediate"} for skill in missing],
            },
        })

    return suggestions


def generate_enhancements(
    resume: ResumeData,
    enhancement_type: Optional[str] = None,
    llm: Optional[LLMManager] = None,
) -> List[Dict[str, Any]]:
    """Model-generated suggestions, or the local fallback when the model fails."""
    llm = llm or get_llm()
    kind = normalize_enhancement_type(enhancement_type)
    prompt = ENHANCEMENT_PROMPT.format(
        resume_text=render_resume_for_enhancement(resume),
        focus=ENHANCEMENT_FOCUS[kind],
    )
    try:
        parsed = llm.generate_json(prompt)
    except LLMError as e:
        logger.warning(f"AI enhancement generation failed, using fallback: {e}")
        return fallback_suggestions(resume)

    suggestions = parsed.get("suggestions") or []
    if not isinstance(suggestions, list):
        return []
    return [s for s in suggestions if isinstance(s, dict)]


def _skills_from_value(value: Any) -> List[Skill]:
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",")]
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, list):
        return []
    skills = []
    for idx, item in enumerate(value):
        skill = Skill.from_dict(item, idx)
        if skill.name:
            skills.append(skill)
    return skills


def add_skills(resume: ResumeData, new_skills: Iterable[Any]) -> int:
    """Append skills in place, skipping names already present. Returns how many were added."""
    existing = {s.name.lower() for s in resume.skills}
    added = 0
    for idx, item in enumerate(new_skills):
        skill = item if isinstance(item, Skill) else Skill.from_dict(item, idx)
        if not skill.name or skill.name.lower() in existing:
            continue
        skill.id = new_id(index=len(resume.skills))
        resume.skills.append(skill)
        existing.add(skill.name.lower())
        added += 1
    return added


def _set_entry_field(entries: list, index: Any, field_name: str, value: Any, section: str) -> None:
    try:
        position = int(index)
    except (TypeError, ValueError):
        raise ValueError(f"A numeric index is required for section '{section}'")
    if not 0 <= position < len(entries):
        raise ValueError(f"Index {position} is out of range for section '{section}'")
    entry = entries[position]
    name = _FIELD_ALIASES.get(field_name, field_name)
    if name == "id" or not hasattr(entry, name):
        raise ValueError(f"Unknown field '{field_name}' for section '{section}'")
    current = getattr(entry, name)
    if isinstance(current, bool):
        value = bool(value)
    elif isinstance(current, list):
        value = value if isinstance(value, list) else [v.strip() for v in str(value).split(",") if v.strip()]
    else:
        value = "" if value is None else str(value)
    setattr(entry, name, value)


def apply_suggestion(resume: ResumeData, applicable_data: Dict[str, Any]) -> ResumeData:
    """Return a copy of ``resume`` with one suggestion's ``applicableData`` applied."""
    if not isinstance(applicable_data, dict) or not applicable_data.get("section"):
        raise ValueError("Suggestion has no applicable data")

    raw_section = str(applicable_data["section"])
    section = _SECTION_ALIASES.get(raw_section.lower().replace("_", ""), raw_section)
    field_name = str(applicable_data.get("field") or "")
    value = applicable_data.get("value")
    updated = copy.deepcopy(resume)

    if section == "personalInfo":
        field_name = field_name or ("summary" if raw_section.lower() == "summary" else "")
        if not hasattr(updated.personalInfo, field_name):
            raise ValueError(f"Unknown personal info field '{field_name}'")
        setattr(updated.personalInfo, field_name, "" if value is None else str(value))
    elif section == "skills":
        if field_name not in ("", "add"):
            raise ValueError(f"Unsupported skills operation '{field_name}'")
        add_skills(updated, _skills_from_value(value))
    elif section in ("workExperience", "education", "projects"):
        _set_entry_field(getattr(updated, section), applicable_data.get("index"), field_name, value, section)
    else:
        raise ValueError(f"Unknown resume section '{raw_section}'")

    return updated


def quick_enhance(resume: ResumeData, llm: Optional[LLMManager] = None) -> ResumeData:
    """One-shot AI polish: new summary, extra skills and rewritten experience descriptions."""
    llm = llm or get_llm()
    if not llm.available:
        return resume

    resume_json = json.dumps(resume.to_dict())[:6000]
    try:
        ai = llm.generate_json(QUICK_ENHANCE_PROMPT.format(resume_json=resume_json))
    except LLMError as e:
        logger.warning(f"Quick enhance failed, resume left unchanged: {e}")
        return resume

    updated = copy.deepcopy(resume)
    personal = ai.get("personalInfo")
    if isinstance(personal, dict) and personal.get("summary"):
        updated.personalInfo.summary = str(personal["summary"])

    skills_to_add = ai.get("skillsToAdd")
    if isinstance(skills_to_add, list) and skills_to_add:
        add_skills(updated, [str(s) for s in skills_to_add[:10]])

    enhancements = ai.get("experienceEnhancements")
    if isinstance(enhancements, list):
        by_id = {
            str(e.get("id")): e.get("enhancement")
            for e in enhancements
            if isinstance(e, dict) and e.get("enhancement")
        }
        for exp in updated.workExperience:
            if exp.id in by_id:
                exp.description = str(by_id[exp.id])

    return updated


def apply_job_optimizations(
    resume: ResumeData,
    add_skills_list: Optional[List[str]] = None,
    job_title: str = "",
    enhance_summary: bool = False,
) -> ResumeData:
    """Apply what the job-match panel offers: missing skills and a targeted summary line."""
    updated = copy.deepcopy(resume)
    top_skills = ", ".join(s.name for s in updated.skills[:3])
    if add_skills_list:
        add_skills(updated, add_skills_list)

    if enhance_summary and job_title:
        updated.personalInfo.summary = (
            (updated.personalInfo.summary or "")
            + f" Seeking opportunities as {job_title} to leverage expertise in {top_skills}."
        )
    return updated
