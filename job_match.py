"""
Job match: how well a resume fits a specific job description.

The model plays a blunt hiring manager. Without it, ``fallback_job_match``
scores the resume from experience, projects, certifications, summary and
skill count, and rapidfuzz lines up the resume's skills against the
technologies the job description names.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from rapidfuzz import fuzz

from enhanced_prompts import JOB_MATCH_PROMPT
from llm_manager import LLMError, LLMManager, get_llm
from resume_model import ResumeData
from resume_parser import TECHNICAL_SKILLS, skill_pattern
from resume_utils import calculate_total_experience, render_resume_for_job_match

logger = logging.getLogger("JobMatch")

SKILL_MATCH_THRESHOLD = 85
SHORT_TERM_LENGTH = 3  # C#, Go, AWS: exact only
FALLBACK_SCORE_CAP = 85


def job_terms(job_description: str) -> List[str]:
    """Known technical terms mentioned in the job description, in vocabulary order."""
    return [term for term in TECHNICAL_SKILLS if skill_pattern(term).search(job_description)]


def _normalize(name: str) -> str:
    return name.strip().lower()


def _similar(a: str, b: str) -> bool:
    """Spelling variants (NodeJS / Node.js), never a shorter term inside a longer one."""
    if min(len(a.strip()), len(b.strip())) <= SHORT_TERM_LENGTH:
        return _normalize(a) == _normalize(b)
    return fuzz.ratio(a, b, processor=_normalize) >= SKILL_MATCH_THRESHOLD


def compare_skills(resume: ResumeData, job_description: str) -> Dict[str, List[str]]:
    """Split skills into those the job asks for that the resume has, and those it lacks."""
    terms = job_terms(job_description)
    names = [s.name for s in resume.skills if s.name]

    matched = [
        name for name in names
        if skill_pattern(name).search(job_description) or any(_similar(name, t) for t in terms)
    ]
    missing = [t for t in terms if not any(_similar(name, t) for name in names)]
    return {"matchedSkills": matched, "missingSkills": missing}


def _candidate_level(total_years: float) -> str:
    if total_years < 1:
        return "BEGINNER"
    if total_years < 3:
        return "JUNIOR"
    return "MID"


def fallback_job_match(
    resume: ResumeData,
    job_description: str,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Harsh fallback analysis when AI fails"""
    total_experience = calculate_total_experience(resume.workExperience, today)
    has_projects = bool(resume.projects)
    has_certifications = bool(resume.certifications)
    has_strong_summary = len(resume.personalInfo.summary or "") > 100

    score = 30
    if total_experience >= 3:
        score += 20
    if has_projects:
        score += 15
    if has_certifications:
        score += 10
    if has_strong_summary:
        score += 10
    if len(resume.skills) >= 10:
        score += 15

    if score >= 70:
        verdict = "STRONG_MATCH"
    elif score >= 55:
        verdict = "INTERVIEW"
    elif score >= 40:
        verdict = "MAYBE"
    else:
        verdict = "REJECT"

    if total_experience < 2:
        feedback = (
            "Insufficient experience for most professional roles. This looks like an entry-level "
            "candidate trying to punch above their weight."
        )
    else:
        feedback = (
            "Average candidate with standard qualifications. Nothing exceptional that would make "
            "them stand out from the competition."
        )

    red_flags = []
    if not has_strong_summary:
        red_flags.append("Weak or missing professional summary")
    if not has_projects:
        red_flags.append("No projects to demonstrate practical skills")
    if total_experience < 1:
        red_flags.append("Extremely limited professional experience")

    if len(resume.skills) > 5:
        strengths = [{"point": "Has listed multiple technical skills", "relevance": "MEDIUM"}]
    else:
        strengths = [{"point": "At least submitted a resume", "relevance": "LOW"}]

    result = {
        "compatibilityScore": min(score, FALLBACK_SCORE_CAP),
        "verdict": verdict,
        "harshFeedback": feedback,
        "criticalGaps": [
            {
                "category": "EXPERIENCE",
                "gap": "Limited demonstrable experience",
                "severity": "DEALBREAKER" if total_experience < 1 else "MAJOR",
                "harshComment": "Experience claims don't match the complexity of work typically expected",
            }
        ],
        "strengths": strengths,
        "redFlags": red_flags,
        "improvements": [
            {
                "action": "Gain more hands-on experience through real projects",
                "timeframe": "6-12 months minimum",
                "difficulty": "HARD",
                "honestAssessment": (
                    "Will require significant time investment and likely starting at a lower "
                    "level than desired"
                ),
            }
        ],
        "competitionAnalysis": {
            "candidateLevel": _candidate_level(total_experience),
            "jobLevel": "UNKNOWN",
            "realityCheck": (
                "Competing against candidates with more substantial experience and proven track records"
            ),
        },
        "salaryReality": {
            "theirWorth": "Entry-level compensation" if total_experience < 2 else "Junior to mid-level compensation",
            "jobExpectation": "Depends on job requirements",
            "gap": "Likely expecting more than current market value justifies",
        },
    }
    result.update(compare_skills(resume, job_description))
    return result


def analyze_job_match(
    resume: ResumeData,
    job_description: str,
    llm: Optional[LLMManager] = None,
) -> Dict[str, Any]:
    llm = llm or get_llm()
    prompt = JOB_MATCH_PROMPT.format(
        resume_text=render_resume_for_job_match(resume),
        job_description=job_description,
    )
    try:
        result = llm.generate_json(prompt)
    except LLMError as e:
        logger.warning(f"AI job analysis failed, using fallback: {e}")
        return fallback_job_match(resume, job_description)

    for key, value in compare_skills(resume, job_description).items():
        result.setdefault(key, value)
    return result
