"""
Resume analysis: score a resume and list issues, strengths and suggestions.

The model does the real reading; ``fallback_analysis`` is the local
heuristic used whenever the model is unavailable or its reply is unusable.
"""
import logging
import re
from typing import Any, Dict, Optional

from enhanced_prompts import ANALYSIS_PROMPT
from llm_manager import LLMError, LLMManager, get_llm
from resume_model import ResumeData
from resume_utils import render_resume_for_analysis

logger = logging.getLogger("ResumeAnalyzer")

METRICS_RE = re.compile(
    r"\d+%|\d+\+|\$\d+|increased|decreased|improved|reduced|\d+x|saved|generated"
    r"|managed \$|budget of|\d+ years|\d+ people|\d+ team",
    re.IGNORECASE,
)


def has_quantified_achievements(resume: ResumeData) -> bool:
    return any(METRICS_RE.search(exp.description or "") for exp in resume.workExperience)


def fallback_analysis(resume: ResumeData) -> Dict[str, Any]:
    """Basic analysis when AI fails"""
    issues: list[dict] = []
    strengths: list[str] = []
    score = 80

    summary = resume.personalInfo.summary or ""
    if len(summary) < 50:
        issues.append({
            "id": "weak-summary",
            "type": "warning",
            "title": "Missing or Weak Professional Summary",
            "description": (
                "Your resume lacks a compelling professional summary. Add a 2-3 sentence "
                "summary that highlights your key value proposition."
            ),
            "severity": "critical",
            "suggestion": (
                "Write a professional summary that includes your years of experience, "
                "key skills, and what value you bring to employers."
            ),
        })
        score -= 20
    else:
        strengths.append("Strong professional summary provided")

    has_metrics = has_quantified_achievements(resume)
    if not has_metrics and resume.workExperience:
        issues.append({
            "id": "no-metrics",
            "type": "warning",
            "title": "Missing Quantified Achievements",
            "description": (
                "Your work experience descriptions lack specific numbers and metrics "
                "that demonstrate your impact."
            ),
            "severity": "high",
            "suggestion": (
                "Add specific numbers, percentages, dollar amounts, or other metrics "
                "to show the results of your work."
            ),
        })
        score -= 15
    elif has_metrics:
        strengths.append("Includes quantified achievements")

    return {
        "score": max(score, 0),
        "issues": issues,
        "strengths": strengths,
        "suggestions": [],
        "atsCompatibility": 75,
        "readabilityScore": 80,
        "completenessScore": 85 if resume.workExperience else 60,
    }


def analyze_resume(resume: ResumeData, llm: Optional[LLMManager] = None) -> Dict[str, Any]:
    """Ask the model for a structured analysis, falling back to the local heuristic."""
    llm = llm or get_llm()
    prompt = ANALYSIS_PROMPT.format(resume_text=render_resume_for_analysis(resume))
    try:
        return llm.generate_json(prompt)
    except LLMError as e:
        logger.warning(f"AI analysis failed, using fallback: {e}")
        return fallback_analysis(resume)
