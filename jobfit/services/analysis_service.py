from __future__ import annotations

import logging
import math
import re
from numbers import Real
from typing import Any

from jobfit.core.config import settings
from jobfit.core.scoring_config import get_lexicon
from jobfit.schemas.analysis import (
    AnalysisMeta,
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    SalaryRange,
)
from jobfit.scoring import (
    compute_compensation_fit,
    compute_match_score,
    compute_overall_score,
    extract_keyword_stats,
    normalize_range,
    parse_salary,
)
from jobfit.scoring.utils import clamp_int, round_half_up
from jobfit.services.analysis_llm import analysis_llm_enabled, request_narrative

logger = logging.getLogger(__name__)

HEURISTIC_SUMMARY = (
    "Heuristic analysis (no LLM key found). Configure GROQ_API_KEY for deeper insights."
)
HEURISTIC_IMPROVEMENTS = [
    "Add missing role-specific keywords from the job description.",
    "Quantify impact in bullet points (metrics, outcomes, scale).",
    "Align your summary with the role's core responsibilities.",
]
HEURISTIC_ATS_NOTES = [
    "Use standard section headings (Experience, Skills, Education).",
    "Avoid tables or complex formatting in the resume file.",
]
MISSING_INPUT_MESSAGE = "Please provide both a resume and a Job Description."

_LIST_FIELDS = {
    "gapAnalysis": "gap_analysis",
    "improvements": "improvements",
    "keywordMatches": "keyword_matches",
    "missingKeywords": "missing_keywords",
    "bulletRewrites": "bullet_rewrites",
    "atsNotes": "ats_notes",
    "compensationNotes": "compensation_notes",
}

_INLINE_WS_RE = re.compile(r"[^\S\n]+")


class AnalysisInputError(ValueError):
    pass


def clamp_text(text: str, max_chars: int | None = None) -> str:
    """Collapse whitespace and cap length; line breaks survive for the segmenter."""
    limit = settings.max_input_chars if max_chars is None else max_chars
    lines = [_INLINE_WS_RE.sub(" ", line).strip() for line in text.splitlines()]
    trimmed = "\n".join(line for line in lines if line)
    if len(trimmed) <= limit:
        return trimmed
    return trimmed[:limit] + "..."


def format_salary_context(candidate: SalaryRange | None, role: SalaryRange | None) -> str:
    def _describe(salary_range: SalaryRange | None) -> str:
        if salary_range is None:
            return "not provided"
        return f"${salary_range.min} - ${salary_range.max}"

    return "\n".join(
        [
            f"Candidate expected range: {_describe(candidate)}",
            f"Role range: {_describe(role)}",
        ]
    )


def heuristic_analysis(resume_text: str, jd_text: str) -> AnalysisResult:
    match = compute_match_score(resume_text, jd_text)
    keywords = extract_keyword_stats(jd_text, resume_text)
    gap_limit = get_lexicon().gap_analysis_limit

    return AnalysisResult(
        match_score=match.score,
        score_breakdown=match.breakdown,
        summary=HEURISTIC_SUMMARY,
        gap_analysis=[f"Missing keyword: {word}" for word in keywords.missing_keywords[:gap_limit]],
        improvements=list(HEURISTIC_IMPROVEMENTS),
        keyword_matches=keywords.keyword_matches,
        missing_keywords=keywords.missing_keywords,
        bullet_rewrites=[],
        ats_notes=list(HEURISTIC_ATS_NOTES),
    )


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        if item is None:
            continue
        if isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def _score_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value):
        return None
    return clamp_int(round_half_up(float(value)), 0, 100)


def coerce_narrative(payload: dict[str, Any]) -> AnalysisResult:
    """Map the LLM's JSON onto AnalysisResult, dropping anything malformed.

    The LLM's matchScore is ignored; scores are filled in by analyze().
    """
    fields: dict[str, Any] = {
        python_name: _string_list(payload.get(wire_name))
        for wire_name, python_name in _LIST_FIELDS.items()
    }
    summary = payload.get("summary")
    fields["summary"] = summary.strip() if isinstance(summary, str) else ""
    fields["compensation_fit"] = _score_or_none(payload.get("compensationFit"))
    raw = payload.get("raw")
    if isinstance(raw, str):
        fields["raw"] = raw
    return AnalysisResult(**fields)


def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    resume_text = clamp_text(request.cv_text or "")
    jd_text = clamp_text(request.jd_text or "")
    if not resume_text or not jd_text:
        raise AnalysisInputError(MISSING_INPUT_MESSAGE)

    candidate_range = normalize_range(
        parse_salary(request.cv_salary_min), parse_salary(request.cv_salary_max)
    )
    role_range = normalize_range(
        parse_salary(request.jd_salary_min), parse_salary(request.jd_salary_max)
    )
    compensation = compute_compensation_fit(candidate_range, role_range)

    used_llm = analysis_llm_enabled()
    if used_llm:
        payload = request_narrative(
            resume_text,
            jd_text,
            format_salary_context(candidate_range, role_range),
        )
        analysis = coerce_narrative(payload)
    else:
        analysis = heuristic_analysis(resume_text, jd_text)

    match = compute_match_score(resume_text, jd_text)
    keyword_stats = extract_keyword_stats(jd_text, resume_text)

    analysis.match_score = match.score
    analysis.score_breakdown = match.breakdown
    if not analysis.keyword_matches:
        analysis.keyword_matches = keyword_stats.keyword_matches
    if not analysis.missing_keywords:
        analysis.missing_keywords = keyword_stats.missing_keywords
    if analysis.compensation_fit is None:
        analysis.compensation_fit = compensation.score
    if not analysis.compensation_notes:
        analysis.compensation_notes = list(compensation.notes)
    analysis.overall_score = compute_overall_score(analysis.match_score, analysis.compensation_fit)

    logger.info(
        "analysis_completed match=%s compensation=%s overall=%s llm=%s",
        analysis.match_score,
        analysis.compensation_fit,
        analysis.overall_score,
        used_llm,
    )

    return AnalyzeResponse(
        analysis=analysis,
        meta=AnalysisMeta(
            cv_chars=len(resume_text),
            jd_chars=len(jd_text),
            score_breakdown=match.breakdown,
        ),
    )
