from __future__ import annotations

import json
import logging
import os
import time
from functools import lru_cache
from typing import Any

from openai import OpenAI, OpenAIError

from jobfit.core.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a senior recruiter and ATS specialist. Return ONLY valid JSON with this schema: "
    "{ summary: string, gapAnalysis: string[], improvements: string[], "
    "keywordMatches: string[], missingKeywords: string[], bulletRewrites: string[], atsNotes: string[], "
    "compensationFit: number | null, compensationNotes: string[] }."
    "Do NOT compute a match score; it is computed separately. "
    "Write improvements as action-oriented imperatives (start with a verb). "
    "Gap analysis should be short phrases. Bullet rewrites must be concise, impact-focused."
)

UNPARSEABLE_SUMMARY = "Unable to parse LLM response. See raw output."


class AnalysisLLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def _api_key() -> str:
    return (settings.groq_api_key or "").strip()


def analysis_llm_enabled() -> bool:
    if not _env_bool("ANALYSIS_LLM_ENABLED", settings.llm_enabled):
        return False
    api_key = _api_key()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=_api_key(),
        base_url=settings.groq_base_url,
        timeout=settings.llm_timeout_s,
        max_retries=settings.llm_max_retries,
    )


def safe_json_parse(text: str) -> dict[str, Any] | None:
    """Parse a JSON object, tolerating prose or code fences around it."""
    try:
        parsed = json.loads(text)
    except ValueError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(text[start : end + 1])
        except ValueError:
            return None
    return parsed if isinstance(parsed, dict) else None


def build_user_prompt(resume_text: str, jd_text: str, salary_context: str) -> str:
    return (
        f'RESUME:\n"""\n{resume_text}\n"""\n\n'
        f'JOB DESCRIPTION:\n"""\n{jd_text}\n"""\n\n'
        f"SALARY CONTEXT:\n{salary_context}"
    )


def request_narrative(resume_text: str, jd_text: str, salary_context: str) -> dict[str, Any]:
    """Ask the LLM for the narrative fields of an analysis.

    Returns the parsed JSON object, or a placeholder carrying the raw text when
    the model answered with something that is not JSON. Raises
    AnalysisLLMError when the call itself fails.
    """
    started = time.perf_counter()
    try:
        response = _client().chat.completions.create(
            model=settings.groq_model,
            temperature=0.2,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(resume_text, jd_text, salary_context)},
            ],
        )
    except OpenAIError as exc:
        logger.warning(
            "analysis_llm_failed model=%s prompt_len=%s: %s",
            settings.groq_model,
            len(resume_text) + len(jd_text),
            exc,
        )
        raise AnalysisLLMError(f"LLM error: {exc}") from exc

    content = response.choices[0].message.content if response.choices else ""
    text = content or ""
    latency_ms = int((time.perf_counter() - started) * 1000)
    parsed = safe_json_parse(text)
    if parsed is None:
        logger.info("analysis_llm_unparseable model=%s latency_ms=%s", settings.groq_model, latency_ms)
        return {
            "matchScore": 0,
            "summary": UNPARSEABLE_SUMMARY,
            "gapAnalysis": [],
            "improvements": [],
            "keywordMatches": [],
            "missingKeywords": [],
            "bulletRewrites": [],
            "atsNotes": [],
            "raw": text,
        }

    logger.info("analysis_llm_success model=%s latency_ms=%s", settings.groq_model, latency_ms)
    return parsed
