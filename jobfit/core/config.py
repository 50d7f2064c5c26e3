from __future__ import annotations

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SKILL_WEIGHT = 0.8


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def normalize_weight(value: float, fallback: float) -> float:
    if not math.isfinite(value) or value <= 0 or value >= 1:
        return fallback
    return value


def get_skill_weight() -> float:
    """Skill share of the overall score, read from SKILL_WEIGHT on every call."""
    raw = _get_env("SKILL_WEIGHT", None)
    if raw is None:
        return DEFAULT_SKILL_WEIGHT
    try:
        value = float(raw.strip())
    except ValueError:
        return DEFAULT_SKILL_WEIGHT
    return normalize_weight(value, DEFAULT_SKILL_WEIGHT)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    max_input_chars: int
    llm_enabled: bool
    groq_api_key: str | None
    groq_model: str
    groq_base_url: str
    llm_timeout_s: float
    llm_max_retries: int


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    max_input_chars=_get_env_int("MAX_INPUT_CHARS", 12000),
    llm_enabled=_get_env_bool("ANALYSIS_LLM_ENABLED", True),
    groq_api_key=_get_env("GROQ_API_KEY"),
    groq_model=_get_env("GROQ_MODEL", "llama-3.1-8b-instant") or "llama-3.1-8b-instant",
    groq_base_url=_get_env("GROQ_BASE_URL", "https://api.groq.com/openai/v1") or "https://api.groq.com/openai/v1",
    llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 30.0),
    llm_max_retries=_get_env_int("LLM_MAX_RETRIES", 2),
)

if settings.max_input_chars < 1:
    raise RuntimeError("MAX_INPUT_CHARS must be a positive integer.")
