from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "scoring.yaml"

SECTION_NAMES = ("requirements", "responsibilities", "preferred", "other")


@dataclass(frozen=True)
class Lexicon:
    stopwords: frozenset[str]
    tech_synonyms: tuple[tuple[re.Pattern[str], str], ...]
    section_headings: tuple[tuple[str, re.Pattern[str]], ...]
    section_weights: Mapping[str, float]
    min_token_length: int
    keyword_limit: int
    gap_analysis_limit: int


@lru_cache(maxsize=1)
def get_scoring_config() -> dict[str, Any]:
    """Load scoring config from jobfit/config/scoring.yaml and cache it."""
    if not _SCORING_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Scoring config not found at '{_SCORING_CONFIG_PATH}'. "
            "Expected file: jobfit/config/scoring.yaml"
        )

    try:
        raw = _SCORING_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read scoring config '{_SCORING_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in scoring config '{_SCORING_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid scoring config '{_SCORING_CONFIG_PATH}': expected a top-level mapping."
        )
    return parsed


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'matching.weights.requirements'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def _compile_synonyms(entries: Any) -> tuple[tuple[re.Pattern[str], str], ...]:
    if not isinstance(entries, list):
        raise RuntimeError("Invalid scoring config: 'tech_synonyms' must be a list.")
    compiled: list[tuple[re.Pattern[str], str]] = []
    for entry in entries:
        if not isinstance(entry, dict) or "pattern" not in entry or "replacement" not in entry:
            raise RuntimeError(f"Invalid tech synonym entry: {entry!r}")
        compiled.append((re.compile(str(entry["pattern"]), re.IGNORECASE), str(entry["replacement"])))
    return tuple(compiled)


def _compile_headings(entries: Any) -> tuple[tuple[str, re.Pattern[str]], ...]:
    if not isinstance(entries, dict):
        raise RuntimeError("Invalid scoring config: 'section_headings' must be a mapping.")
    compiled: list[tuple[str, re.Pattern[str]]] = []
    # yaml.safe_load keeps mapping order, which is the precedence order.
    for section, pattern in entries.items():
        if section not in SECTION_NAMES or section == "other":
            raise RuntimeError(f"Unknown heading section '{section}' in scoring config.")
        compiled.append((section, re.compile(str(pattern), re.IGNORECASE)))
    return tuple(compiled)


def _section_weights(entries: Any) -> Mapping[str, float]:
    if not isinstance(entries, dict):
        raise RuntimeError("Invalid scoring config: 'matching.weights' must be a mapping.")
    weights: dict[str, float] = {}
    for section in SECTION_NAMES:
        try:
            weights[section] = float(entries[section])
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError(f"Invalid or missing weight for section '{section}'.") from exc
    return MappingProxyType(weights)


@lru_cache(maxsize=1)
def get_lexicon() -> Lexicon:
    config = get_scoring_config()
    stopwords = config.get("stopwords") or []
    if not isinstance(stopwords, list):
        raise RuntimeError("Invalid scoring config: 'stopwords' must be a list.")

    return Lexicon(
        stopwords=frozenset(str(word).strip().lower() for word in stopwords),
        tech_synonyms=_compile_synonyms(config.get("tech_synonyms") or []),
        section_headings=_compile_headings(config.get("section_headings") or {}),
        section_weights=_section_weights(get_scoring_value("matching.weights")),
        min_token_length=int(get_scoring_value("matching.min_token_length", 3)),
        keyword_limit=int(get_scoring_value("matching.keyword_limit", 30)),
        gap_analysis_limit=int(get_scoring_value("matching.gap_analysis_limit", 10)),
    )
