from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet

from jobfit.core.scoring_config import get_lexicon
from jobfit.schemas.analysis import ScoreBreakdown, ScorePart

from .sections import split_jd_sections
from .tokenizer import token_set
from .utils import round_half_up


@dataclass(frozen=True)
class Coverage:
    matched: int
    total: int
    ratio: float

    def with_weight(self, weight: float) -> ScorePart:
        return ScorePart(matched=self.matched, total=self.total, ratio=self.ratio, weight=weight)


@dataclass(frozen=True)
class MatchScore:
    score: int
    breakdown: ScoreBreakdown


def coverage_score(section_text: str, resume_tokens: AbstractSet[str]) -> Coverage:
    tokens = token_set(section_text)
    if not tokens:
        return Coverage(matched=0, total=0, ratio=0.0)
    matched = sum(1 for token in tokens if token in resume_tokens)
    return Coverage(matched=matched, total=len(tokens), ratio=matched / len(tokens))


def active_weights(breakdown: ScoreBreakdown) -> dict[str, float]:
    """Weights of the sections with content, renormalized to sum to 1."""
    active = {name: part.weight for name, part in breakdown.parts() if part.total > 0}
    weight_sum = sum(active.values())
    if weight_sum <= 0:
        return {name: 0.0 for name in active}
    return {name: weight / weight_sum for name, weight in active.items()}


def compute_match_score(resume_text: str, jd_text: str) -> MatchScore:
    """Weighted JD coverage by the resume, 0-100.

    Requirements dominate. Sections a JD does not have are dropped from the
    weighting instead of counting as zero coverage.
    """
    resume_tokens = token_set(resume_text)
    sections = split_jd_sections(jd_text)
    weights = get_lexicon().section_weights

    breakdown = ScoreBreakdown(
        **{
            name: coverage_score(text, resume_tokens).with_weight(weights[name])
            for name, text in sections.items()
        }
    )

    normalized = active_weights(breakdown)
    if not normalized:
        fallback = coverage_score(jd_text, resume_tokens)
        empty = ScorePart(matched=0, total=0, ratio=0.0, weight=0.0)
        return MatchScore(
            score=round_half_up(fallback.ratio * 100),
            breakdown=ScoreBreakdown(
                requirements=fallback.with_weight(1.0),
                responsibilities=empty,
                preferred=empty,
                other=empty,
            ),
        )

    parts = dict(breakdown.parts())
    weighted = sum(parts[name].ratio * weight for name, weight in normalized.items())
    return MatchScore(score=round_half_up(weighted * 100), breakdown=breakdown)
