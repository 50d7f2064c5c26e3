from __future__ import annotations

from numbers import Real
from typing import Any

from jobfit.core.config import DEFAULT_SKILL_WEIGHT, get_skill_weight, normalize_weight

from .utils import round_half_up


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def compute_overall_score(
    match_score: Any,
    compensation_fit: Any,
    skill_weight: float | None = None,
) -> int | None:
    """Blend skill match and compensation fit.

    Without a compensation fit the match score is returned as-is so that an
    unassessed salary does not drag the result down.
    """
    if not _is_number(match_score):
        return None
    if compensation_fit is None:
        return match_score
    if skill_weight is None:
        weight = get_skill_weight()
    else:
        weight = normalize_weight(float(skill_weight), DEFAULT_SKILL_WEIGHT)
    return round_half_up(match_score * weight + compensation_fit * (1 - weight))
