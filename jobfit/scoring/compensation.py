from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any

from jobfit.schemas.analysis import SalaryRange

from .utils import clamp_int, round_half_up

_NON_NUMERIC_RE = re.compile(r"[^0-9.]")

NOTE_MISSING = "Compensation info missing for one or both inputs."
NOTE_OVERLAP = "Salary expectations overlap with the JD range."
NOTE_NO_OVERLAP = "Salary expectations do not overlap with the JD range."
NOTE_ABOVE = "Candidate expectations sit above the role's stated range."
NOTE_BELOW = "Candidate expectations sit below the role's stated range."


@dataclass(frozen=True)
class CompensationFit:
    score: int | None
    notes: list[str] = field(default_factory=list)


def parse_salary(value: Any) -> float | None:
    """Read a salary bound from a number or free text such as "$95,000"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        raw = _NON_NUMERIC_RE.sub("", str(value))
        if not raw:
            return None
        try:
            number = float(raw)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def normalize_range(low: float | None, high: float | None) -> SalaryRange | None:
    if low is None and high is None:
        return None
    min_value = low if low is not None else high
    max_value = high if high is not None else low
    lower, upper = sorted((round_half_up(min_value), round_half_up(max_value)))
    return SalaryRange(min=lower, max=upper)


def compute_compensation_fit(candidate: SalaryRange | None, role: SalaryRange | None) -> CompensationFit:
    if candidate is None or role is None:
        return CompensationFit(score=None, notes=[NOTE_MISSING])

    span = max(1, role.max - role.min)
    overlap = max(0, min(candidate.max, role.max) - max(candidate.min, role.min))

    if overlap > 0:
        score = round_half_up(overlap / span * 100)
    else:
        if candidate.min > role.max:
            gap = candidate.min - role.max
        else:
            gap = role.min - candidate.max
        score = max(0, round_half_up(100 - gap / span * 100))

    notes = [NOTE_OVERLAP if overlap > 0 else NOTE_NO_OVERLAP]
    if candidate.min > role.max:
        notes.append(NOTE_ABOVE)
    if candidate.max < role.min:
        notes.append(NOTE_BELOW)

    return CompensationFit(score=clamp_int(score, 0, 100), notes=notes)
