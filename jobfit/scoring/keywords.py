from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from jobfit.core.scoring_config import get_lexicon

from .tokenizer import token_set, tokenize


@dataclass(frozen=True)
class KeywordStats:
    keyword_matches: list[str] = field(default_factory=list)
    missing_keywords: list[str] = field(default_factory=list)


def extract_keyword_stats(jd_text: str, resume_text: str, limit: int | None = None) -> KeywordStats:
    """Rank JD keywords by frequency (then length) and split them by resume presence."""
    cap = get_lexicon().keyword_limit if limit is None else limit
    resume_tokens = token_set(resume_text)
    freq = Counter(tokenize(jd_text))

    # sorted() is stable, so equal keys keep first-seen order.
    ranked = sorted(freq, key=lambda token: (-freq[token], -len(token)))

    matches = [token for token in ranked if token in resume_tokens]
    missing = [token for token in ranked if token not in resume_tokens]
    return KeywordStats(keyword_matches=matches[:cap], missing_keywords=missing[:cap])
