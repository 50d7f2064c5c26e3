from __future__ import annotations

import re

from jobfit.core.scoring_config import get_lexicon

_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def normalize_tech(text: str) -> str:
    """Fold technology names whose punctuation would otherwise be split away."""
    for pattern, replacement in get_lexicon().tech_synonyms:
        text = pattern.sub(replacement, text)
    return text


def tokenize(text: str) -> list[str]:
    """Significant words of ``text`` in order, duplicates kept."""
    if not text:
        return []
    lexicon = get_lexicon()
    words = _SPLIT_RE.split(normalize_tech(text).lower())
    return [
        word
        for word in words
        if len(word) >= lexicon.min_token_length and word not in lexicon.stopwords
    ]


def token_set(text: str) -> frozenset[str]:
    return frozenset(tokenize(text))
