from .compensation import CompensationFit, compute_compensation_fit, normalize_range, parse_salary
from .coverage import Coverage, MatchScore, compute_match_score, coverage_score
from .keywords import KeywordStats, extract_keyword_stats
from .overall import compute_overall_score
from .sections import JDSections, split_jd_sections
from .tokenizer import normalize_tech, token_set, tokenize

__all__ = [
    "normalize_tech",
    "tokenize",
    "token_set",
    "JDSections",
    "split_jd_sections",
    "Coverage",
    "coverage_score",
    "MatchScore",
    "compute_match_score",
    "KeywordStats",
    "extract_keyword_stats",
    "CompensationFit",
    "compute_compensation_fit",
    "normalize_range",
    "parse_salary",
    "compute_overall_score",
]
