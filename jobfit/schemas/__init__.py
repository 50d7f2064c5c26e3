from .analysis import (
    AnalysisMeta,
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    SalaryRange,
    ScoreBreakdown,
    ScorePart,
)

__all__ = [
    "ScorePart",
    "ScoreBreakdown",
    "SalaryRange",
    "AnalyzeRequest",
    "AnalysisResult",
    "AnalysisMeta",
    "AnalyzeResponse",
]
