from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScorePart(BaseModel):
    matched: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    weight: float = Field(default=0.0, ge=0.0)


class ScoreBreakdown(BaseModel):
    requirements: ScorePart = Field(default_factory=ScorePart)
    responsibilities: ScorePart = Field(default_factory=ScorePart)
    preferred: ScorePart = Field(default_factory=ScorePart)
    other: ScorePart = Field(default_factory=ScorePart)

    def parts(self) -> list[tuple[str, ScorePart]]:
        return [
            ("requirements", self.requirements),
            ("responsibilities", self.responsibilities),
            ("preferred", self.preferred),
            ("other", self.other),
        ]


class SalaryRange(BaseModel):
    min: int
    max: int

    @model_validator(mode="after")
    def _check_order(self) -> "SalaryRange":
        if self.min > self.max:
            raise ValueError("salary range min must not exceed max")
        return self


SalaryInput = float | str | None


class AnalyzeRequest(CamelModel):
    cv_text: str = Field(default="", max_length=200000)
    jd_text: str = Field(default="", max_length=200000)
    cv_salary_min: SalaryInput = None
    cv_salary_max: SalaryInput = None
    jd_salary_min: SalaryInput = None
    jd_salary_max: SalaryInput = None


class AnalysisResult(CamelModel):
    match_score: int = Field(default=0, ge=0, le=100)
    score_breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    compensation_fit: int | None = Field(default=None, ge=0, le=100)
    compensation_notes: list[str] = Field(default_factory=list)
    overall_score: int | None = None
    summary: str = ""
    gap_analysis: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    keyword_matches: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    bullet_rewrites: list[str] = Field(default_factory=list)
    ats_notes: list[str] = Field(default_factory=list)
    raw: str | None = None


class AnalysisMeta(CamelModel):
    cv_chars: int = Field(ge=0)
    jd_chars: int = Field(ge=0)
    score_breakdown: ScoreBreakdown


class AnalyzeResponse(CamelModel):
    analysis: AnalysisResult
    meta: AnalysisMeta
