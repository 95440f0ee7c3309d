"""
app/schemas/analytics.py

Response schemas for analytics endpoints.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from analytics.base import Aggregate


class AggregateResponse(BaseModel):
    """
    One group of an aggregation, in display order.
    """

    key: str
    count: int = Field(..., ge=0)
    sum: float
    average: float

    @classmethod
    def from_pair(cls, pair: tuple[str, Aggregate]) -> "AggregateResponse":
        key, agg = pair
        return cls(key=key, count=agg.count, sum=agg.sum, average=agg.average)


class DateWindowResponse(BaseModel):
    date_from: date | None = None
    date_to: date | None = None


class DischargeAnalyticsResponse(BaseModel):
    window: DateWindowResponse
    provider_initials: str | None = None
    rows: int = Field(..., ge=0)
    by_cause: list[AggregateResponse] = Field(default_factory=list)
    by_provider: list[AggregateResponse] = Field(default_factory=list)
    by_cause_detail: list[AggregateResponse] = Field(default_factory=list)
    by_day: list[AggregateResponse] = Field(default_factory=list)


class DelaySurveyAnalyticsResponse(BaseModel):
    window: DateWindowResponse
    respondent_initials: str | None = None
    total_patients: int = Field(..., ge=0)
    responses_count: int = Field(..., ge=0)
    avg_per_response: float
    top_reasons: list[AggregateResponse] = Field(default_factory=list)
    by_category: list[AggregateResponse] = Field(default_factory=list)


class RankingSummaryResponse(BaseModel):
    reviewee: str
    overall: float
    note_avg: float
    work_avg: float
    social_avg: float
    n_ratings: int = Field(..., ge=0)


class RankingAnalyticsResponse(BaseModel):
    window: DateWindowResponse
    reviewees: list[RankingSummaryResponse] = Field(default_factory=list)
    unscored_tiers: int = Field(0, ge=0, description="Submitted tiers outside the score table.")


class DailyAverageResponse(BaseModel):
    """
    Per-day averages; a dimension is null when no valid tier was given that day.
    """

    review_date: date
    note_avg: float | None = None
    work_avg: float | None = None
    social_avg: float | None = None
    n_raters: int = Field(..., ge=0)


class SelectionResponse(BaseModel):
    initials: str
    display_name: str
    count: int = Field(..., ge=0)
    share: float | None = Field(
        None, description="Percent of the question's completions, one decimal place."
    )


class QuestionSummaryResponse(BaseModel):
    question_id: str
    prompt: str
    completions: int = Field(..., ge=0)
    total_selections: int = Field(0, ge=0)
    selections: list[SelectionResponse] = Field(default_factory=list)


class PeerSurveyAnalyticsResponse(BaseModel):
    window: DateWindowResponse
    version_id: str
    version_name: str
    responses: int = Field(..., ge=0)
    questions: list[QuestionSummaryResponse] = Field(default_factory=list)


class CompletionDayResponse(BaseModel):
    day: date
    status: str
