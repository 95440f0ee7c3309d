"""
app/schemas package marker.
"""

from app.schemas.health import HealthResponse
from app.schemas.analytics import (
    AggregateResponse,
    CompletionDayResponse,
    DailyAverageResponse,
    DateWindowResponse,
    DelaySurveyAnalyticsResponse,
    DischargeAnalyticsResponse,
    PeerSurveyAnalyticsResponse,
    QuestionSummaryResponse,
    RankingAnalyticsResponse,
    RankingSummaryResponse,
    SelectionResponse,
)

__all__ = [
    "AggregateResponse",
    "CompletionDayResponse",
    "DailyAverageResponse",
    "DateWindowResponse",
    "DelaySurveyAnalyticsResponse",
    "DischargeAnalyticsResponse",
    "HealthResponse",
    "PeerSurveyAnalyticsResponse",
    "QuestionSummaryResponse",
    "RankingAnalyticsResponse",
    "RankingSummaryResponse",
    "SelectionResponse",
]
