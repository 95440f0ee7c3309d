"""
app/api/routers/analytics_router.py

Aggregated analytics for the admin views.

GET /analytics/discharge
GET /analytics/delay-survey
GET /analytics/delay-survey/{initials}/calendar
GET /analytics/rankings
GET /analytics/rankings/{initials}/daily
GET /analytics/survey

All endpoints accept ``date_from`` / ``date_to`` (inclusive, ISO dates). The
window defaults to the configured lookback ending today.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from app.api.dependencies import DateWindow, get_date_window, get_record_source
from app.config import AnalyticsSettings, get_analytics_settings
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
from app.services.delay_survey_service import DelaySurveyService
from app.services.discharge_service import DischargeAnalyticsService
from app.services.peer_survey_service import PeerSurveyService
from app.services.ranking_service import RankingAnalyticsService
from db.repositories.errors import RecordSourceError, SurveyVersionNotFoundError
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _window(window: DateWindow) -> DateWindowResponse:
    return DateWindowResponse(date_from=window.date_from, date_to=window.date_to)


def _unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to load analytics data; see server logs for details.",
    )


@router.get("/discharge", response_model=DischargeAnalyticsResponse)
def discharge_analytics(
    provider: str | None = Query(default=None, description="Filter by provider initials."),
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
) -> DischargeAnalyticsResponse:
    """Discharge delays by cause, provider, cause detail and day."""
    try:
        report = DischargeAnalyticsService(source).build_report(
            window.date_from, window.date_to, provider_initials=provider
        )
    except RecordSourceError as exc:
        raise _unavailable() from exc

    return DischargeAnalyticsResponse(
        window=_window(window),
        provider_initials=provider,
        rows=len(report.records),
        by_cause=[AggregateResponse.from_pair(p) for p in report.by_cause],
        by_provider=[AggregateResponse.from_pair(p) for p in report.by_provider],
        by_cause_detail=[AggregateResponse.from_pair(p) for p in report.by_cause_detail],
        by_day=[AggregateResponse.from_pair(p) for p in report.by_day],
    )


@router.get("/delay-survey", response_model=DelaySurveyAnalyticsResponse)
def delay_survey_analytics(
    respondent: str | None = Query(default=None, description="Filter by respondent initials."),
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
    settings: AnalyticsSettings = Depends(get_analytics_settings),
) -> DelaySurveyAnalyticsResponse:
    """Patient totals and the most frequent delay reasons."""
    service = DelaySurveyService(source, top_reasons_limit=settings.top_reasons_limit)
    try:
        report = service.build_report(
            window.date_from, window.date_to, respondent_initials=respondent
        )
    except RecordSourceError as exc:
        raise _unavailable() from exc

    return DelaySurveyAnalyticsResponse(
        window=_window(window),
        respondent_initials=respondent,
        total_patients=report.total_patients,
        responses_count=report.responses_count,
        avg_per_response=report.avg_per_response,
        top_reasons=[AggregateResponse.from_pair(p) for p in report.top_reasons],
        by_category=[AggregateResponse.from_pair(p) for p in report.by_category],
    )


@router.get(
    "/delay-survey/{initials}/calendar",
    response_model=list[CompletionDayResponse],
)
def delay_survey_calendar(
    initials: str = Path(..., min_length=1, max_length=16),
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    source: RecordSourceRepository = Depends(get_record_source),
) -> list[CompletionDayResponse]:
    """Submitted / required-missing / optional status for each day of a month."""
    try:
        statuses = DelaySurveyService(source).completion_calendar(initials, year, month)
    except RecordSourceError as exc:
        raise _unavailable() from exc
    return [CompletionDayResponse(day=day, status=value.value) for day, value in statuses.items()]


@router.get("/rankings", response_model=RankingAnalyticsResponse)
def ranking_analytics(
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
) -> RankingAnalyticsResponse:
    """Per-reviewee tier averages, best overall first."""
    try:
        report = RankingAnalyticsService(source).build_report(window.date_from, window.date_to)
    except RecordSourceError as exc:
        raise _unavailable() from exc

    return RankingAnalyticsResponse(
        window=_window(window),
        reviewees=[
            RankingSummaryResponse(
                reviewee=s.reviewee,
                overall=s.overall,
                note_avg=s.note_avg,
                work_avg=s.work_avg,
                social_avg=s.social_avg,
                n_ratings=s.n_ratings,
            )
            for s in report.summaries
        ],
        unscored_tiers=report.unscored_tiers,
    )


@router.get("/rankings/{initials}/daily", response_model=list[DailyAverageResponse])
def ranking_daily_averages(
    initials: str = Path(..., min_length=1, max_length=16),
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
) -> list[DailyAverageResponse]:
    """Daily averages for one reviewee, newest first. Raters stay hidden."""
    try:
        rows = RankingAnalyticsService(source).daily(initials, window.date_from, window.date_to)
    except RecordSourceError as exc:
        raise _unavailable() from exc

    return [
        DailyAverageResponse(
            review_date=row.review_date,
            note_avg=row.note_avg,
            work_avg=row.work_avg,
            social_avg=row.social_avg,
            n_raters=row.n_raters,
        )
        for row in rows
    ]


@router.get("/survey", response_model=PeerSurveyAnalyticsResponse)
def peer_survey_analytics(
    version_id: uuid.UUID | None = Query(
        default=None,
        description="Survey version; the live version when omitted.",
    ),
    window: DateWindow = Depends(get_date_window),
    source: RecordSourceRepository = Depends(get_record_source),
) -> PeerSurveyAnalyticsResponse:
    """Selection counts and completions per question for one survey version."""
    try:
        report = PeerSurveyService(source).build_report(
            window.date_from, window.date_to, version_id=version_id
        )
    except SurveyVersionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RecordSourceError as exc:
        raise _unavailable() from exc

    return PeerSurveyAnalyticsResponse(
        window=_window(window),
        version_id=report.version_id,
        version_name=report.version_name,
        responses=len(report.rows),
        questions=[
            QuestionSummaryResponse(
                question_id=q.question_id,
                prompt=q.prompt,
                completions=q.completions,
                total_selections=q.total_selections,
                selections=[
                    SelectionResponse(
                        initials=s.initials,
                        display_name=s.display_name,
                        count=s.count,
                        share=s.share,
                    )
                    for s in q.selections
                ],
            )
            for q in report.questions
        ],
    )
