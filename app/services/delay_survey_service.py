"""
app/services/delay_survey_service.py

Delay survey analytics and completion calendar.

Each stored response holds a list of delayed patients; analytics work on one
row per patient. Reason counts go through the reason normalizer, so legacy
free-text reasons and new category/detail pairs land in the same buckets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.aggregation import aggregate, by_category, by_category_detail, rank
from analytics.base import Aggregate
from analytics.campaigns import (
    CompletionStatus,
    campaign_days_within,
    completion_status,
    month_days,
)
from analytics.flattening import (
    DelaySurveyRow,
    flatten_delay_response,
    normalize_initials,
    parse_answers,
)
from app.logging_utils import timed_event
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: list[str] = [
    "survey_date",
    "initials",
    "patient_label",
    "category",
    "detail",
    "comment",
    "total_delayed",
]


@dataclass
class DelaySurveyReport:
    rows: list[DelaySurveyRow] = field(default_factory=list)
    total_patients: int = 0
    responses_count: int = 0
    avg_per_response: float = 0.0
    top_reasons: list[tuple[str, Aggregate]] = field(default_factory=list)
    by_category: list[tuple[str, Aggregate]] = field(default_factory=list)

    def export_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "survey_date": row.survey_date,
                "initials": row.initials,
                "patient_label": row.patient_label,
                "category": row.category,
                "detail": row.detail,
                "comment": row.comment,
                "total_delayed": row.total_delayed,
            }
            for row in self.rows
        ]


class DelaySurveyService:
    """
    Flattens delay-survey responses and summarises them.

    ``top_reasons_limit`` caps the ranked composite reason list.
    """

    def __init__(self, source: RecordSourceRepository, *, top_reasons_limit: int = 10) -> None:
        self._source = source
        self._top_reasons_limit = top_reasons_limit

    def build_report(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        respondent_initials: str | None = None,
    ) -> DelaySurveyReport:
        """
        Summarise responses in the window.

        ``avg_per_response`` is patients per response rounded to two places,
        and ``0.0`` when there are no responses. Rows are sorted by survey
        date, then initials; patients keep their submitted order.
        """
        if respondent_initials:
            respondent_initials = normalize_initials(respondent_initials)
        with timed_event(
            logger,
            "delay_survey.report",
            date_from=date_from,
            date_to=date_to,
            respondent=respondent_initials,
        ) as extra:
            responses = self._source.list_delay_survey_responses(
                date_from, date_to, respondent_initials=respondent_initials
            )

            rows: list[DelaySurveyRow] = []
            total_patients = 0
            for response in responses:
                initials = normalize_initials(response.respondent_initials)
                total_patients += len(parse_answers(response.answers).patients)
                rows.extend(
                    flatten_delay_response(response.survey_date, initials, response.answers)
                )
            rows.sort(key=lambda row: (row.survey_date, row.initials))

            patient_records = [row.to_record() for row in rows if row.category is not None]
            responses_count = len(responses)
            report = DelaySurveyReport(
                rows=rows,
                total_patients=total_patients,
                responses_count=responses_count,
                avg_per_response=(
                    round(total_patients / responses_count, 2) if responses_count else 0.0
                ),
                top_reasons=rank(
                    aggregate(patient_records, by_category_detail),
                    limit=self._top_reasons_limit,
                ),
                by_category=rank(aggregate(patient_records, by_category)),
            )
            extra["responses"] = responses_count
            extra["rows"] = len(rows)
        return report

    def completion_calendar(
        self,
        initials: str,
        year: int,
        month: int,
    ) -> dict[date, CompletionStatus]:
        """
        Classify every day of the month for one provider.

        A day is required when it is assigned directly or falls inside a
        campaign that targets the provider.
        """
        initials = normalize_initials(initials)
        days = month_days(year, month)
        first, last = days[0], days[-1]
        responded = self._source.list_response_dates(initials, first, last)
        required = self._source.list_assignment_dates(initials, first, last)
        required |= campaign_days_within(
            self._source.list_campaign_windows(initials), first, last
        )
        return completion_status(days, responded, required)
