"""
app/services/discharge_service.py

Discharge delay analytics.

Rows are pulled from the record source, reduced to FlatRecord values (legacy
single-field reasons are split into cause/subcause on the way) and grouped
four ways:

    by cause         – patients delayed per cause, largest first
    by provider      – patients delayed per provider, largest first
    by cause detail  – "Cause — Subcause" composite, largest first
    by day           – number of submissions per day, oldest first

Entries without a ``patients_delayed`` value count as one patient.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.aggregation import (
    aggregate,
    by_category,
    by_category_detail,
    by_date,
    by_subject,
    chronological,
    rank,
)
from analytics.base import Aggregate, FlatRecord
from analytics.flattening import discharge_record, normalize_initials
from app.logging_utils import timed_event
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

RAW_COLUMNS: list[str] = [
    "event_date",
    "provider_initials",
    "cause",
    "subcause",
    "patients_delayed",
    "comment",
]
GROUP_COLUMNS: list[str] = ["label", "value"]
DAILY_COLUMNS: list[str] = ["date", "count"]


@dataclass
class DischargeReport:
    records: list[FlatRecord] = field(default_factory=list)
    by_cause: list[tuple[str, Aggregate]] = field(default_factory=list)
    by_provider: list[tuple[str, Aggregate]] = field(default_factory=list)
    by_cause_detail: list[tuple[str, Aggregate]] = field(default_factory=list)
    by_day: list[tuple[str, Aggregate]] = field(default_factory=list)

    def raw_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "event_date": record.date,
                "provider_initials": record.subject_key,
                "cause": record.category,
                "subcause": record.detail,
                "patients_delayed": record.metric,
                "comment": record.comment,
            }
            for record in self.records
        ]

    @staticmethod
    def group_rows(groups: list[tuple[str, Aggregate]]) -> list[dict[str, Any]]:
        return [{"label": key, "value": agg.sum} for key, agg in groups]

    def daily_rows(self) -> list[dict[str, Any]]:
        return [{"date": key, "count": agg.count} for key, agg in self.by_day]


def _one(_: FlatRecord) -> float:
    return 1.0


class DischargeAnalyticsService:
    """
    Builds discharge delay reports for a date window.

    The service is stateless apart from its record source; each call reads
    a fresh snapshot and returns a new report.
    """

    def __init__(self, source: RecordSourceRepository) -> None:
        self._source = source

    def load_records(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        provider_initials: str | None = None,
    ) -> list[FlatRecord]:
        if provider_initials:
            provider_initials = normalize_initials(provider_initials)
        rows = self._source.list_discharge_delays(
            date_from, date_to, provider_initials=provider_initials
        )
        return [
            discharge_record(
                event_date=row.event_date,
                provider_initials=row.provider_initials,
                cause=row.cause,
                subcause=row.subcause,
                reason=row.reason,
                patients_delayed=row.patients_delayed,
                comment=row.comment,
            )
            for row in rows
        ]

    def build_report(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        provider_initials: str | None = None,
    ) -> DischargeReport:
        with timed_event(
            logger,
            "discharge.report",
            date_from=date_from,
            date_to=date_to,
            provider=provider_initials,
        ) as extra:
            records = self.load_records(
                date_from, date_to, provider_initials=provider_initials
            )
            report = DischargeReport(
                records=records,
                by_cause=rank(aggregate(records, by_category)),
                by_provider=rank(aggregate(records, by_subject)),
                by_cause_detail=rank(aggregate(records, by_category_detail)),
                by_day=chronological(aggregate(records, by_date, _one)),
            )
            extra["rows"] = len(records)
        return report
