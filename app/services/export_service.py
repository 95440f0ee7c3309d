"""
app/services/export_service.py

CSV export datasets for the admin analytics views.

Supported datasets:

    discharge_raw        – one line per discharge delay entry
    discharge_causes     – patients delayed per cause
    discharge_providers  – patients delayed per provider
    discharge_daily      – submissions per day
    delay_survey         – one line per delayed patient
    rankings             – anonymized raw peer reviews
    survey               – peer-selection survey responses for one version

Filenames follow ``<subject>_<from>_<to>[_<entity>].csv``; the serializer
itself never builds them.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.csv_export import export_filename, to_csv
from analytics.flattening import normalize_initials
from app.services.delay_survey_service import EXPORT_COLUMNS as DELAY_SURVEY_COLUMNS
from app.services.delay_survey_service import DelaySurveyService
from app.services.discharge_service import (
    DAILY_COLUMNS,
    GROUP_COLUMNS,
    RAW_COLUMNS,
    DischargeAnalyticsService,
    DischargeReport,
)
from app.services.peer_survey_service import EXPORT_COLUMNS as SURVEY_COLUMNS
from app.services.peer_survey_service import PeerSurveyService
from app.services.ranking_service import EXPORT_COLUMNS as RANKING_COLUMNS
from app.services.ranking_service import RankingAnalyticsService
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

VALID_DATASETS: frozenset[str] = frozenset(
    {
        "discharge_raw",
        "discharge_causes",
        "discharge_providers",
        "discharge_daily",
        "delay_survey",
        "rankings",
        "survey",
    }
)


class UnknownDatasetError(ValueError):
    """Raised when an export is requested for an unsupported dataset."""


@dataclass
class ExportResult:
    """
    Flat tabular data ready for CSV or JSON serialisation.

    Attributes
    ----------
    rows:     One mapping per line.
    fields:   Ordered column names; fixed per dataset.
    filename: Suggested download name.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    filename: str = "export.csv"

    def to_csv(self) -> str:
        return to_csv(self.rows, self.fields)


class ExportService:
    """Dispatches a dataset name to the service that builds its rows."""

    def __init__(self, source: RecordSourceRepository, *, top_reasons_limit: int = 10) -> None:
        self._discharge = DischargeAnalyticsService(source)
        self._delay_survey = DelaySurveyService(source, top_reasons_limit=top_reasons_limit)
        self._rankings = RankingAnalyticsService(source)
        self._survey = PeerSurveyService(source)

    def export(
        self,
        dataset: str,
        *,
        date_from: date | None,
        date_to: date | None,
        entity: str | None = None,
        version_id: uuid.UUID | None = None,
    ) -> ExportResult:
        """
        Build the export for *dataset*.

        ``entity`` narrows discharge datasets to one provider and the delay
        survey to one respondent; it is ignored elsewhere. It is matched, and
        named in the filename, as trimmed upper-case initials.

        Raises
        ------
        UnknownDatasetError: When *dataset* is not supported.
        """
        if dataset not in VALID_DATASETS:
            raise UnknownDatasetError(
                f"Unknown dataset {dataset!r}. Valid: {sorted(VALID_DATASETS)}"
            )
        if entity is not None:
            entity = normalize_initials(entity) or None

        if dataset.startswith("discharge_"):
            report = self._discharge.build_report(
                date_from, date_to, provider_initials=entity
            )
            result = self._discharge_result(dataset, report)
            result.filename = export_filename(dataset, date_from, date_to, entity)
            return result

        if dataset == "delay_survey":
            report = self._delay_survey.build_report(
                date_from, date_to, respondent_initials=entity
            )
            return ExportResult(
                rows=report.export_rows(),
                fields=list(DELAY_SURVEY_COLUMNS),
                filename=export_filename("delay_survey", date_from, date_to, entity),
            )

        if dataset == "rankings":
            return ExportResult(
                rows=self._rankings.export_rows(date_from, date_to),
                fields=list(RANKING_COLUMNS),
                filename=export_filename("rankings", date_from, date_to),
            )

        survey = self._survey.build_report(date_from, date_to, version_id=version_id)
        return ExportResult(
            rows=survey.rows,
            fields=list(SURVEY_COLUMNS),
            filename=export_filename(survey.file_subject, date_from, date_to),
        )

    @staticmethod
    def _discharge_result(dataset: str, report: DischargeReport) -> ExportResult:
        if dataset == "discharge_raw":
            return ExportResult(rows=report.raw_rows(), fields=list(RAW_COLUMNS))
        if dataset == "discharge_causes":
            return ExportResult(rows=report.group_rows(report.by_cause), fields=list(GROUP_COLUMNS))
        if dataset == "discharge_providers":
            return ExportResult(
                rows=report.group_rows(report.by_provider), fields=list(GROUP_COLUMNS)
            )
        return ExportResult(rows=report.daily_rows(), fields=list(DAILY_COLUMNS))
