"""
app/services package marker.
"""

from app.services.delay_survey_service import DelaySurveyReport, DelaySurveyService
from app.services.discharge_service import DischargeAnalyticsService, DischargeReport
from app.services.export_service import (
    VALID_DATASETS,
    ExportResult,
    ExportService,
    UnknownDatasetError,
)
from app.services.peer_survey_service import PeerSurveyReport, PeerSurveyService
from app.services.ranking_service import RankingAnalyticsService

__all__ = [
    "DelaySurveyReport",
    "DelaySurveyService",
    "DischargeAnalyticsService",
    "DischargeReport",
    "ExportResult",
    "ExportService",
    "PeerSurveyReport",
    "PeerSurveyService",
    "RankingAnalyticsService",
    "UnknownDatasetError",
    "VALID_DATASETS",
]
