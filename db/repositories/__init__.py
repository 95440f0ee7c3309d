"""
Repository layer exports.
"""

from db.repositories.errors import RecordSourceError, SurveyVersionNotFoundError
from db.repositories.record_source import DEFAULT_ROW_LIMIT, RecordSourceRepository

__all__ = [
    "DEFAULT_ROW_LIMIT",
    "RecordSourceError",
    "RecordSourceRepository",
    "SurveyVersionNotFoundError",
]
