"""
Repository-layer exceptions for record source reads.
"""

from __future__ import annotations


class RecordSourceError(Exception):
    """Raised when the backing database cannot serve a read."""


class SurveyVersionNotFoundError(RecordSourceError):
    """Raised when a referenced survey version does not exist."""

    def __init__(self, version_id: object) -> None:
        super().__init__(f"Survey version {version_id} not found.")
        self.version_id = version_id
