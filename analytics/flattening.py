"""
analytics/flattening.py

Turn loosely-typed source rows into canonical FlatRecord values.

Reason resolution happens exactly once, here. Delay-survey responses store
their patients in a JSON ``answers`` document whose shape has drifted over
time, so parsing is tolerant: anything unexpected degrades to empty values
instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.base import FlatRecord
from analytics.normalizer import ReasonNormalizer

_normalizer = ReasonNormalizer()


@dataclass(frozen=True)
class ParsedAnswers:
    total_delayed: int
    patients: list[Any] = field(default_factory=list)
    general_comments: str | None = None


@dataclass(frozen=True)
class DelaySurveyRow:
    """One exported line of the delay survey: one patient, or one empty response."""

    survey_date: date
    initials: str
    patient_label: str
    category: str | None
    detail: str | None
    comment: str | None
    total_delayed: int

    def to_record(self) -> FlatRecord:
        return FlatRecord(
            date=self.survey_date,
            subject_key=self.initials,
            category=self.category or "",
            detail=self.detail,
            comment=self.comment,
        )


def parse_answers(answers: Any) -> ParsedAnswers:
    """
    Read ``{total_delayed, patients, general_comments}`` from a stored answer.

    ``total_delayed`` falls back to the number of patients when it is not a
    number; blank comments read as ``None``. Patient entries are kept as
    stored, malformed ones included, so they still count and number.
    """
    if not isinstance(answers, dict):
        return ParsedAnswers(total_delayed=0)

    raw_patients = answers.get("patients")
    patients = list(raw_patients) if isinstance(raw_patients, list) else []

    total = answers.get("total_delayed")
    if isinstance(total, bool) or not isinstance(total, (int, float)):
        total = len(raw_patients) if isinstance(raw_patients, list) else 0

    comments = answers.get("general_comments")
    if not isinstance(comments, str) or not comments.strip():
        comments = None

    return ParsedAnswers(total_delayed=int(total), patients=patients, general_comments=comments)


def normalize_initials(value: str | None) -> str:
    """Canonical form of provider or respondent initials: trimmed, upper case."""
    return (value or "").strip().upper()


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def flatten_delay_response(
    survey_date: date,
    initials: str,
    answers: Any,
) -> list[DelaySurveyRow]:
    """
    Expand one delay-survey response into one row per patient.

    A response with no patients still yields a single row carrying its
    ``total_delayed`` so that zero-delay days appear in exports.
    """
    parsed = parse_answers(answers)
    if not parsed.patients:
        return [
            DelaySurveyRow(
                survey_date=survey_date,
                initials=initials,
                patient_label="",
                category=None,
                detail=None,
                comment=None,
                total_delayed=parsed.total_delayed,
            )
        ]

    rows: list[DelaySurveyRow] = []
    for index, patient in enumerate(parsed.patients, start=1):
        pair = _normalizer.normalize_row(patient)
        if not isinstance(patient, dict):
            patient = {}
        label = patient.get("label")
        rows.append(
            DelaySurveyRow(
                survey_date=survey_date,
                initials=initials,
                patient_label=label.strip() if _text(label) else f"Patient {index}",
                category=pair.category,
                detail=pair.detail,
                comment=_text(patient.get("comment")),
                total_delayed=parsed.total_delayed,
            )
        )
    return rows


def discharge_record(
    *,
    event_date: date,
    provider_initials: str | None,
    cause: str | None,
    subcause: str | None = None,
    reason: str | None = None,
    patients_delayed: int | float | None = None,
    comment: str | None = None,
) -> FlatRecord:
    """Build the canonical record for one discharge-delay entry."""
    pair = _normalizer.normalize(category=cause, detail=subcause, reason=reason)
    return FlatRecord(
        date=event_date,
        subject_key=normalize_initials(provider_initials),
        category=pair.category,
        detail=pair.detail,
        metric=patients_delayed,
        comment=_text(comment),
    )
