"""
tests/conftest.py

In-memory record source shared by service and API tests.

Rows are plain ``SimpleNamespace`` objects carrying the same attributes as
the ORM models, so services run unchanged without a database.
"""

from __future__ import annotations

import uuid
from datetime import date
from types import SimpleNamespace
from typing import Any

import pytest

from db.repositories.errors import RecordSourceError, SurveyVersionNotFoundError

VERSION_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
Q_MENTOR = uuid.UUID("22222222-2222-2222-2222-222222222222")
Q_TEAM = uuid.UUID("33333333-3333-3333-3333-333333333333")
Q_DELETED = uuid.UUID("44444444-4444-4444-4444-444444444444")


def _in_window(value: date, date_from: date | None, date_to: date | None) -> bool:
    if date_from is not None and value < date_from:
        return False
    if date_to is not None and value > date_to:
        return False
    return True


def _same_initials(stored: str | None, wanted: str) -> bool:
    return (stored or "").strip().upper() == wanted.strip().upper()


class StubRecordSource:
    """
    Mirrors the read API of ``RecordSourceRepository`` over in-memory rows.

    Set ``fail = True`` to make every read raise ``RecordSourceError``.
    """

    def __init__(self) -> None:
        self.discharge_delays: list[Any] = []
        self.rank_reviews: list[Any] = []
        self.delay_responses: list[Any] = []
        self.assignments: list[Any] = []
        self.campaigns: list[Any] = []
        self.versions: list[Any] = []
        self.questions: list[Any] = []
        self.survey_responses: list[Any] = []
        self.roster: list[Any] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise RecordSourceError("Failed to load stub rows.")

    def list_discharge_delays(self, date_from, date_to, *, provider_initials=None):
        self._check()
        return [
            row
            for row in sorted(self.discharge_delays, key=lambda r: r.event_date)
            if _in_window(row.event_date, date_from, date_to)
            and (not provider_initials or _same_initials(row.provider_initials, provider_initials))
        ]

    def list_rank_reviews(self, date_from, date_to, *, reviewee_initials=None):
        self._check()
        return [
            row
            for row in sorted(self.rank_reviews, key=lambda r: r.review_date)
            if _in_window(row.review_date, date_from, date_to)
            and (not reviewee_initials or _same_initials(row.reviewee_initials, reviewee_initials))
        ]

    def list_delay_survey_responses(self, date_from, date_to, *, respondent_initials=None):
        self._check()
        return [
            row
            for row in sorted(self.delay_responses, key=lambda r: (r.survey_date, r.respondent_initials))
            if _in_window(row.survey_date, date_from, date_to)
            and (not respondent_initials or _same_initials(row.respondent_initials, respondent_initials))
        ]

    def list_response_dates(self, initials, date_from, date_to):
        self._check()
        return {
            row.survey_date
            for row in self.delay_responses
            if _same_initials(row.respondent_initials, initials) and _in_window(row.survey_date, date_from, date_to)
        }

    def list_assignment_dates(self, initials, date_from, date_to):
        self._check()
        return {
            row.survey_date
            for row in self.assignments
            if _same_initials(row.initials, initials) and _in_window(row.survey_date, date_from, date_to)
        }

    def list_campaign_windows(self, initials):
        self._check()
        return [
            (campaign.start_date, campaign.days)
            for campaign in sorted(self.campaigns, key=lambda c: c.start_date)
            if any(_same_initials(r, initials) for r in campaign.recipients)
        ]

    def get_survey_version(self, version_id=None):
        self._check()
        if version_id is not None:
            for version in self.versions:
                if version.id == version_id:
                    return version
            raise SurveyVersionNotFoundError(version_id)
        for version in self.versions:
            if version.is_live:
                return version
        if self.versions:
            return self.versions[0]
        raise SurveyVersionNotFoundError("live")

    def list_survey_questions(self, version_id):
        self._check()
        return sorted(
            (q for q in self.questions if q.version_id == version_id),
            key=lambda q: q.sort_order,
        )

    def list_survey_responses(self, version_id, date_from, date_to):
        self._check()
        return [
            row
            for row in sorted(self.survey_responses, key=lambda r: r.response_date)
            if row.version_id == version_id and _in_window(row.response_date, date_from, date_to)
        ]

    def list_roster(self, *, active_only=False):
        self._check()
        return [m for m in self.roster if m.active or not active_only]


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def discharge_row(day, initials, *, cause=None, subcause=None, reason=None, patients=None, comment=None):
    return SimpleNamespace(
        event_date=day,
        provider_initials=initials,
        cause=cause,
        subcause=subcause,
        reason=reason,
        patients_delayed=patients,
        comment=comment,
    )


def review_row(day, reviewer, reviewee, note, work, social):
    return SimpleNamespace(
        review_date=day,
        anonymized_reviewer_id=reviewer,
        reviewee_initials=reviewee,
        note_tier=note,
        work_tier=work,
        social_tier=social,
    )


def delay_response_row(day, initials, answers):
    return SimpleNamespace(survey_date=day, respondent_initials=initials, answers=answers)


def survey_response_row(day, respondent, question_id, selected, *, version_id=VERSION_ID):
    return SimpleNamespace(
        version_id=version_id,
        question_id=question_id,
        respondent_initials=respondent,
        response_date=day,
        selected_initials=selected,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def source() -> StubRecordSource:
    """Populated record source covering every dataset in early March 2026."""

    stub = StubRecordSource()

    stub.discharge_delays = [
        discharge_row(date(2026, 3, 1), "AB", cause="Imaging delay", subcause="MRI", patients=2),
        discharge_row(date(2026, 3, 1), "CD", reason="Bed not ready — Cleaning", patients=1),
        discharge_row(date(2026, 3, 2), "AB", cause="Imaging delay", subcause="CT", patients=3),
        discharge_row(date(2026, 3, 3), "EF", reason="Family meeting", comment='Said "tomorrow"'),
    ]

    stub.rank_reviews = [
        review_row(date(2026, 3, 1), "anon-1", "JS", "A", "Z", "B"),
        review_row(date(2026, 3, 1), "anon-2", "JS", "B+", None, "B"),
        review_row(date(2026, 3, 2), "anon-1", "KL", "A+", "A+", "A+"),
    ]

    stub.delay_responses = [
        delay_response_row(
            date(2026, 3, 2),
            "CD",
            {"total_delayed": 0, "patients": []},
        ),
        delay_response_row(
            date(2026, 3, 1),
            "AB",
            {
                "total_delayed": 2,
                "patients": [
                    {"label": "Bed 4", "category": "Imaging delay", "detail": "MRI"},
                    {"reason": "Transport — Ambulance", "comment": "Late pickup"},
                ],
            },
        ),
        delay_response_row(
            date(2026, 3, 2),
            "AB",
            {"total_delayed": 1, "patients": [{"category": "Imaging delay", "detail": "MRI"}]},
        ),
    ]

    stub.assignments = [
        SimpleNamespace(initials="AB", survey_date=date(2026, 3, 2)),
        SimpleNamespace(initials="AB", survey_date=date(2026, 3, 3)),
    ]

    stub.versions = [
        SimpleNamespace(id=VERSION_ID, name="Spring Peer Survey", is_live=True),
    ]
    stub.questions = [
        SimpleNamespace(id=Q_TEAM, version_id=VERSION_ID, prompt="Best teammate?", sort_order=2),
        SimpleNamespace(id=Q_MENTOR, version_id=VERSION_ID, prompt="Best mentor?", sort_order=1),
    ]
    stub.survey_responses = [
        survey_response_row(date(2026, 3, 1), "AB", Q_MENTOR, ["JS", "KL"]),
        survey_response_row(date(2026, 3, 1), "CD", Q_MENTOR, ["KL"]),
        survey_response_row(date(2026, 3, 2), "EF", Q_DELETED, ["AB"]),
    ]
    stub.roster = [
        SimpleNamespace(initials="JS", display_name="Jane Smith", active=True),
        SimpleNamespace(initials="KL", display_name="KL", active=False),
    ]
    return stub


@pytest.fixture()
def empty_source() -> StubRecordSource:
    return StubRecordSource()
