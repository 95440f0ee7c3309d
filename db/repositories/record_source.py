"""
db/repositories/record_source.py

Read-only queries feeding the analytics pipeline.

Every list method filters on an inclusive ``[date_from, date_to]`` window
(either bound may be open), optionally narrows to one entity, orders by
date ascending and caps the row count. The caller owns the session; this
repository never commits.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from analytics.flattening import normalize_initials
from db.models.campaign import Campaign, CampaignRecipient
from db.models.delay_survey import DelaySurveyResponse, SurveyAssignment
from db.models.discharge_delay import DischargeDelay
from db.models.peer_survey import SurveyQuestion, SurveyResponse, SurveyVersion
from db.models.rank_review import RankReview
from db.models.roster import RosterMember
from db.repositories.errors import RecordSourceError, SurveyVersionNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ROW_LIMIT = 50_000

R = TypeVar("R")


def _date_window(stmt: Select, column: Any, date_from: date | None, date_to: date | None) -> Select:
    if date_from is not None:
        stmt = stmt.where(column >= date_from)
    if date_to is not None:
        stmt = stmt.where(column <= date_to)
    return stmt


def _initials_match(column: Any, initials: str) -> Any:
    """Compare stored initials in canonical form so " ab" matches "AB"."""
    return func.upper(func.trim(column)) == normalize_initials(initials)


class RecordSourceRepository:
    """
    Date-range reads over survey, ranking and discharge tables.

    Database failures surface as :class:`RecordSourceError` so API code
    handles one exception family regardless of driver.
    """

    def __init__(self, session: Session, *, row_limit: int = DEFAULT_ROW_LIMIT) -> None:
        self._session = session
        self._row_limit = max(1, row_limit)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, label: str, fn: Callable[[], R]) -> R:
        try:
            return fn()
        except SQLAlchemyError as exc:
            logger.exception("Record source query failed query=%s", label)
            raise RecordSourceError(f"Failed to load {label}.") from exc

    def _all(self, label: str, stmt: Select) -> list[Any]:
        rows = self._run(label, lambda: list(self._session.scalars(stmt)))
        logger.debug("record_source query=%s rows=%d", label, len(rows))
        return rows

    # ------------------------------------------------------------------
    # Discharge delays
    # ------------------------------------------------------------------

    def list_discharge_delays(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        provider_initials: str | None = None,
    ) -> list[DischargeDelay]:
        stmt = select(DischargeDelay).order_by(
            DischargeDelay.event_date.asc(), DischargeDelay.created_at.asc()
        )
        stmt = _date_window(stmt, DischargeDelay.event_date, date_from, date_to)
        if provider_initials:
            stmt = stmt.where(_initials_match(DischargeDelay.provider_initials, provider_initials))
        return self._all("discharge_delays", stmt.limit(self._row_limit))

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    def list_rank_reviews(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        reviewee_initials: str | None = None,
    ) -> list[RankReview]:
        stmt = select(RankReview).order_by(
            RankReview.review_date.asc(), RankReview.created_at.asc()
        )
        stmt = _date_window(stmt, RankReview.review_date, date_from, date_to)
        if reviewee_initials:
            stmt = stmt.where(_initials_match(RankReview.reviewee_initials, reviewee_initials))
        return self._all("rank_reviews", stmt.limit(self._row_limit))

    # ------------------------------------------------------------------
    # Delay survey
    # ------------------------------------------------------------------

    def list_delay_survey_responses(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        respondent_initials: str | None = None,
    ) -> list[DelaySurveyResponse]:
        stmt = select(DelaySurveyResponse).order_by(
            DelaySurveyResponse.survey_date.asc(),
            DelaySurveyResponse.respondent_initials.asc(),
        )
        stmt = _date_window(stmt, DelaySurveyResponse.survey_date, date_from, date_to)
        if respondent_initials:
            stmt = stmt.where(
                _initials_match(DelaySurveyResponse.respondent_initials, respondent_initials)
            )
        return self._all("delay_survey_responses", stmt.limit(self._row_limit))

    def list_response_dates(
        self,
        initials: str,
        date_from: date,
        date_to: date,
    ) -> set[date]:
        stmt = _date_window(
            select(DelaySurveyResponse.survey_date).where(
                _initials_match(DelaySurveyResponse.respondent_initials, initials)
            ),
            DelaySurveyResponse.survey_date,
            date_from,
            date_to,
        )
        return set(self._all("delay_survey_response_dates", stmt))

    def list_assignment_dates(
        self,
        initials: str,
        date_from: date,
        date_to: date,
    ) -> set[date]:
        stmt = _date_window(
            select(SurveyAssignment.survey_date).where(
                _initials_match(SurveyAssignment.initials, initials)
            ),
            SurveyAssignment.survey_date,
            date_from,
            date_to,
        )
        return set(self._all("survey_assignment_dates", stmt))

    def list_campaign_windows(self, initials: str) -> list[tuple[date, int]]:
        """
        ``(start_date, days)`` of every campaign that targets *initials*.

        Windows are returned whole; callers intersect them with the period
        they are looking at.
        """
        stmt = (
            select(Campaign.start_date, Campaign.days)
            .join(CampaignRecipient, CampaignRecipient.campaign_id == Campaign.id)
            .where(_initials_match(CampaignRecipient.initials, initials))
            .order_by(Campaign.start_date.asc())
        )
        rows = self._run("campaign_windows", lambda: self._session.execute(stmt).all())
        return [(start, days) for start, days in rows]

    # ------------------------------------------------------------------
    # Peer survey
    # ------------------------------------------------------------------

    def list_survey_versions(self) -> list[SurveyVersion]:
        stmt = select(SurveyVersion).order_by(SurveyVersion.created_at.asc())
        return self._all("survey_versions", stmt)

    def get_survey_version(self, version_id: uuid.UUID | None = None) -> SurveyVersion:
        """
        Return the version with *version_id*, or the live version when omitted.

        Falls back to the oldest version when none is live.

        Raises
        ------
        SurveyVersionNotFoundError: When no matching version exists.
        """
        if version_id is not None:
            version = self._run(
                "survey_version", lambda: self._session.get(SurveyVersion, version_id)
            )
            if version is None:
                raise SurveyVersionNotFoundError(version_id)
            return version

        versions = self.list_survey_versions()
        for version in versions:
            if version.is_live:
                return version
        if versions:
            return versions[0]
        raise SurveyVersionNotFoundError("live")

    def list_survey_questions(self, version_id: uuid.UUID) -> list[SurveyQuestion]:
        stmt = (
            select(SurveyQuestion)
            .where(SurveyQuestion.version_id == version_id)
            .order_by(SurveyQuestion.sort_order.asc())
        )
        return self._all("survey_questions", stmt)

    def list_survey_responses(
        self,
        version_id: uuid.UUID,
        date_from: date | None,
        date_to: date | None,
    ) -> list[SurveyResponse]:
        stmt = (
            select(SurveyResponse)
            .where(SurveyResponse.version_id == version_id)
            .order_by(SurveyResponse.response_date.asc())
        )
        stmt = _date_window(stmt, SurveyResponse.response_date, date_from, date_to)
        return self._all("survey_responses", stmt.limit(self._row_limit))

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def list_roster(self, *, active_only: bool = False) -> Sequence[RosterMember]:
        stmt = select(RosterMember).order_by(RosterMember.initials.asc())
        if active_only:
            stmt = stmt.where(RosterMember.active.is_(True))
        return self._all("roster", stmt)
