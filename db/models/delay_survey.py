"""
db/models/delay_survey.py

Daily delay survey responses and survey assignments.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import Date, DateTime, Index, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DelaySurveyResponse(Base):
    """
    One provider's submission for one day.

    ``answers`` holds the survey document::

        {
            "total_delayed": 2,
            "patients": [
                {"label": "Bed 4", "category": "Imaging delay", "detail": "MRI",
                 "comment": null},
                {"label": "Patient 2", "reason": "Transport"}
            ],
            "general_comments": "..."
        }
    """

    __tablename__ = "delay_survey_responses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    respondent_initials: Mapped[str] = mapped_column(String(16), nullable=False)
    survey_date: Mapped[date] = mapped_column(Date, nullable=False)
    campaign_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    answers: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "respondent_initials",
            "survey_date",
            name="uq_delay_survey_responses_respondent_date",
        ),
        Index("ix_delay_survey_responses_survey_date", "survey_date"),
    )


class SurveyAssignment(Base):
    """A day on which a provider is required to submit the delay survey."""

    __tablename__ = "survey_assignments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    initials: Mapped[str] = mapped_column(String(16), nullable=False)
    survey_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("initials", "survey_date", name="uq_survey_assignments_initials_date"),
    )
