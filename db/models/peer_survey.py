"""
db/models/peer_survey.py

Versioned peer-selection surveys: versions own ordered questions, and each
response selects zero or more roster initials for one question.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin


class SurveyVersion(Base, TimestampMixin):
    """At most one version is live at a time (partial unique index)."""

    __tablename__ = "survey_versions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_live: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    questions: Mapped[list["SurveyQuestion"]] = relationship(
        "SurveyQuestion",
        back_populates="version",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SurveyQuestion.sort_order",
    )

    __table_args__ = (
        Index(
            "ux_survey_versions_live",
            "is_live",
            unique=True,
            postgresql_where=text("is_live"),
        ),
    )

    def __repr__(self) -> str:
        return f"<SurveyVersion id={self.id} name={self.name!r} live={self.is_live}>"


class SurveyQuestion(Base):
    __tablename__ = "survey_questions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    version_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("survey_versions.id", ondelete="CASCADE"),
        nullable=False,
    )
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    version: Mapped[SurveyVersion] = relationship("SurveyVersion", back_populates="questions")

    __table_args__ = (
        Index("ix_survey_questions_version_sort", "version_id", "sort_order"),
    )


class SurveyResponse(Base, TimestampMixin):
    """One respondent's selection for one question on one day."""

    __tablename__ = "survey_responses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    version_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("survey_versions.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("survey_questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    respondent_initials: Mapped[str] = mapped_column(String(16), nullable=False)
    response_date: Mapped[date] = mapped_column(Date, nullable=False)
    selected_initials: Mapped[list[str]] = mapped_column(
        ARRAY(String(16)),
        nullable=False,
        server_default=text("'{}'::varchar[]"),
    )

    __table_args__ = (
        UniqueConstraint(
            "version_id",
            "question_id",
            "respondent_initials",
            "response_date",
            name="uq_survey_responses_version_question_respondent_date",
        ),
        Index("ix_survey_responses_lookup", "version_id", "question_id", "response_date"),
    )
