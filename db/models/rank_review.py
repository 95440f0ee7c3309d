"""
db/models/rank_review.py

Peer rankings: one reviewer rates one reviewee on one day.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class RankReview(Base, TimestampMixin):
    """
    Letter-tier ratings across note quality, work ethic and sociability.

    Only the anonymized reviewer id is ever exported.
    """

    __tablename__ = "rank_reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    anonymized_reviewer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reviewee_initials: Mapped[str] = mapped_column(String(16), nullable=False)
    review_date: Mapped[date] = mapped_column(Date, nullable=False)
    note_tier: Mapped[str | None] = mapped_column(String(4), nullable=True)
    work_tier: Mapped[str | None] = mapped_column(String(4), nullable=True)
    social_tier: Mapped[str | None] = mapped_column(String(4), nullable=True)
    note_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    work_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "anonymized_reviewer_id",
            "reviewee_initials",
            "review_date",
            name="uq_rank_reviews_reviewer_reviewee_date",
        ),
        Index("ix_rank_reviews_review_date", "review_date"),
        Index("ix_rank_reviews_reviewee_date", "reviewee_initials", "review_date"),
    )
