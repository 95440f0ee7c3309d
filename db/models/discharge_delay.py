"""
db/models/discharge_delay.py

Discharge delay entries, one row per provider, cause and day.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DischargeDelay(Base):
    """
    A reported discharge delay.

    Rows written before causes were split carry only the free-text
    ``reason`` column (``"Cause — Subcause"``); newer rows fill ``cause``
    and ``subcause``. The analytics layer reconciles both shapes.
    """

    __tablename__ = "discharge_delays"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    provider_initials: Mapped[str] = mapped_column(String(16), nullable=False)
    cause: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subcause: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reason: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Legacy single-field reason",
    )
    patients_delayed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_discharge_delays_event_date", "event_date"),
        Index("ix_discharge_delays_provider_date", "provider_initials", "event_date"),
    )
