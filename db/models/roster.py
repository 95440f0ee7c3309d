"""
db/models/roster.py

Roster of providers who can be surveyed, ranked, or selected in surveys.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class RosterMember(Base, TimestampMixin):
    """
    One provider, keyed by their uppercase initials.

    ``full_name`` is optional; display code falls back to the initials.
    """

    __tablename__ = "roster"

    initials: Mapped[str] = mapped_column(String(16), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_roster_active", "active"),)

    @property
    def display_name(self) -> str:
        return self.full_name or self.initials

    def __repr__(self) -> str:
        return f"<RosterMember initials={self.initials!r} active={self.active}>"
