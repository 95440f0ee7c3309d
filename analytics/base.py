"""
analytics/base.py

Value types shared by the aggregation and export pipeline.

Every type here is an immutable snapshot. Aggregation runs take a sequence
of FlatRecord values and return fresh Aggregate maps; nothing survives
between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


UNSPECIFIED = "Unspecified"
"""Bucket label for records whose reason could not be resolved."""

COMPOSITE_SEPARATOR = " — "
"""Separator used when two labels are joined into one group key."""


@dataclass(frozen=True)
class FlatRecord:
    """
    One observed event ready for aggregation without further joins.

    ``metric`` is ``None`` when the row carries no numeric payload; the
    aggregator then counts the record as one unit.
    """

    date: date
    subject_key: str
    category: str
    detail: str | None = None
    metric: float | None = None
    comment: str | None = None

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class Aggregate:
    """
    Reduction of one group of records.

    ``average`` is ``0.0`` for an empty group, never a division error.
    """

    count: int
    sum: float
    average: float

    def as_dict(self) -> dict[str, float | int]:
        return {"count": self.count, "sum": self.sum, "average": self.average}


@dataclass(frozen=True)
class RankingReview:
    """
    One anonymized peer review.

    Tiers are stored as submitted; unknown tiers are tolerated and skipped
    when averaging.
    """

    review_date: date
    reviewer_id: str
    reviewee: str
    note_tier: str | None
    work_tier: str | None
    social_tier: str | None


@dataclass(frozen=True)
class RankingSummary:
    """Per-reviewee averages over a review window."""

    reviewee: str
    note_avg: float
    work_avg: float
    social_avg: float
    overall: float
    n_ratings: int


@dataclass(frozen=True)
class DailyAverage:
    """
    Per-day averages for one reviewee.

    A dimension is ``None`` when no valid tier was recorded that day.
    """

    review_date: date
    note_avg: float | None
    work_avg: float | None
    social_avg: float | None
    n_raters: int
