"""
analytics/campaigns.py

Campaign date windows and per-day completion status.
"""

from __future__ import annotations

import calendar
from collections.abc import Collection, Iterable
from datetime import date, timedelta
from enum import Enum


class CompletionStatus(str, Enum):
    SUBMITTED = "submitted"
    REQUIRED_MISSING = "required_missing"
    OPTIONAL = "optional"


def campaign_dates(start: date, days: int) -> list[date]:
    """Consecutive dates of a campaign starting at *start*; empty for ``days <= 0``."""
    return [start + timedelta(days=offset) for offset in range(max(0, days))]


def campaign_days_within(
    windows: Iterable[tuple[date, int]],
    first: date,
    last: date,
) -> set[date]:
    """Every campaign day from *windows* that lands in ``[first, last]``."""
    return {
        day
        for start, days in windows
        for day in campaign_dates(start, days)
        if first <= day <= last
    }


def month_days(year: int, month: int) -> list[date]:
    _, last = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, last + 1)]


def completion_status(
    days: list[date],
    responded: Collection[date],
    required: Collection[date],
) -> dict[date, CompletionStatus]:
    """
    Classify each day: a response always wins, then an unmet assignment,
    otherwise the day is optional.
    """
    status: dict[date, CompletionStatus] = {}
    for day in days:
        if day in responded:
            status[day] = CompletionStatus.SUBMITTED
        elif day in required:
            status[day] = CompletionStatus.REQUIRED_MISSING
        else:
            status[day] = CompletionStatus.OPTIONAL
    return status
