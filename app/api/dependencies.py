"""
app/api/dependencies.py

Shared FastAPI dependencies for analytics endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import AnalyticsSettings, get_analytics_settings
from db.repositories.record_source import RecordSourceRepository
from db.session import get_db


@dataclass(frozen=True)
class DateWindow:
    date_from: date
    date_to: date


def get_date_window(
    date_from: date | None = Query(
        default=None,
        description="Inclusive start date (YYYY-MM-DD). Defaults to the lookback window.",
    ),
    date_to: date | None = Query(
        default=None,
        description="Inclusive end date (YYYY-MM-DD). Defaults to today.",
    ),
    settings: AnalyticsSettings = Depends(get_analytics_settings),
) -> DateWindow:
    """
    Resolve the requested date range, filling open bounds from settings.
    """

    end = date_to or date.today()
    start = date_from or end - timedelta(days=settings.default_lookback_days)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from must not be later than date_to.",
        )
    return DateWindow(date_from=start, date_to=end)


def get_record_source(
    db: Session = Depends(get_db),
    settings: AnalyticsSettings = Depends(get_analytics_settings),
) -> RecordSourceRepository:
    """
    Build a read-only record source bound to the request session.
    """

    return RecordSourceRepository(db, row_limit=settings.export_row_limit)
