"""
analytics/aggregation.py

Group-and-reduce over FlatRecord snapshots.

Grouping preserves first-encountered key order, and ranking uses a stable
descending sort, so ties always come out in input order. Nothing here does
I/O; callers fetch rows, normalize them into FlatRecord values and pass the
snapshot in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date
from typing import TypeVar

from analytics.base import (
    COMPOSITE_SEPARATOR,
    UNSPECIFIED,
    Aggregate,
    DailyAverage,
    FlatRecord,
    RankingReview,
    RankingSummary,
)
from analytics.tiers import score

logger = logging.getLogger(__name__)

T = TypeVar("T")

KeyFn = Callable[[T], str]
MetricFn = Callable[[T], float | None]

_RANK_FIELDS = frozenset({"count", "sum", "average"})


# ---------------------------------------------------------------------------
# Key functions
# ---------------------------------------------------------------------------


def by_category(record: FlatRecord) -> str:
    return record.category


def by_subject(record: FlatRecord) -> str:
    return record.subject_key


def by_date(record: FlatRecord) -> str:
    return record.iso_date


def by_category_detail(record: FlatRecord) -> str:
    """Composite ``"Category — Detail"`` key; a missing detail reads ``Unspecified``."""
    return f"{record.category}{COMPOSITE_SEPARATOR}{record.detail or UNSPECIFIED}"


def default_metric(record: FlatRecord) -> float:
    """Each record counts as one unit unless it carries its own metric."""
    return 1.0 if record.metric is None else float(record.metric)


# ---------------------------------------------------------------------------
# Core reduction
# ---------------------------------------------------------------------------


def aggregate(
    records: Iterable[T],
    key_fn: KeyFn,
    metric_fn: MetricFn | None = None,
) -> dict[str, Aggregate]:
    """
    Group *records* by ``key_fn`` and reduce each group to count/sum/average.

    Parameters
    ----------
    records:
        Snapshot of records; not mutated.
    key_fn:
        Returns the group key. An empty string is a valid key of its own.
    metric_fn:
        Returns the numeric payload of a record. Defaults to
        :func:`default_metric`. When it returns ``None`` the record is left
        out of this aggregate's ``count`` and ``sum``, but its group key is
        still created so no group disappears.

    Returns
    -------
    dict[str, Aggregate]
        Keys in first-encountered order.
    """
    extract = metric_fn or default_metric
    counts: dict[str, int] = {}
    sums: dict[str, float] = {}

    for record in records:
        key = key_fn(record)
        if key is None:
            key = ""
        counts.setdefault(key, 0)
        sums.setdefault(key, 0.0)
        value = extract(record)
        if value is None:
            continue
        counts[key] += 1
        sums[key] += float(value)

    result: dict[str, Aggregate] = {}
    for key, count in counts.items():
        total = sums[key]
        result[key] = Aggregate(
            count=count,
            sum=total,
            average=total / count if count > 0 else 0.0,
        )
    return result


def rank(
    aggregates: Mapping[str, Aggregate],
    *,
    by: str = "sum",
    limit: int | None = None,
) -> list[tuple[str, Aggregate]]:
    """
    Order groups by *by* descending, keeping input order among ties.

    ``limit`` truncates to the top N after sorting.

    Raises
    ------
    ValueError: When *by* is not ``count``, ``sum`` or ``average``.
    """
    if by not in _RANK_FIELDS:
        raise ValueError(f"Cannot rank by {by!r}. Valid: {sorted(_RANK_FIELDS)}")
    # sorted() is stable under reverse=True.
    ordered = sorted(
        aggregates.items(),
        key=lambda item: getattr(item[1], by),
        reverse=True,
    )
    if limit is not None:
        ordered = ordered[: max(0, limit)]
    return ordered


def chronological(aggregates: Mapping[str, Aggregate]) -> list[tuple[str, Aggregate]]:
    """Order date-keyed groups ascending by ISO date string."""
    return sorted(aggregates.items(), key=lambda item: item[0])


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------


def _reviewee(review: RankingReview) -> str:
    return review.reviewee


def _note_score(review: RankingReview) -> float | None:
    return score(review.note_tier)


def _work_score(review: RankingReview) -> float | None:
    return score(review.work_tier)


def _social_score(review: RankingReview) -> float | None:
    return score(review.social_tier)


def summarize_rankings(reviews: Sequence[RankingReview]) -> list[RankingSummary]:
    """
    Average tier scores per reviewee across the three rating dimensions.

    A dimension with no valid tier contributes ``0.0``, and ``overall`` is
    the plain mean of all three dimension averages, zero included.
    ``n_ratings`` counts every review, scored or not. Results are ordered by
    ``overall`` descending; ties keep first-seen reviewee order.
    """
    totals = aggregate(reviews, _reviewee, lambda review: 1.0)
    notes = aggregate(reviews, _reviewee, _note_score)
    works = aggregate(reviews, _reviewee, _work_score)
    socials = aggregate(reviews, _reviewee, _social_score)

    summaries: list[RankingSummary] = []
    for reviewee, total in totals.items():
        note_avg = notes[reviewee].average
        work_avg = works[reviewee].average
        social_avg = socials[reviewee].average
        summaries.append(
            RankingSummary(
                reviewee=reviewee,
                note_avg=note_avg,
                work_avg=work_avg,
                social_avg=social_avg,
                overall=(note_avg + work_avg + social_avg) / 3,
                n_ratings=total.count,
            )
        )

    summaries.sort(key=lambda summary: summary.overall, reverse=True)
    logger.debug(
        "summarize_rankings reviews=%d reviewees=%d", len(reviews), len(summaries)
    )
    return summaries


def daily_averages(
    reviews: Sequence[RankingReview],
    reviewee: str,
) -> list[DailyAverage]:
    """
    Per-day dimension averages for one reviewee, newest day first.

    ``n_raters`` counts distinct reviewers for the day.
    """
    mine = [review for review in reviews if review.reviewee == reviewee]

    def day(review: RankingReview) -> str:
        return review.review_date.isoformat()

    notes = aggregate(mine, day, _note_score)
    works = aggregate(mine, day, _work_score)
    socials = aggregate(mine, day, _social_score)

    raters: dict[str, set[str]] = {}
    dates: dict[str, date] = {}
    for review in mine:
        key = day(review)
        raters.setdefault(key, set()).add(review.reviewer_id)
        dates.setdefault(key, review.review_date)

    def _avg(agg: Aggregate) -> float | None:
        return agg.average if agg.count else None

    rows = [
        DailyAverage(
            review_date=dates[key],
            note_avg=_avg(notes[key]),
            work_avg=_avg(works[key]),
            social_avg=_avg(socials[key]),
            n_raters=len(raters[key]),
        )
        for key in notes
    ]
    rows.sort(key=lambda row: row.review_date, reverse=True)
    return rows
