"""
app/services/ranking_service.py

Peer ranking analytics over anonymized reviews.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from analytics.aggregation import daily_averages, summarize_rankings
from analytics.base import DailyAverage, RankingReview, RankingSummary
from analytics.flattening import normalize_initials
from analytics.tiers import count_unscored
from app.logging_utils import timed_event
from db.repositories.record_source import RecordSourceRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: list[str] = [
    "review_date",
    "anonymized_reviewer_id",
    "reviewee_initials",
    "note_tier",
    "work_tier",
    "social_tier",
]


@dataclass
class RankingReport:
    summaries: list[RankingSummary] = field(default_factory=list)
    unscored_tiers: int = 0


def _to_review(row: Any) -> RankingReview:
    return RankingReview(
        review_date=row.review_date,
        reviewer_id=row.anonymized_reviewer_id,
        reviewee=normalize_initials(row.reviewee_initials),
        note_tier=row.note_tier,
        work_tier=row.work_tier,
        social_tier=row.social_tier,
    )


class RankingAnalyticsService:
    """Per-reviewee summaries, daily averages and the anonymized export."""

    def __init__(self, source: RecordSourceRepository) -> None:
        self._source = source

    def load_reviews(
        self,
        date_from: date | None,
        date_to: date | None,
        *,
        reviewee_initials: str | None = None,
    ) -> list[RankingReview]:
        if reviewee_initials:
            reviewee_initials = normalize_initials(reviewee_initials)
        rows = self._source.list_rank_reviews(
            date_from, date_to, reviewee_initials=reviewee_initials
        )
        return [_to_review(row) for row in rows]

    def build_report(self, date_from: date | None, date_to: date | None) -> RankingReport:
        """
        Summaries plus the number of submitted tiers that carry no score.

        Unscored tiers are left out of every average; the count lets the
        admin view show how much was dropped.
        """
        with timed_event(logger, "rankings.summary", date_from=date_from, date_to=date_to) as extra:
            reviews = self.load_reviews(date_from, date_to)
            report = RankingReport(
                summaries=summarize_rankings(reviews),
                unscored_tiers=count_unscored(
                    tier
                    for review in reviews
                    for tier in (review.note_tier, review.work_tier, review.social_tier)
                ),
            )
            extra["reviews"] = len(reviews)
            extra["reviewees"] = len(report.summaries)
            extra["unscored_tiers"] = report.unscored_tiers
        return report

    def summarize(self, date_from: date | None, date_to: date | None) -> list[RankingSummary]:
        return self.build_report(date_from, date_to).summaries

    def daily(
        self,
        reviewee_initials: str,
        date_from: date | None,
        date_to: date | None,
    ) -> list[DailyAverage]:
        reviewee_initials = normalize_initials(reviewee_initials)
        reviews = self.load_reviews(date_from, date_to, reviewee_initials=reviewee_initials)
        return daily_averages(reviews, reviewee_initials)

    def export_rows(self, date_from: date | None, date_to: date | None) -> list[dict[str, Any]]:
        """Raw reviews with the reviewer kept anonymized; feedback text is never exported."""
        return [
            {
                "review_date": review.review_date,
                "anonymized_reviewer_id": review.reviewer_id,
                "reviewee_initials": review.reviewee,
                "note_tier": review.note_tier,
                "work_tier": review.work_tier,
                "social_tier": review.social_tier,
            }
            for review in self.load_reviews(date_from, date_to)
        ]
