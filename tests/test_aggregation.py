"""
tests/test_aggregation.py

Pytest unit tests for grouping, ranking and ranking summaries.

All tests are pure Python: no database, in-memory FlatRecord snapshots only.
"""

from __future__ import annotations

from datetime import date

import pytest

from analytics.aggregation import (
    aggregate,
    by_category,
    by_category_detail,
    by_date,
    by_subject,
    chronological,
    daily_averages,
    rank,
    summarize_rankings,
)
from analytics.base import Aggregate, FlatRecord, RankingReview

D1 = date(2026, 3, 1)
D2 = date(2026, 3, 2)
D3 = date(2026, 3, 3)


def _record(
    subject: str = "AB",
    category: str = "Imaging delay",
    detail: str | None = None,
    metric: float | None = None,
    day: date = D1,
) -> FlatRecord:
    return FlatRecord(date=day, subject_key=subject, category=category, detail=detail, metric=metric)


def _review(
    reviewee: str,
    note: str | None,
    work: str | None,
    social: str | None,
    *,
    reviewer: str = "r1",
    day: date = D1,
) -> RankingReview:
    return RankingReview(
        review_date=day,
        reviewer_id=reviewer,
        reviewee=reviewee,
        note_tier=note,
        work_tier=work,
        social_tier=social,
    )


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------


class TestAggregate:
    def test_composite_key_scenario(self) -> None:
        records = [
            _record("AB", "Imaging delay", "MRI"),
            _record("AB", "Imaging delay", "CT"),
            _record("CD", "Bed not ready"),
        ]
        result = aggregate(records, by_category_detail)

        assert list(result) == [
            "Imaging delay — MRI",
            "Imaging delay — CT",
            "Bed not ready — Unspecified",
        ]
        assert all(agg.count == 1 for agg in result.values())

    def test_absent_metric_counts_as_one(self) -> None:
        result = aggregate([_record(), _record()], by_category)
        assert result["Imaging delay"] == Aggregate(count=2, sum=2.0, average=1.0)

    def test_explicit_metric_is_summed_and_averaged(self) -> None:
        records = [_record(metric=3), _record(metric=1), _record("CD", metric=4)]
        result = aggregate(records, by_subject)

        assert result["AB"].sum == pytest.approx(4.0)
        assert result["AB"].average == pytest.approx(2.0)
        assert result["CD"] == Aggregate(count=1, sum=4.0, average=4.0)

    def test_keys_keep_first_encountered_order(self) -> None:
        records = [_record("ZZ"), _record("AA"), _record("ZZ"), _record("MM")]
        assert list(aggregate(records, by_subject)) == ["ZZ", "AA", "MM"]

    def test_empty_string_key_is_its_own_group(self) -> None:
        records = [_record(category=""), _record(category="Transport"), _record(category="")]
        result = aggregate(records, by_category)
        assert result[""].count == 2
        assert result["Transport"].count == 1

    def test_group_completeness(self) -> None:
        records = [
            _record("AB", "A"), _record("CD", "B", metric=0), _record("AB", "C", metric=7),
            _record("EF", "A"), _record("", ""),
        ]
        for key_fn in (by_category, by_subject, by_date, by_category_detail):
            result = aggregate(records, key_fn)
            assert sum(agg.count for agg in result.values()) == len(records)

    def test_metric_returning_none_excludes_from_count_and_sum_but_keeps_group(self) -> None:
        records = [_record("AB", metric=2), _record("AB"), _record("CD")]
        result = aggregate(records, by_subject, lambda r: r.metric)

        assert result["AB"] == Aggregate(count=1, sum=2.0, average=2.0)
        assert result["CD"] == Aggregate(count=0, sum=0.0, average=0.0)

    def test_empty_input(self) -> None:
        assert aggregate([], by_category) == {}

    def test_by_date_uses_iso_format(self) -> None:
        result = aggregate([_record(day=D2), _record(day=D1)], by_date)
        assert list(result) == ["2026-03-02", "2026-03-01"]

    def test_input_is_not_mutated(self) -> None:
        records = [_record("AB"), _record("CD")]
        snapshot = list(records)
        aggregate(records, by_subject)
        assert records == snapshot

    def test_calls_are_independent(self) -> None:
        first = aggregate([_record("AB")], by_subject)
        second = aggregate([_record("CD")], by_subject)
        assert list(first) == ["AB"]
        assert list(second) == ["CD"]


# ---------------------------------------------------------------------------
# rank / chronological
# ---------------------------------------------------------------------------


class TestRank:
    def test_ties_preserve_input_order(self) -> None:
        groups = {
            "X": Aggregate(count=1, sum=5.0, average=5.0),
            "Y": Aggregate(count=1, sum=5.0, average=5.0),
            "Z": Aggregate(count=1, sum=5.0, average=5.0),
        }
        assert [key for key, _ in rank(groups)] == ["X", "Y", "Z"]

    def test_descending_with_ties_between_larger_values(self) -> None:
        groups = {
            "low": Aggregate(count=1, sum=1.0, average=1.0),
            "first-high": Aggregate(count=1, sum=9.0, average=9.0),
            "mid": Aggregate(count=1, sum=4.0, average=4.0),
            "second-high": Aggregate(count=1, sum=9.0, average=9.0),
        }
        assert [key for key, _ in rank(groups)] == ["first-high", "second-high", "mid", "low"]

    def test_rank_by_count(self) -> None:
        groups = {
            "a": Aggregate(count=1, sum=100.0, average=100.0),
            "b": Aggregate(count=3, sum=3.0, average=1.0),
        }
        assert [key for key, _ in rank(groups, by="count")] == ["b", "a"]

    def test_limit_truncates_after_sorting(self) -> None:
        groups = {str(i): Aggregate(count=1, sum=float(i), average=float(i)) for i in range(5)}
        assert [key for key, _ in rank(groups, limit=2)] == ["4", "3"]
        assert rank(groups, limit=0) == []

    def test_invalid_field_raises(self) -> None:
        with pytest.raises(ValueError, match="Cannot rank by"):
            rank({}, by="median")

    def test_chronological_orders_by_iso_date(self) -> None:
        groups = aggregate([_record(day=D3), _record(day=D1), _record(day=D2)], by_date)
        assert [key for key, _ in chronological(groups)] == [
            "2026-03-01",
            "2026-03-02",
            "2026-03-03",
        ]


# ---------------------------------------------------------------------------
# Ranking summaries
# ---------------------------------------------------------------------------


class TestSummarizeRankings:
    def test_ranking_scenario_with_unmapped_tier(self) -> None:
        reviews = [
            _review("JS", "A", "Z", "B", reviewer="r1"),
            _review("JS", "B+", None, "B", reviewer="r2"),
        ]
        [summary] = summarize_rankings(reviews)

        assert summary.reviewee == "JS"
        assert summary.note_avg == pytest.approx(3.65)
        assert summary.work_avg == 0.0
        assert summary.social_avg == pytest.approx(3.0)
        assert summary.overall == pytest.approx((3.65 + 0.0 + 3.0) / 3)
        assert summary.n_ratings == 2

    def test_sorted_by_overall_descending(self) -> None:
        reviews = [
            _review("LO", "D", "D", "D"),
            _review("HI", "A+", "A+", "A+"),
            _review("MID", "B", "B", "B"),
        ]
        assert [s.reviewee for s in summarize_rankings(reviews)] == ["HI", "MID", "LO"]

    def test_equal_overall_keeps_first_seen_order(self) -> None:
        reviews = [_review("SECOND", "B", "B", "B"), _review("FIRST", "B", "B", "B")]
        assert [s.reviewee for s in summarize_rankings(reviews)] == ["SECOND", "FIRST"]

    def test_all_unmapped_reviewee_still_listed(self) -> None:
        [summary] = summarize_rankings([_review("XX", "Q", "", None)])
        assert summary.overall == 0.0
        assert summary.n_ratings == 1

    def test_empty_reviews(self) -> None:
        assert summarize_rankings([]) == []


class TestDailyAverages:
    def test_newest_day_first_with_distinct_raters(self) -> None:
        reviews = [
            _review("JS", "A", "B", "C", reviewer="r1", day=D1),
            _review("JS", "B", "B", "C", reviewer="r2", day=D1),
            _review("JS", "C", None, "Z", reviewer="r1", day=D2),
            _review("KL", "A", "A", "A", reviewer="r3", day=D3),
        ]
        rows = daily_averages(reviews, "JS")

        assert [row.review_date for row in rows] == [D2, D1]
        latest, earliest = rows
        assert latest.note_avg == pytest.approx(2.0)
        assert latest.work_avg is None
        assert latest.social_avg is None
        assert latest.n_raters == 1
        assert earliest.note_avg == pytest.approx(3.5)
        assert earliest.work_avg == pytest.approx(3.0)
        assert earliest.n_raters == 2

    def test_unknown_reviewee(self) -> None:
        assert daily_averages([_review("JS", "A", "A", "A")], "NOPE") == []
