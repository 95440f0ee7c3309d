"""
analytics/tiers.py

Letter-tier to numeric score lookup used to average peer rankings.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Iterable, Mapping

TIERS: Final[tuple[str, ...]] = (
    "A+", "A", "A-",
    "B+", "B", "B-",
    "C+", "C", "C-",
    "D+", "D", "D-",
)
"""Closed set of tiers, best first."""

TIER_TO_SCORE: Final[Mapping[str, float]] = MappingProxyType(
    dict(
        zip(
            TIERS,
            (4.3, 4.0, 3.7, 3.3, 3.0, 2.7, 2.3, 2.0, 1.7, 1.3, 1.0, 0.7),
            strict=True,
        )
    )
)


def score(tier: object) -> float | None:
    """
    Return the numeric score for *tier*, or ``None`` when it is not a known tier.

    Lookup is exact: no trimming or case folding, so ``"a"`` and ``" A"`` are
    unknown. Callers treat ``None`` as "exclude from the average".
    """
    if not isinstance(tier, str):
        return None
    return TIER_TO_SCORE.get(tier)


def is_valid_tier(tier: object) -> bool:
    return score(tier) is not None


def count_unscored(tiers: Iterable[object]) -> int:
    """Number of submitted tier values that map to no score; blanks are not counted."""
    return sum(1 for tier in tiers if tier is not None and not is_valid_tier(tier))
