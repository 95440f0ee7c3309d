"""
analytics/normalizer.py

Resolve a record's reason into a canonical ``(category, detail)`` pair.

Rows written before reasons were split into two fields carry a single
free-text ``reason`` such as ``"Imaging delay — MRI"``. Newer rows carry
``category`` and ``detail`` directly. Both shapes are reduced here, once, at
the boundary so downstream aggregation only ever sees the canonical shape.
"""

from __future__ import annotations

from dataclasses import dataclass

from analytics.base import COMPOSITE_SEPARATOR, UNSPECIFIED

EM_DASH = "—"


@dataclass(frozen=True)
class ReasonPair:
    category: str
    detail: str | None

    def encode(self) -> str:
        """Render the pair the way legacy rows stored it."""
        if self.detail is None:
            return self.category
        return f"{self.category}{COMPOSITE_SEPARATOR}{self.detail}"


def _clean(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def normalize_reason(
    category: object = None,
    detail: object = None,
    reason: object = None,
) -> ReasonPair:
    """
    Resolve a ``(category, detail)`` pair from either record shape.

    Resolution order:

    1. a non-blank ``category`` wins; ``detail`` is kept when non-blank;
    2. otherwise a non-blank legacy ``reason`` is split on the em-dash.
       Two or more non-empty parts give ``category`` and the remaining parts
       rejoined with ``" — "`` as ``detail``; anything else lands in the
       ``"Unspecified"`` category with the whole reason as ``detail``;
    3. otherwise both fields are ``"Unspecified"``.

    Never raises. Non-string inputs are treated as absent.
    """
    category_text = _clean(category)
    if category_text:
        detail_text = _clean(detail)
        return ReasonPair(category=category_text, detail=detail_text or None)

    reason_text = _clean(reason)
    if reason_text:
        parts = [part.strip() for part in reason_text.split(EM_DASH)]
        parts = [part for part in parts if part]
        if len(parts) >= 2:
            return ReasonPair(
                category=parts[0],
                detail=COMPOSITE_SEPARATOR.join(parts[1:]),
            )
        return ReasonPair(category=UNSPECIFIED, detail=reason_text)

    return ReasonPair(category=UNSPECIFIED, detail=UNSPECIFIED)


class ReasonNormalizer:
    """Stateless wrapper so services can receive the normalizer as a collaborator."""

    def normalize(
        self,
        category: object = None,
        detail: object = None,
        reason: object = None,
    ) -> ReasonPair:
        return normalize_reason(category=category, detail=detail, reason=reason)

    def normalize_row(self, row: dict) -> ReasonPair:
        """Normalize a loosely-typed mapping such as a JSONB patient entry."""
        if not isinstance(row, dict):
            return normalize_reason()
        return normalize_reason(
            category=row.get("category"),
            detail=row.get("detail"),
            reason=row.get("reason"),
        )
