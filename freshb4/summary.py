"""Pantry health summaries.

Two bucket policies exist and are deliberately kept apart:

* ``NOTIFICATION_POLICY`` (expired / expiring / fresh) drives alerts:
  expired ``d <= 0``, expiring ``0 < d <= 3``.
* ``STATS_CARD_POLICY`` (urgent / soon / fresh) drives the pantry stat cards:
  urgent ``d <= 1``, soon ``1 < d <= 3``.

They disagree on items with exactly one day left. Which one the product
actually wants is still open, so both are reproduced as-is.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .freshness import Tier, classify

RECIPE_URGENCY_DAYS = 2


@dataclass(frozen=True)
class BucketPolicy:
    name: str
    labels: tuple[str, str, str]  # (critical, warning, fresh)
    critical_max: int  # d <= critical_max
    warning_max: int  # critical_max < d <= warning_max

    def bucket(self, days_left: int) -> int:
        """Return 0 (critical), 1 (warning) or 2 (fresh)."""
        if days_left <= self.critical_max:
            return 0
        if days_left <= self.warning_max:
            return 1
        return 2


NOTIFICATION_POLICY = BucketPolicy(
    name="notification",
    labels=("expired", "expiring", "fresh"),
    critical_max=0,
    warning_max=3,
)

STATS_CARD_POLICY = BucketPolicy(
    name="stats_card",
    labels=("urgent", "soon", "fresh"),
    critical_max=1,
    warning_max=3,
)


@dataclass
class PantrySummary:
    policy: BucketPolicy
    critical: list[Any] = field(default_factory=list)
    warning: list[Any] = field(default_factory=list)
    fresh: list[Any] = field(default_factory=list)
    tiers: dict[Tier, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.critical) + len(self.warning) + len(self.fresh)

    @property
    def needs_attention(self) -> int:
        return len(self.critical) + len(self.warning)

    @property
    def health_score(self) -> int:
        return health_score(len(self.fresh), self.total)

    def counts(self) -> dict[str, int]:
        """Bucket counts keyed by the policy's labels."""
        critical, warning, fresh = self.policy.labels
        return {
            critical: len(self.critical),
            warning: len(self.warning),
            fresh: len(self.fresh),
        }


def days_left_of(item: Any) -> int:
    """Read ``days_left`` from a PantryItem-like object or a mapping."""
    if isinstance(item, Mapping):
        value = item.get("days_left")
    else:
        value = getattr(item, "days_left", None)
    return int(value) if value is not None else 0


def health_score(fresh_count: int, total: int) -> int:
    """Percentage of fresh items, rounded half up. An empty pantry scores 100."""
    if total <= 0:
        return 100
    return (200 * fresh_count + total) // (2 * total)


def summarize(
    items: Iterable[Any],
    policy: BucketPolicy = NOTIFICATION_POLICY,
) -> PantrySummary:
    summary = PantrySummary(policy=policy, tiers={tier: 0 for tier in Tier})
    buckets = (summary.critical, summary.warning, summary.fresh)
    for item in items:
        days = days_left_of(item)
        buckets[policy.bucket(days)].append(item)
        summary.tiers[classify(days)] += 1
    return summary


def split_by_urgency(items: Iterable[Any]) -> tuple[list[Any], list[Any]]:
    """Split items into (urgent, fresh) for recipe generation."""
    urgent: list[Any] = []
    fresh: list[Any] = []
    for item in items:
        if days_left_of(item) <= RECIPE_URGENCY_DAYS:
            urgent.append(item)
        else:
            fresh.append(item)
    return urgent, fresh
