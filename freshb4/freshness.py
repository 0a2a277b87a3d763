"""Freshness classification from days remaining until spoilage."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

_ONE_DAY = timedelta(days=1)


class Tier(str, Enum):
    SPOILED = "spoiled"
    URGENT = "urgent"
    SOON = "soon"
    FRESH = "fresh"


# Higher rank = more urgent
_TIER_RANK: dict[Tier, int] = {
    Tier.SPOILED: 3,
    Tier.URGENT: 2,
    Tier.SOON: 1,
    Tier.FRESH: 0,
}


@dataclass(frozen=True)
class TierStyle:
    color: str
    background: str
    icon: str
    label_template: str

    def label(self, days_left: int) -> str:
        return self.label_template.format(days=days_left)


TIER_STYLES: dict[Tier, TierStyle] = {
    Tier.SPOILED: TierStyle("#F44336", "#FFEBEE", "warning", "Spoiled"),
    Tier.URGENT: TierStyle("#FF9800", "#FFF3E0", "time", "Use Today"),
    Tier.SOON: TierStyle("#FFC107", "#FFFDE7", "alert-circle", "{days} days left"),
    Tier.FRESH: TierStyle("#4CAF50", "#E8F5E8", "checkmark-circle", "{days} days left"),
}

# Styles for the freshness level reported by an analysis (not a Tier)
FRESHNESS_STYLES: dict[str, TierStyle] = {
    "fresh": TierStyle("#4CAF50", "#E8F5E8", "checkmark-circle", "Fresh"),
    "ripe": TierStyle("#FFC107", "#FFFDE7", "alert-circle", "Ripe"),
    "overripe": TierStyle("#FF9800", "#FFF3E0", "time", "Overripe"),
    "spoiled": TierStyle("#F44336", "#FFEBEE", "warning", "Spoiled"),
}
_UNKNOWN_STYLE = TierStyle("#757575", "#FAFAFA", "help-circle", "Unknown")


def classify(days_left: int) -> Tier:
    """Map days remaining to a tier. First matching threshold wins."""
    if days_left <= 0:
        return Tier.SPOILED
    if days_left <= 1:
        return Tier.URGENT
    if days_left <= 3:
        return Tier.SOON
    return Tier.FRESH


def tier_rank(tier: Tier) -> int:
    return _TIER_RANK[tier]


def style_for(days_left: int) -> TierStyle:
    return TIER_STYLES[classify(days_left)]


def status_label(days_left: int) -> str:
    """Return the on-card status text, e.g. ``"Use Today"`` or ``"3 days left"``."""
    return style_for(days_left).label(days_left)


def freshness_style(level: str) -> TierStyle:
    return FRESHNESS_STYLES.get(level, _UNKNOWN_STYLE)


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``expiry``, rounded up, never negative."""
    return max(0, math.ceil((expiry - now) / _ONE_DAY))
