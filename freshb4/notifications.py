"""Expiry alert planning and scheduling.

``plan_notifications`` is pure and backs the in-app banner.
``schedule_expiry_notifications`` replaces every scheduled alert through a
:class:`Notifier`. Delivery is best-effort: a denied permission or a failing
notifier is logged and never raised, so it cannot block pantry display.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .summary import NOTIFICATION_POLICY, summarize

logger = logging.getLogger(__name__)

CATEGORY_EXPIRED = "food-expired"
CATEGORY_EXPIRING = "food-expiring"
CATEGORY_DAILY = "daily-reminder"


@dataclass(frozen=True)
class NotificationAction:
    identifier: str
    title: str
    opens_app: bool


NOTIFICATION_CATEGORIES: dict[str, tuple[NotificationAction, ...]] = {
    CATEGORY_EXPIRED: (
        NotificationAction("dispose", "Mark as Disposed", True),
        NotificationAction("remind-later", "Remind Later", False),
    ),
    CATEGORY_EXPIRING: (
        NotificationAction("use-now", "Get Recipes", True),
        NotificationAction("remind-tomorrow", "Remind Tomorrow", False),
    ),
}


@dataclass
class NotificationPayload:
    title: str
    body: str
    category: str
    data: dict = field(default_factory=dict)

    @property
    def actions(self) -> tuple[NotificationAction, ...]:
        return NOTIFICATION_CATEGORIES.get(self.category, ())


@dataclass
class NotificationBucket:
    count: int
    items: list[Any]
    message: str | None = None
    severity: str | None = None


@dataclass
class NotificationSummary:
    total: int
    needs_attention: int
    health_score: int


@dataclass
class NotificationPlan:
    expired: NotificationBucket
    expiring: NotificationBucket
    fresh: NotificationBucket
    summary: NotificationSummary


class Notifier(ABC):
    """Local notification service."""

    @abstractmethod
    async def request_permission(self) -> bool: ...

    @abstractmethod
    async def schedule_immediate(self, payload: NotificationPayload) -> str: ...

    @abstractmethod
    async def schedule_delayed(
        self, payload: NotificationPayload, seconds: int
    ) -> str: ...

    @abstractmethod
    async def schedule_recurring(
        self, payload: NotificationPayload, hour: int, minute: int
    ) -> str: ...

    @abstractmethod
    async def cancel_all(self) -> None: ...


def plan_notifications(items: Iterable[Any]) -> NotificationPlan:
    """Split items into expired / expiring / fresh and summarise."""
    s = summarize(items, NOTIFICATION_POLICY)
    expired, expiring = len(s.critical), len(s.warning)
    return NotificationPlan(
        expired=NotificationBucket(
            count=expired,
            items=s.critical,
            message=(
                f"{expired} item(s) have spoiled and should be discarded"
                if expired else None
            ),
            severity="high",
        ),
        expiring=NotificationBucket(
            count=expiring,
            items=s.warning,
            message=(
                f"{expiring} item(s) expire in 3 days or less" if expiring else None
            ),
            severity="medium",
        ),
        fresh=NotificationBucket(count=len(s.fresh), items=s.fresh),
        summary=NotificationSummary(
            total=s.total,
            needs_attention=s.needs_attention,
            health_score=s.health_score,
        ),
    )


def _field(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _item_refs(items: Iterable[Any]) -> list[dict]:
    return [
        {"id": _field(i, "id"), "name": _field(i, "name"), "days_left": _field(i, "days_left")}
        for i in items
    ]


def _names(items: Iterable[Any]) -> str:
    return ", ".join(str(_field(i, "name")) for i in items)


def expired_payload(items: list[Any]) -> NotificationPayload:
    return NotificationPayload(
        title="🚨 Spoiled Items Alert!",
        body=(
            f"{len(items)} item(s) have spoiled: {_names(items)}. "
            "Please dispose of them safely."
        ),
        category=CATEGORY_EXPIRED,
        data={"type": "expired", "items": _item_refs(items)},
    )


def expiring_payload(items: list[Any]) -> NotificationPayload:
    return NotificationPayload(
        title="⏰ Items Expiring Soon",
        body=(
            f"{len(items)} item(s) expire in 3 days or less: {_names(items)}. "
            "Use them soon!"
        ),
        category=CATEGORY_EXPIRING,
        data={"type": "expiring", "items": _item_refs(items)},
    )


def daily_reminder_payload() -> NotificationPayload:
    return NotificationPayload(
        title="📱 FreshB4 Daily Check",
        body="Check your pantry for items that might need attention today.",
        category=CATEGORY_DAILY,
        data={"type": "daily-reminder"},
    )


async def schedule_expiry_notifications(
    items: Iterable[Any],
    notifier: Notifier,
    *,
    expiring_delay: int = 5,
    daily_hour: int = 9,
    daily_minute: int = 0,
) -> set[str]:
    """Replace all scheduled alerts with those for the current pantry.

    Returns:
        Handles of the notifications scheduled by this run. Empty when
        permission is denied; partial if the notifier failed midway.
    """
    items = list(items)
    handles: set[str] = set()
    try:
        await notifier.cancel_all()

        if not await notifier.request_permission():
            logger.warning("Notification permission not granted, skipping alerts")
            return handles

        plan = plan_notifications(items)

        if plan.expired.count > 0:
            handles.add(
                await notifier.schedule_immediate(expired_payload(plan.expired.items))
            )

        if plan.expiring.count > 0:
            handles.add(
                await notifier.schedule_delayed(
                    expiring_payload(plan.expiring.items), expiring_delay
                )
            )

        if plan.summary.total > 0:
            handles.add(
                await notifier.schedule_recurring(
                    daily_reminder_payload(), daily_hour, daily_minute
                )
            )
    except Exception:
        logger.exception("Error scheduling notifications")

    return handles
