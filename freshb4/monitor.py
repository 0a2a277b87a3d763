"""Keeps alerts in step with the pantry.

Every snapshot pushed by the store replaces the monitor's item list, its
notification plan, and (through the notifier) every scheduled alert.
Snapshots are not coalesced; each one triggers a full reschedule.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .config import NotificationConfig
from .db import PantryDB
from .models import PantryItem
from .notifications import (
    NotificationPlan,
    Notifier,
    plan_notifications,
    schedule_expiry_notifications,
)

logger = logging.getLogger(__name__)


class PantryMonitor:
    def __init__(
        self,
        db: PantryDB,
        notifier: Notifier,
        config: NotificationConfig | None = None,
    ) -> None:
        self._db = db
        self._notifier = notifier
        self._config = config or NotificationConfig()
        self._items: list[PantryItem] = []
        self._plan = plan_notifications([])
        self._handles: set[str] = set()
        self._unsubscribe: Callable[[], None] | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def items(self) -> list[PantryItem]:
        return self._items

    @property
    def plan(self) -> NotificationPlan:
        return self._plan

    @property
    def handles(self) -> set[str]:
        """Handles returned by the most recent scheduling run."""
        return self._handles

    def start(self) -> None:
        """Subscribe to the store. Call from a running event loop."""
        if self._unsubscribe is None:
            self._unsubscribe = self._db.subscribe(self._on_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh(self) -> None:
        """Re-read the store so days-left values follow the calendar.

        Must run on the event loop thread that owns the store connection.
        """
        logger.info("Refreshing pantry snapshot")
        self._db.notify()

    async def poll(self) -> bool:
        """Pick up writes made by other processes, such as the CLI."""
        return self._db.poll()

    def _on_change(self, items: list[PantryItem]) -> None:
        self._items = items
        self._plan = plan_notifications(items)
        if not self._config.enabled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, alerts not rescheduled")
            return
        task = loop.create_task(self.reschedule(items))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def reschedule(self, items: list[PantryItem]) -> set[str]:
        self._handles = await schedule_expiry_notifications(
            items,
            self._notifier,
            expiring_delay=self._config.expiring_delay_seconds,
            daily_hour=self._config.daily_hour,
            daily_minute=self._config.daily_minute,
        )
        logger.info(
            "Scheduled %d notification(s) for %d item(s)",
            len(self._handles),
            len(items),
        )
        return self._handles

    async def drain(self) -> None:
        """Wait for in-flight rescheduling runs to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
