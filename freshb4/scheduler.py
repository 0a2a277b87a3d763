"""APScheduler-backed local notification service."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from .notifications import NotificationPayload, Notifier

logger = logging.getLogger(__name__)

Deliver = Callable[[NotificationPayload], "Awaitable[None] | None"]

_NOTIFY_PREFIX = "notify-"


def log_notification(payload: NotificationPayload) -> None:
    """Default delivery: write the notification to the log."""
    actions = ", ".join(a.title for a in payload.actions)
    suffix = f" [{actions}]" if actions else ""
    logger.warning("%s: %s%s", payload.title, payload.body, suffix)


class NotificationScheduler(Notifier):
    """Delivers notifications at their trigger times.

    Uses APScheduler: a date trigger for immediate and delayed alerts, a
    cron trigger for the daily reminder. ``cancel_all`` only removes jobs
    created by this notifier, so other jobs (e.g. the pantry refresh) survive.
    """

    def __init__(self, deliver: Deliver | None = None, *, permission: bool = True) -> None:
        """Initialize the scheduler.

        Args:
            deliver: Called with each payload when it fires. Logs by default.
            permission: Whether notifications are allowed at all.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
            from apscheduler.triggers.date import DateTrigger
        except ImportError:
            raise ImportError("apscheduler is required: pip install 'apscheduler<4'")

        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._DateTrigger = DateTrigger
        self._deliver = deliver or log_notification
        self._permission = permission
        self._running = False

    def start(self) -> None:
        """Start the scheduler. Must be called from a running event loop."""
        self._scheduler.start()
        self._running = True
        logger.info("Notification scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Notification scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def add_cron_job(self, func: Callable, expr: str, job_id: str, name: str) -> None:
        """Register a non-notification job on a 5-field cron expression."""
        self._scheduler.add_job(
            func,
            trigger=self._parse_cron(expr),
            id=job_id,
            name=name,
            replace_existing=True,
        )
        logger.info("Registered job %s: %s", job_id, expr)

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Invalid cron expression: {expr}")

    async def _fire(self, payload: NotificationPayload) -> None:
        try:
            result = self._deliver(payload)
            if result is not None:
                await result
        except Exception:
            logger.exception("Error delivering notification: %s", payload.title)

    def _add(self, payload: NotificationPayload, trigger) -> str:
        job_id = f"{_NOTIFY_PREFIX}{payload.category}-{uuid.uuid4().hex[:8]}"
        self._scheduler.add_job(
            self._fire,
            trigger=trigger,
            args=[payload],
            id=job_id,
            name=payload.title,
            misfire_grace_time=None,
        )
        return job_id

    async def request_permission(self) -> bool:
        return self._permission

    async def schedule_immediate(self, payload: NotificationPayload) -> str:
        return self._add(payload, self._DateTrigger(run_date=datetime.now(timezone.utc)))

    async def schedule_delayed(self, payload: NotificationPayload, seconds: int) -> str:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        return self._add(payload, self._DateTrigger(run_date=run_date))

    async def schedule_recurring(
        self, payload: NotificationPayload, hour: int, minute: int
    ) -> str:
        return self._add(payload, self._CronTrigger(hour=hour, minute=minute))

    async def cancel_all(self) -> None:
        for job in self._scheduler.get_jobs():
            if job.id.startswith(_NOTIFY_PREFIX):
                self._scheduler.remove_job(job.id)
