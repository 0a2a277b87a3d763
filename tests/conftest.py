"""Shared fixtures: a controllable clock, a temporary pantry and a fake notifier."""

from datetime import datetime, timedelta, timezone

import pytest

from freshb4.db import PantryDB
from freshb4.notifications import Notifier

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeNotifier(Notifier):
    """Records every call. ``fail_on`` names a call kind that should raise."""

    def __init__(self) -> None:
        self.permission = True
        self.fail_on: str | None = None
        self.calls: list[tuple] = []
        self.scheduled: dict[str, tuple] = {}
        self._counter = 0

    @property
    def kinds(self) -> list[str]:
        return [c[0] for c in self.calls]

    def _check(self, kind: str) -> None:
        if self.fail_on == kind:
            raise RuntimeError(f"{kind} failed")

    def _schedule(self, kind: str, payload, *args) -> str:
        self._check(kind)
        self._counter += 1
        handle = f"{kind}-{self._counter}"
        self.calls.append((kind, payload, *args))
        self.scheduled[handle] = (kind, payload, *args)
        return handle

    async def request_permission(self) -> bool:
        self._check("permission")
        self.calls.append(("permission",))
        return self.permission

    async def schedule_immediate(self, payload) -> str:
        return self._schedule("immediate", payload)

    async def schedule_delayed(self, payload, seconds) -> str:
        return self._schedule("delayed", payload, seconds)

    async def schedule_recurring(self, payload, hour, minute) -> str:
        return self._schedule("recurring", payload, hour, minute)

    async def cancel_all(self) -> None:
        self._check("cancel")
        self.calls.append(("cancel",))
        self.scheduled.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db(tmp_path, clock):
    """A PantryDB on a temporary file, reading time from ``clock``."""
    pantry = PantryDB(db_path=tmp_path / "pantry.db", clock=clock)
    yield pantry
    pantry.close()


@pytest.fixture
def notifier():
    return FakeNotifier()
