"""Pantry item storage with push subscriptions."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from ..ai.normalize import normalize_analysis
from ..freshness import days_until
from ..models import DEFAULT_CATEGORY, AnalysisResult, PantryItem
from .schema import ensure_schema

logger = logging.getLogger(__name__)

Listener = Callable[[list[PantryItem]], None]

_UPDATABLE_FIELDS = frozenset(
    {"name", "category", "days_left", "expiry_date", "notes", "ai_analysis", "image_ref"}
)

DEMO_ITEMS: tuple[dict, ...] = (
    {
        "name": "Bananas",
        "category": "Fruits",
        "days_left": 1,
        "notes": "Getting brown spots - perfect for smoothies or baking",
        "ai_analysis": {
            "freshness": "ripe",
            "safe_to_consume": True,
            "confidence": 85,
            "recommendation": "Use soon, great for baking",
        },
    },
    {
        "name": "Spinach",
        "category": "Vegetables",
        "days_left": 2,
        "notes": "Still crisp but use soon",
        "ai_analysis": {
            "freshness": "fresh",
            "safe_to_consume": True,
            "confidence": 90,
            "recommendation": "Perfect for salads",
        },
    },
    {
        "name": "Chicken Breast",
        "category": "Meat",
        "days_left": 3,
        "notes": "Stored in refrigerator",
        "ai_analysis": {
            "freshness": "fresh",
            "safe_to_consume": True,
            "confidence": 95,
            "recommendation": "Cook within 3 days",
        },
    },
    {
        "name": "Bread",
        "category": "Bakery",
        "days_left": 5,
        "notes": "Whole grain bread",
        "ai_analysis": {
            "freshness": "fresh",
            "safe_to_consume": True,
            "confidence": 88,
            "recommendation": "Store in cool, dry place",
        },
    },
)


class ItemNotFoundError(LookupError):
    """Raised when updating an item that does not exist."""


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _read_data_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA data_version").fetchone()[0]


def _analysis_json(value: AnalysisResult | Mapping | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, AnalysisResult):
        return json.dumps(value.to_dict(), ensure_ascii=False)
    return json.dumps(normalize_analysis(value).to_dict(), ensure_ascii=False)


class PantryDB:
    """Manages the pantry_items table.

    Listeners registered with :meth:`subscribe` receive the full item list,
    newest first, after every committed write. ``expiry_date`` is stored;
    ``days_left`` is derived from it each time items are read.
    """

    def __init__(
        self,
        db_path: str | Path = "~/.config/freshb4/pantry.db",
        *,
        clock: Callable[[], datetime] | None = None,
        default_days_left: int = 7,
        default_category: str = DEFAULT_CATEGORY,
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._default_days_left = default_days_left
        self._default_category = default_category
        self._listeners: list[Listener] = []
        self._data_version: int | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
            self._data_version = _read_data_version(self._conn)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def now(self) -> datetime:
        return _utc(self._clock())

    def _row_to_item(self, row: sqlite3.Row, now: datetime) -> PantryItem:
        analysis = None
        if row["ai_analysis"]:
            try:
                analysis = normalize_analysis(json.loads(row["ai_analysis"]))
            except json.JSONDecodeError:
                logger.warning("Ignoring unreadable analysis for item %s", row["id"])
        expiry = datetime.fromisoformat(row["expiry_date"])
        return PantryItem(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            days_left=days_until(expiry, now),
            expiry_date=expiry,
            added_date=datetime.fromisoformat(row["added_date"]),
            notes=row["notes"],
            ai_analysis=analysis,
            image_ref=row["image_ref"],
        )

    def get_items(self) -> list[PantryItem]:
        """Return every item, newest first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM pantry_items ORDER BY added_date DESC, rowid DESC"
        ).fetchall()
        now = self.now()
        return [self._row_to_item(r, now) for r in rows]

    def get_item(self, item_id: str) -> PantryItem | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM pantry_items WHERE id = ?", (item_id,)
        ).fetchone()
        return self._row_to_item(row, self.now()) if row else None

    def add(self, item: PantryItem) -> str:
        """Insert an item and return its new ID.

        Raises:
            ValueError: If the item has no name.
        """
        name = (item.name or "").strip()
        if not name:
            raise ValueError("Pantry item name must not be empty")

        days = item.days_left if item.days_left is not None else self._default_days_left
        days = max(0, int(days))
        now = self.now()
        expiry = _utc(item.expiry_date) if item.expiry_date else now + timedelta(days=days)
        item_id = uuid.uuid4().hex

        conn = self._get_conn()
        conn.execute(
            """INSERT INTO pantry_items
               (id, name, category, expiry_date, added_date, notes,
                ai_analysis, image_ref)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                item_id,
                name,
                item.category or self._default_category,
                expiry.isoformat(),
                now.isoformat(),
                item.notes or "",
                _analysis_json(item.ai_analysis),
                item.image_ref,
            ),
        )
        conn.commit()
        logger.info(
            "Added item to pantry: %s (%s, %d days left)",
            item_id,
            name,
            days_until(expiry, now),
        )
        self.notify()
        return item_id

    def update(self, item_id: str, patch: Mapping[str, Any]) -> None:
        """Apply a partial update.

        Setting ``days_left`` without ``expiry_date`` moves the expiry date to
        ``now + days_left``.

        Raises:
            ValueError: For unknown fields or an empty name.
            ItemNotFoundError: If no item has this ID.
        """
        unknown = set(patch) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        now = self.now()
        columns: dict[str, Any] = {}
        if "name" in patch:
            name = (patch["name"] or "").strip()
            if not name:
                raise ValueError("Pantry item name must not be empty")
            columns["name"] = name
        if "category" in patch:
            columns["category"] = patch["category"] or self._default_category
        if "notes" in patch:
            columns["notes"] = patch["notes"] or ""
        if "image_ref" in patch:
            columns["image_ref"] = patch["image_ref"]
        if "ai_analysis" in patch:
            columns["ai_analysis"] = _analysis_json(patch["ai_analysis"])
        if patch.get("expiry_date") is not None:
            columns["expiry_date"] = _utc(patch["expiry_date"]).isoformat()
        elif patch.get("days_left") is not None:
            days = max(0, int(patch["days_left"]))
            columns["expiry_date"] = (now + timedelta(days=days)).isoformat()
        columns["updated_date"] = now.isoformat()

        assignments = ", ".join(f"{col} = ?" for col in columns)
        conn = self._get_conn()
        cur = conn.execute(
            f"UPDATE pantry_items SET {assignments} WHERE id = ?",
            (*columns.values(), item_id),
        )
        conn.commit()
        if cur.rowcount == 0:
            raise ItemNotFoundError(item_id)
        logger.info("Updated item: %s", item_id)
        self.notify()

    def delete(self, item_id: str) -> None:
        """Delete an item by ID. Unknown IDs are ignored."""
        conn = self._get_conn()
        conn.execute("DELETE FROM pantry_items WHERE id = ?", (item_id,))
        conn.commit()
        logger.info("Deleted item: %s", item_id)
        self.notify()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a listener and deliver the current snapshot right away.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(callback)
        self._deliver(callback, self._snapshot())

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def poll(self) -> bool:
        """Push a snapshot if another connection committed since the last check.

        Writes made through this instance already notify listeners; this picks
        up writes from other processes sharing the database file.

        Returns:
            True if a change was seen.
        """
        conn = self._get_conn()
        version = _read_data_version(conn)
        if version == self._data_version:
            return False
        self._data_version = version
        logger.info("Pantry changed outside this connection, refreshing")
        self.notify()
        return True

    def notify(self) -> None:
        """Push the current snapshot to every listener."""
        if not self._listeners:
            return
        snapshot = self._snapshot()
        for listener in list(self._listeners):
            self._deliver(listener, snapshot)

    def _snapshot(self) -> list[PantryItem]:
        try:
            return self.get_items()
        except sqlite3.Error:
            logger.exception("Error fetching pantry items")
            return []

    @staticmethod
    def _deliver(listener: Listener, snapshot: list[PantryItem]) -> None:
        try:
            listener(list(snapshot))
        except Exception:
            logger.exception("Pantry listener raised")

    def seed_demo_data(self) -> list[str]:
        """Insert the demo items and return their IDs."""
        ids: list[str] = []
        for demo in DEMO_ITEMS:
            ids.append(
                self.add(
                    PantryItem(
                        name=demo["name"],
                        category=demo["category"],
                        days_left=demo["days_left"],
                        notes=demo["notes"],
                        ai_analysis=normalize_analysis(demo["ai_analysis"]),
                    )
                )
            )
        logger.info("Demo data seeded: %d items", len(ids))
        return ids
