"""SQLite storage for pantry items."""

from .pantry import DEMO_ITEMS, ItemNotFoundError, PantryDB
from .schema import ensure_schema

__all__ = [
    "PantryDB",
    "ItemNotFoundError",
    "DEMO_ITEMS",
    "ensure_schema",
]
