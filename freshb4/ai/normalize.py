"""Normalization of loosely-typed model output into strict results.

Every ``normalize_*`` function is total: whatever it is handed, it returns a
fully populated result, substituting fallbacks for missing or invalid fields.

Raw model text goes through an ordered tuple of parser strategies. Each
strategy returns a mapping on success or ``None`` to pass to the next one.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ..models import (
    DEFAULT_CATEGORY,
    DIFFICULTIES,
    FRESHNESS_LEVELS,
    PRIORITIES,
    AnalysisResult,
    RecipeBatch,
    RecipeSuggestion,
)

ParseStrategy = Callable[[str], "dict | None"]

DEFAULT_CONFIDENCE = 85

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")
_DAYS = re.compile(r"(\d+)\s*days?", re.IGNORECASE)
_PERCENT = re.compile(r"(\d+)%")

# Checked in order, first hit wins
_FRESHNESS_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("spoiled", ("spoiled", "moldy")),
    ("overripe", ("overripe", "past prime")),
    ("ripe", ("ripe", "peak")),
)
_UNSAFE_KEYWORDS = ("not safe", "discard", "spoiled")
_DEFAULT_DAYS_BY_FRESHNESS = {"spoiled": 0, "overripe": 1, "ripe": 3, "fresh": 5}


def parse_int(value: Any, default: int) -> int:
    """Read a leading integer, the way lenient JSON consumers do.

    ``"3 days"`` reads as 3 and ``4.9`` as 4. Booleans, empty strings and
    anything without a leading integer give ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if m:
            return int(m.group(1))
    return default


def _text(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else fallback


def _choice(value: Any, allowed: Sequence[str], fallback: str) -> str:
    return value if isinstance(value, str) and value in allowed else fallback


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v if isinstance(v, str) else str(v) for v in value if v is not None]


def normalize_analysis(raw: Any) -> AnalysisResult:
    """Coerce an untyped freshness analysis into an AnalysisResult."""
    data: Mapping = raw if isinstance(raw, Mapping) else {}

    freshness = data.get("freshness")
    if isinstance(freshness, str):
        freshness = freshness.strip().lower()

    return AnalysisResult(
        freshness=_choice(freshness, FRESHNESS_LEVELS, "fresh"),
        safe_to_consume=_as_bool(data.get("safe_to_consume")),
        days_left=max(0, parse_int(data.get("days_left"), 0)),
        confidence=min(
            100, max(0, parse_int(data.get("confidence"), DEFAULT_CONFIDENCE))
        ),
        recommendation=_text(
            data.get("recommendation"), "No recommendation available"
        ),
        food_type=_text(data.get("food_type"), "Unknown Food Item"),
        storage_tip=_text(data.get("storage_tip"), "Store in appropriate conditions"),
        details=_text(data.get("details"), "No detailed analysis available"),
        category=_text(data.get("category"), DEFAULT_CATEGORY),
    )


def normalize_recipe(raw: Any, index: int) -> RecipeSuggestion:
    """Coerce one untyped recipe. ``index`` is 1-based."""
    data: Mapping = raw if isinstance(raw, Mapping) else {}

    recipe_id = parse_int(data.get("id"), 0)
    if recipe_id <= 0:
        recipe_id = index

    return RecipeSuggestion(
        id=recipe_id,
        name=_text(data.get("name"), f"Recipe {index}"),
        description=_text(data.get("description"), "Delicious recipe"),
        cook_time=_text(data.get("cookTime"), "30 minutes"),
        difficulty=_choice(data.get("difficulty"), DIFFICULTIES, "Medium"),
        ingredients=_str_list(data.get("ingredients")),
        instructions=_str_list(data.get("instructions")),
        priority=_choice(data.get("priority"), PRIORITIES, "medium"),
    )


def normalize_recipes(raw: Any) -> RecipeBatch:
    """Coerce an untyped recipe response into a RecipeBatch.

    Accepts the ``{"recipes": [...], ...}`` envelope or a bare list.
    """
    if isinstance(raw, list):
        raw = {"recipes": raw}
    data: Mapping = raw if isinstance(raw, Mapping) else {}

    entries = data.get("recipes")
    if not isinstance(entries, list):
        entries = []

    return RecipeBatch(
        recipes=[normalize_recipe(r, i) for i, r in enumerate(entries, 1)],
        urgent_items_used=max(0, parse_int(data.get("urgent_items_used"), 0)),
        message=_text(data.get("message"), "Here are your personalized recipes!"),
    )


# ── Parser strategies ───────────────────────────────────────────────


def _structured(value: Any) -> dict | None:
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return {"recipes": value}
    return None


def parse_json(text: str) -> dict | None:
    """The whole response is JSON."""
    try:
        return _structured(json.loads(text))
    except (json.JSONDecodeError, TypeError):
        return None


def parse_fenced_json(text: str) -> dict | None:
    """JSON wrapped in a markdown code fence somewhere in the response."""
    for m in _FENCED_JSON.finditer(text):
        try:
            result = _structured(json.loads(m.group(1)))
        except json.JSONDecodeError:
            continue
        if result is not None:
            return result
    return None


def extract_freshness(text: str) -> str:
    lower = text.lower()
    for level, keywords in _FRESHNESS_KEYWORDS:
        if any(k in lower for k in keywords):
            return level
    return "fresh"


def extract_days_left(text: str, freshness: str) -> int:
    m = _DAYS.search(text)
    if m:
        return int(m.group(1))
    return _DEFAULT_DAYS_BY_FRESHNESS.get(freshness, 5)


def extract_confidence(text: str) -> int:
    m = _PERCENT.search(text)
    if m:
        return int(m.group(1))
    return DEFAULT_CONFIDENCE


def extract_analysis_fields(text: str) -> dict:
    """Best-effort keyword reading of a free-text analysis. Always succeeds."""
    freshness = extract_freshness(text)
    lower = text.lower()
    return {
        "freshness": freshness,
        "safe_to_consume": not any(k in lower for k in _UNSAFE_KEYWORDS),
        "days_left": extract_days_left(text, freshness),
        "confidence": extract_confidence(text),
        "recommendation": text[:200] + "...",
        "food_type": "Unknown Food Item",
        "storage_tip": "Store in appropriate conditions",
        "details": text,
    }


ANALYSIS_PARSERS: tuple[ParseStrategy, ...] = (
    parse_json,
    parse_fenced_json,
    extract_analysis_fields,
)

RECIPE_PARSERS: tuple[ParseStrategy, ...] = (
    parse_json,
    parse_fenced_json,
)


def run_parsers(text: str, parsers: Sequence[ParseStrategy]) -> dict | None:
    """Return the result of the first strategy that succeeds."""
    for parser in parsers:
        result = parser(text)
        if result is not None:
            return result
    return None


def parse_analysis_text(text: str) -> AnalysisResult:
    return normalize_analysis(run_parsers(text or "", ANALYSIS_PARSERS))


def parse_recipes_text(text: str) -> RecipeBatch | None:
    """Parse a recipe response, or ``None`` if it holds no structured data."""
    data = run_parsers(text or "", RECIPE_PARSERS)
    if data is None:
        return None
    return normalize_recipes(data)
