"""Data models for pantry items, freshness analyses and recipes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime

FRESHNESS_LEVELS: tuple[str, ...] = ("fresh", "ripe", "overripe", "spoiled")
DIFFICULTIES: tuple[str, ...] = ("Easy", "Medium", "Hard")
PRIORITIES: tuple[str, ...] = ("high", "medium", "low")

DEFAULT_CATEGORY = "Other"


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of a single freshness assessment."""

    freshness: str  # fresh | ripe | overripe | spoiled
    safe_to_consume: bool
    days_left: int  # >= 0
    confidence: int  # 0〜100
    recommendation: str
    food_type: str
    storage_tip: str
    details: str
    category: str = DEFAULT_CATEGORY

    def to_dict(self) -> dict:
        return asdict(self)

    def display(self) -> str:
        """Format the analysis for terminal display."""
        safety = "✓ Safe to eat" if self.safe_to_consume else "✗ Not safe to eat"
        lines = [
            f"🔍 {self.food_type} [{self.category}]",
            f"   Freshness:  {self.freshness.upper()} ({self.confidence}% confidence)",
            f"   Safety:     {safety}",
            f"   Shelf life: {self.days_left} day(s)",
            "",
            f"   {self.recommendation}",
        ]
        if self.storage_tip:
            lines.append(f"   Storage tip: {self.storage_tip}")
        if self.details:
            lines.append("")
            lines.append(f"   {self.details}")
        return "\n".join(lines)


@dataclass
class RecipeSuggestion:
    id: int
    name: str
    description: str
    cook_time: str
    difficulty: str  # Easy | Medium | Hard
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    priority: str = "medium"  # high | medium | low

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cookTime": self.cook_time,
            "difficulty": self.difficulty,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
            "priority": self.priority,
        }


@dataclass
class RecipeBatch:
    """One generation of recipe suggestions. Never persisted."""

    recipes: list[RecipeSuggestion] = field(default_factory=list)
    urgent_items_used: int = 0
    message: str = "Here are your personalized recipes!"

    @property
    def total(self) -> int:
        return len(self.recipes)

    def to_dict(self) -> dict:
        return {
            "recipes": [r.to_dict() for r in self.recipes],
            "total": self.total,
            "urgent_items_used": self.urgent_items_used,
            "message": self.message,
        }

    def display(self) -> str:
        """Format recipes for terminal display."""
        lines: list[str] = [f"👩‍🍳 {self.message}", ""]
        for recipe in self.recipes:
            badge = "USE URGENT ITEMS" if recipe.priority == "high" else "FRESH RECIPE"
            lines.append(f"{'─' * 50}")
            lines.append(f"🍽  {recipe.name}  [{badge}]")
            lines.append(f"   {recipe.description}")
            lines.append(f"   {recipe.cook_time} • {recipe.difficulty}")
            if recipe.ingredients:
                lines.append("")
                lines.append("   Ingredients:")
                for ing in recipe.ingredients:
                    lines.append(f"     - {ing}")
            if recipe.instructions:
                lines.append("")
                lines.append("   Steps:")
                for j, step in enumerate(recipe.instructions, 1):
                    lines.append(f"     {j}. {step}")
            lines.append("")
        return "\n".join(lines)


@dataclass
class PantryItem:
    """A tracked food item.

    ``id`` and ``added_date`` are assigned by the store. ``expiry_date`` is
    the source of truth; ``days_left`` is recomputed from it on every read.
    """

    name: str
    category: str = DEFAULT_CATEGORY
    days_left: int | None = None
    expiry_date: datetime | None = None
    added_date: datetime | None = None
    notes: str = ""
    ai_analysis: AnalysisResult | None = None
    image_ref: str | None = None
    id: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "days_left": self.days_left,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "added_date": self.added_date.isoformat() if self.added_date else None,
            "notes": self.notes,
            "ai_analysis": self.ai_analysis.to_dict() if self.ai_analysis else None,
            "image_ref": self.image_ref,
        }


@dataclass
class ModelInfo:
    name: str
    display_name: str = ""
