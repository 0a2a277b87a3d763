"""Built-in example results, used when the real model is unavailable."""

from __future__ import annotations

import json
import random
from collections.abc import Sequence
from typing import Any

from ..models import ModelInfo
from ..summary import split_by_urgency
from . import AIBackend, ImageInput

_FRUIT_WORDS = ("banana", "berry", "fruit")

MOCK_ANALYSES: tuple[dict, ...] = (
    {
        "freshness": "fresh",
        "safe_to_consume": True,
        "days_left": 5,
        "confidence": 92,
        "recommendation": (
            "This item looks fresh and safe to eat. Store in a cool, dry place."
        ),
        "food_type": "Apple",
        "category": "Fruits",
        "storage_tip": "Keep refrigerated for longer freshness",
        "details": (
            "The apple appears to be in excellent condition with no visible "
            "signs of browning or soft spots. The skin looks vibrant and the "
            "texture appears firm."
        ),
    },
    {
        "freshness": "ripe",
        "safe_to_consume": True,
        "days_left": 2,
        "confidence": 88,
        "recommendation": "Perfect for eating now! This item is at peak ripeness.",
        "food_type": "Banana",
        "category": "Fruits",
        "storage_tip": "Eat within 2 days or use for baking",
        "details": (
            "The banana shows optimal yellow coloring with minimal brown "
            "spots, indicating perfect ripeness for consumption."
        ),
    },
    {
        "freshness": "overripe",
        "safe_to_consume": True,
        "days_left": 1,
        "confidence": 85,
        "recommendation": (
            "Use soon for cooking or baking. Still safe but past prime eating "
            "quality."
        ),
        "food_type": "Tomato",
        "category": "Vegetables",
        "storage_tip": "Use immediately for sauces or cooking",
        "details": (
            "The tomato shows some soft spots and deeper color, indicating it "
            "should be used quickly in cooked dishes."
        ),
    },
    {
        "freshness": "spoiled",
        "safe_to_consume": False,
        "days_left": 0,
        "confidence": 95,
        "recommendation": (
            "DISCARD IMMEDIATELY - This item shows clear signs of spoilage and "
            "is unsafe to consume."
        ),
        "food_type": "Bread",
        "category": "Bakery",
        "storage_tip": "Dispose of safely",
        "details": (
            "Visible mold growth detected. This item poses health risks and "
            "should not be consumed."
        ),
    },
)


def _name(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("name") or "")
    return str(getattr(item, "name", "") or "")


def mock_analysis(rng: random.Random | None = None) -> dict:
    """Pick one of the example analyses at random."""
    return dict((rng or random).choice(MOCK_ANALYSES))


def mock_recipes(pantry_items: Sequence[Any] = ()) -> dict:
    """Build the example recipe response from the current pantry."""
    urgent, fresh = split_by_urgency(pantry_items)
    fruits = [
        _name(i) for i in pantry_items
        if any(w in _name(i).lower() for w in _FRUIT_WORDS)
    ]

    recipes = [
        {
            "id": 1,
            "name": "Quick Veggie Stir Fry",
            "description": (
                "A fast and healthy way to use up vegetables before they spoil"
            ),
            "cookTime": "15 minutes",
            "difficulty": "Easy",
            "ingredients": [_name(i) for i in urgent[:3]],
            "instructions": [
                "Heat oil in a large pan or wok",
                "Add vegetables starting with the firmest ones",
                "Stir fry for 5-7 minutes until tender-crisp",
                "Season with soy sauce, garlic, and ginger",
                "Serve over rice or noodles",
            ],
            "priority": "high",
        },
        {
            "id": 2,
            "name": "Fresh Garden Salad",
            "description": (
                "Light and refreshing salad perfect for peak-freshness ingredients"
            ),
            "cookTime": "10 minutes",
            "difficulty": "Easy",
            "ingredients": [_name(i) for i in fresh[:4]],
            "instructions": [
                "Wash and chop all vegetables",
                "Combine in a large bowl",
                "Add your favorite dressing",
                "Toss gently and serve immediately",
            ],
            "priority": "medium",
        },
        {
            "id": 3,
            "name": "Smoothie Bowl",
            "description": "Perfect way to use overripe fruits",
            "cookTime": "5 minutes",
            "difficulty": "Easy",
            "ingredients": fruits,
            "instructions": [
                "Blend fruits with a splash of milk or yogurt",
                "Pour into a bowl",
                "Top with nuts, seeds, or granola",
                "Enjoy immediately",
            ],
            "priority": "high",
        },
    ]

    if urgent:
        message = f"Found {len(urgent)} items that need to be used soon!"
    else:
        message = "All your ingredients are fresh!"

    return {
        "recipes": recipes,
        "total": len(recipes),
        "urgent_items_used": len(urgent),
        "message": message,
    }


class MockBackend(AIBackend):
    """Serves the built-in examples as if they came from a model."""

    name = "mock"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng

    async def analyze_food(
        self, image: ImageInput, pantry_items: Sequence[Any] = ()
    ) -> str:
        return json.dumps(mock_analysis(self._rng), ensure_ascii=False)

    async def get_recipes(self, pantry_items: Sequence[Any]) -> str:
        return json.dumps(mock_recipes(pantry_items), ensure_ascii=False)

    async def list_models(self) -> list[ModelInfo]:
        return [ModelInfo(name="mock", display_name="Built-in examples")]
