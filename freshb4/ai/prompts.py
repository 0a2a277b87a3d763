"""Prompts sent to the generative model."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..summary import RECIPE_URGENCY_DAYS, days_left_of

ANALYSIS_PROMPT = """\
You are an expert food safety and freshness analyst. Analyze this food image and provide a detailed assessment.

Please respond with a JSON object containing:
{
  "freshness": "fresh" | "ripe" | "overripe" | "spoiled",
  "safe_to_consume": boolean,
  "days_left": number (estimated days until spoilage, 0 if already spoiled),
  "confidence": number (0-100, your confidence in this assessment),
  "recommendation": "detailed recommendation text",
  "food_type": "specific food item identified",
  "category": "Fruits" | "Vegetables" | "Meat" | "Dairy" | "Bakery" | "Other",
  "storage_tip": "optimal storage advice",
  "details": "detailed analysis of what you observed"
}

Focus on:
- Visual signs of spoilage (mold, discoloration, bruising, wilting)
- Texture changes that indicate freshness level
- Safety considerations for consumption
- Specific storage recommendations
- Realistic shelf life estimates

Be conservative with safety - when in doubt, err on the side of caution.
"""

_RECIPE_PROMPT = """\
You are a creative chef and nutritionist. Generate 3 recipes using the available ingredients, prioritizing items that expire soon.

Available ingredients: {ingredients}

Urgent items (expire in ≤{urgency_days} days): {urgent}

Please respond with a JSON object:
{{
  "recipes": [
    {{
      "id": number,
      "name": "recipe name",
      "description": "brief description",
      "cookTime": "15 minutes",
      "difficulty": "Easy" | "Medium" | "Hard",
      "ingredients": ["ingredient1", "ingredient2"],
      "instructions": ["step 1", "step 2", "step 3"],
      "priority": "high" | "medium" | "low"
    }}
  ],
  "total": number,
  "urgent_items_used": number,
  "message": "helpful message about ingredient usage"
}}

Guidelines:
- Prioritize urgent items (set priority to "high" if using urgent ingredients)
- Create diverse recipes (different cooking methods, meal types)
- Keep instructions clear and concise
- Use realistic cooking times
- Only include ingredients from the available list
- Make recipes practical and achievable
"""


def _field(item: Any, key: str, default: str = "") -> str:
    if isinstance(item, dict):
        return str(item.get(key) or default)
    return str(getattr(item, key, None) or default)


def describe_item(item: Any) -> str:
    return (
        f"{_field(item, 'name')} ({_field(item, 'category', 'Other')}, "
        f"expires in {days_left_of(item)} days)"
    )


def build_analysis_prompt(pantry_items: Sequence[Any] = ()) -> str:
    if not pantry_items:
        return ANALYSIS_PROMPT
    names = ", ".join(_field(i, "name") for i in pantry_items)
    return f"{ANALYSIS_PROMPT}\nItems already in the user's pantry: {names}\n"


def build_recipe_prompt(pantry_items: Sequence[Any]) -> str:
    urgent = [i for i in pantry_items if days_left_of(i) <= RECIPE_URGENCY_DAYS]
    return _RECIPE_PROMPT.format(
        ingredients=", ".join(describe_item(i) for i in pantry_items),
        urgency_days=RECIPE_URGENCY_DAYS,
        urgent=", ".join(_field(i, "name") for i in urgent),
    )
