"""AI boundary: freshness analysis and recipes with a built-in fallback.

Whatever happens upstream (no API key, network or quota failure, an empty
or unparseable response), callers get a usable result. Failures are logged,
never raised.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Any

from .ai import AIBackend, ImageInput, load_image
from .ai.mock import mock_analysis, mock_recipes
from .ai.normalize import (
    normalize_analysis,
    normalize_recipes,
    parse_analysis_text,
    parse_recipes_text,
)
from .models import AnalysisResult, ModelInfo, PantryItem, RecipeBatch

logger = logging.getLogger(__name__)


class PantryAssistant:
    """Wraps an AIBackend and substitutes the built-in examples on failure."""

    def __init__(
        self,
        backend: AIBackend | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._backend = backend
        self._rng = rng

    @property
    def backend(self) -> AIBackend | None:
        return self._backend

    @property
    def live(self) -> bool:
        """True when requests actually go to a configured model."""
        return self._backend is not None and self._backend.configured

    def _fallback_analysis(self) -> AnalysisResult:
        return normalize_analysis(mock_analysis(self._rng))

    async def analyze_food(
        self, image: ImageInput, pantry_items: Sequence[Any] = ()
    ) -> AnalysisResult:
        """Assess the freshness of the food in ``image``.

        Raises:
            OSError: If the image cannot be read. Only upstream failures
                fall back to the built-in examples.
        """
        image = load_image(image)

        if not self.live:
            logger.info("AI backend not configured, using mock analysis")
            return self._fallback_analysis()

        try:
            text = await self._backend.analyze_food(image, pantry_items)
        except Exception:
            logger.exception("Food analysis failed, falling back to mock analysis")
            return self._fallback_analysis()

        if not text or not text.strip():
            logger.warning("Empty analysis response, falling back to mock analysis")
            return self._fallback_analysis()

        return parse_analysis_text(text)

    async def get_recipes(self, pantry_items: Sequence[Any]) -> RecipeBatch:
        """Generate recipes that prioritise soon-to-expire items."""
        if not self.live:
            logger.info("AI backend not configured, using mock recipes")
            return normalize_recipes(mock_recipes(pantry_items))

        try:
            text = await self._backend.get_recipes(pantry_items)
        except Exception:
            logger.exception("Recipe generation failed, falling back to mock recipes")
            return normalize_recipes(mock_recipes(pantry_items))

        batch = parse_recipes_text(text or "")
        if batch is None:
            logger.warning("Could not parse recipe response, falling back to mock recipes")
            return normalize_recipes(mock_recipes(pantry_items))
        return batch

    async def list_models(self) -> list[ModelInfo]:
        if not self.live:
            logger.info("AI backend not configured, cannot list models")
            return []
        try:
            return await self._backend.list_models()
        except Exception:
            logger.exception("Error listing models")
            return []


def item_from_analysis(
    analysis: AnalysisResult,
    *,
    image_ref: str | None = None,
    notes: str | None = None,
) -> PantryItem:
    """Build a pantry item from a scan, attaching the analysis snapshot."""
    return PantryItem(
        name=analysis.food_type or "Unknown Food",
        category=analysis.category,
        days_left=analysis.days_left,
        notes=analysis.recommendation if notes is None else notes,
        ai_analysis=analysis,
        image_ref=image_ref,
    )
