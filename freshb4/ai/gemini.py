"""Gemini API backend for freshness analysis and recipe generation."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from ..models import ModelInfo
from . import AIBackend, ImageInput, load_image
from .prompts import build_analysis_prompt, build_recipe_prompt


def _import_genai():
    try:
        import google.generativeai as genai
    except ImportError:
        raise ImportError(
            "google-generativeai SDK is required: pip install google-generativeai"
        ) from None
    return genai


class GeminiBackend(AIBackend):
    """Analyse food photos and write recipes with Google Gemini."""

    name = "gemini"

    def __init__(self, api_key: str = "", model: str = "gemini-2.5-flash") -> None:
        self._api_key = api_key
        self._model = model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _require_key(self) -> None:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

    async def analyze_food(
        self, image: ImageInput, pantry_items: Sequence[Any] = ()
    ) -> str:
        self._require_key()
        data, mime_type = load_image(image)
        parts: list = [
            {"mime_type": mime_type, "data": data},
            build_analysis_prompt(pantry_items),
        ]
        return await self._generate(parts)

    async def get_recipes(self, pantry_items: Sequence[Any]) -> str:
        self._require_key()
        return await self._generate(build_recipe_prompt(pantry_items))

    async def _generate(self, contents) -> str:
        genai = _import_genai()
        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)
        response = await model.generate_content_async(contents)
        return response.text

    async def list_models(self) -> list[ModelInfo]:
        self._require_key()
        genai = _import_genai()
        genai.configure(api_key=self._api_key)
        models = await asyncio.to_thread(lambda: list(genai.list_models()))
        return [
            ModelInfo(name=m.name, display_name=getattr(m, "display_name", "") or m.name)
            for m in models
        ]
