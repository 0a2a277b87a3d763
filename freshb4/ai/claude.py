"""Claude API backend for freshness analysis and recipe generation."""

from __future__ import annotations

import base64
from collections.abc import Sequence
from typing import Any

from ..models import ModelInfo
from . import AIBackend, ImageInput, load_image
from .prompts import build_analysis_prompt, build_recipe_prompt


class ClaudeBackend(AIBackend):
    """Analyse food photos and write recipes with Claude."""

    name = "claude"

    def __init__(
        self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929"
    ) -> None:
        self._api_key = api_key
        self._model = model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self):
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        return anthropic.AsyncAnthropic(api_key=self._api_key)

    async def analyze_food(
        self, image: ImageInput, pantry_items: Sequence[Any] = ()
    ) -> str:
        client = self._client()
        data, media_type = load_image(image)
        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": build_analysis_prompt(pantry_items)},
        ]
        return await self._create(client, content)

    async def get_recipes(self, pantry_items: Sequence[Any]) -> str:
        client = self._client()
        content = [{"type": "text", "text": build_recipe_prompt(pantry_items)}]
        return await self._create(client, content)

    async def _create(self, client, content: list[dict]) -> str:
        response = await client.messages.create(
            model=self._model,
            max_tokens=4096,
            messages=[{"role": "user", "content": content}],
        )
        return response.content[0].text

    async def list_models(self) -> list[ModelInfo]:
        client = self._client()
        page = await client.models.list()
        return [
            ModelInfo(name=m.id, display_name=getattr(m, "display_name", "") or m.id)
            for m in page.data
        ]
