"""AI backend base class, image loading, and factory."""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from ..models import ModelInfo

if TYPE_CHECKING:
    from ..config import FreshB4Config

# A path, raw JPEG bytes, or an already loaded (data, mime_type) pair
ImageInput = Union[str, Path, bytes, tuple[bytes, str]]


def load_image(image: ImageInput) -> tuple[bytes, str]:
    """Return ``(data, mime_type)`` for an image path or raw JPEG bytes.

    Raises:
        OSError: If the path cannot be read.
    """
    if isinstance(image, tuple):
        return image
    if isinstance(image, bytes):
        return image, "image/jpeg"
    path = Path(image)
    media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    return path.read_bytes(), media_type


class AIBackend(ABC):
    """Abstract base for the generative model that analyses food and writes recipes.

    Backends return the model's raw text; normalisation happens elsewhere.
    """

    name: str = ""

    @property
    def configured(self) -> bool:
        """False when the backend cannot be called (e.g. no API key)."""
        return True

    @abstractmethod
    async def analyze_food(
        self, image: ImageInput, pantry_items: Sequence[Any] = ()
    ) -> str:
        """Assess the freshness of the food shown in ``image``."""
        ...

    @abstractmethod
    async def get_recipes(self, pantry_items: Sequence[Any]) -> str:
        """Suggest recipes that use up the given pantry items."""
        ...

    async def list_models(self) -> list[ModelInfo]:
        return []


def create_backend(config: FreshB4Config) -> AIBackend:
    """Create an AI backend based on configuration."""
    backend_name = config.ai.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiBackend

            return GeminiBackend(
                api_key=config.ai.gemini.api_key,
                model=config.ai.gemini.model,
            )
        case "claude":
            from .claude import ClaudeBackend

            return ClaudeBackend(
                api_key=config.ai.claude.api_key,
                model=config.ai.claude.model,
            )
        case "mock":
            from .mock import MockBackend

            return MockBackend()
        case _:
            raise ValueError(
                f"Unknown AI backend: {backend_name!r} "
                f"(choose from gemini / claude / mock)"
            )
