"""Tests for PantryAssistant fallbacks and the built-in mock results."""

import json
import random

import pytest

from freshb4.ai import AIBackend
from freshb4.ai.gemini import GeminiBackend
from freshb4.ai.mock import MOCK_ANALYSES, MockBackend, mock_recipes
from freshb4.assistant import PantryAssistant, item_from_analysis
from freshb4.models import AnalysisResult, PantryItem

MOCK_FOODS = {a["food_type"] for a in MOCK_ANALYSES}


class StubBackend(AIBackend):
    """Returns canned text, or raises ``error`` when set."""

    name = "stub"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    async def analyze_food(self, image, pantry_items=()):
        self.calls += 1
        if self.error:
            raise self.error
        return self.text

    async def get_recipes(self, pantry_items):
        self.calls += 1
        if self.error:
            raise self.error
        return self.text

    async def list_models(self):
        if self.error:
            raise self.error
        return []


@pytest.fixture
def pantry():
    return [
        PantryItem(name="Bananas", category="Fruits", days_left=1),
        PantryItem(name="Bread", category="Bakery", days_left=5),
    ]


class TestMockRecipes:
    def test_uses_urgent_and_fresh_items(self, pantry):
        data = mock_recipes(pantry)
        stir_fry, salad, smoothie = data["recipes"]
        assert stir_fry["ingredients"] == ["Bananas"]
        assert stir_fry["priority"] == "high"
        assert salad["ingredients"] == ["Bread"]
        assert smoothie["ingredients"] == ["Bananas"]
        assert data["urgent_items_used"] == 1
        assert data["message"] == "Found 1 items that need to be used soon!"

    def test_empty_pantry(self):
        data = mock_recipes([])
        assert data["total"] == 3
        assert data["urgent_items_used"] == 0
        assert data["message"] == "All your ingredients are fresh!"

    def test_ingredient_caps(self):
        items = [PantryItem(name=f"u{i}", days_left=0) for i in range(5)]
        items += [PantryItem(name=f"f{i}", days_left=9) for i in range(6)]
        stir_fry, salad, _ = mock_recipes(items)["recipes"]
        assert len(stir_fry["ingredients"]) == 3
        assert len(salad["ingredients"]) == 4


class TestAnalyzeFood:
    @pytest.mark.asyncio
    async def test_no_backend_uses_mock(self):
        assistant = PantryAssistant()
        assert assistant.live is False
        result = await assistant.analyze_food(b"jpeg")
        assert isinstance(result, AnalysisResult)
        assert result.food_type in MOCK_FOODS

    @pytest.mark.asyncio
    async def test_missing_image_raises(self, tmp_path):
        backend = StubBackend(text="{}")
        with pytest.raises(FileNotFoundError):
            await PantryAssistant(backend).analyze_food(tmp_path / "typo.jpg")
        assert backend.calls == 0

    @pytest.mark.asyncio
    async def test_missing_image_raises_without_backend(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await PantryAssistant().analyze_food(tmp_path / "typo.jpg")

    @pytest.mark.asyncio
    async def test_unconfigured_backend_is_not_called(self):
        assistant = PantryAssistant(GeminiBackend(api_key=""))
        assert assistant.live is False
        result = await assistant.analyze_food(b"jpeg")
        assert result.food_type in MOCK_FOODS

    @pytest.mark.asyncio
    async def test_backend_error_uses_mock(self, caplog):
        backend = StubBackend(error=RuntimeError("quota exceeded"))
        result = await PantryAssistant(backend).analyze_food(b"jpeg")
        assert backend.calls == 1
        assert result.food_type in MOCK_FOODS
        assert "falling back to mock analysis" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_response_uses_mock(self):
        result = await PantryAssistant(StubBackend(text="  ")).analyze_food(b"jpeg")
        assert result.food_type in MOCK_FOODS

    @pytest.mark.asyncio
    async def test_json_response_is_normalized(self):
        text = json.dumps({"freshness": "Overripe", "food_type": "Pear", "confidence": 300})
        result = await PantryAssistant(StubBackend(text=text)).analyze_food(b"jpeg")
        assert result.food_type == "Pear"
        assert result.freshness == "overripe"
        assert result.confidence == 100

    @pytest.mark.asyncio
    async def test_seeded_rng_is_deterministic(self):
        a = await PantryAssistant(rng=random.Random(3)).analyze_food(b"x")
        b = await PantryAssistant(rng=random.Random(3)).analyze_food(b"x")
        assert a == b

    @pytest.mark.asyncio
    async def test_mock_backend(self):
        assistant = PantryAssistant(MockBackend())
        assert assistant.live is True
        result = await assistant.analyze_food(b"jpeg")
        assert result.food_type in MOCK_FOODS
        assert result.category != "Other"


class TestGetRecipes:
    @pytest.mark.asyncio
    async def test_no_backend_uses_mock(self, pantry):
        batch = await PantryAssistant().get_recipes(pantry)
        assert batch.total == 3
        assert batch.urgent_items_used == 1

    @pytest.mark.asyncio
    async def test_backend_error_uses_mock(self, pantry):
        backend = StubBackend(error=ConnectionError("offline"))
        batch = await PantryAssistant(backend).get_recipes(pantry)
        assert [r.name for r in batch.recipes][0] == "Quick Veggie Stir Fry"

    @pytest.mark.asyncio
    async def test_unparseable_response_uses_mock(self, pantry, caplog):
        backend = StubBackend(text="Sorry, I can't help with that.")
        batch = await PantryAssistant(backend).get_recipes(pantry)
        assert batch.total == 3
        assert "Could not parse recipe response" in caplog.text

    @pytest.mark.asyncio
    async def test_parsed_response(self, pantry):
        text = json.dumps(
            {
                "recipes": [{"id": 1, "name": "Banana Bread", "priority": "high"}],
                "urgent_items_used": 1,
                "message": "Bake!",
            }
        )
        batch = await PantryAssistant(StubBackend(text=text)).get_recipes(pantry)
        assert batch.total == 1
        assert batch.recipes[0].name == "Banana Bread"
        assert batch.message == "Bake!"

    @pytest.mark.asyncio
    async def test_mock_backend_round_trip(self, pantry):
        batch = await PantryAssistant(MockBackend()).get_recipes(pantry)
        assert batch.to_dict() == {**mock_recipes(pantry), "total": 3}


class TestListModels:
    @pytest.mark.asyncio
    async def test_not_live(self):
        assert await PantryAssistant().list_models() == []

    @pytest.mark.asyncio
    async def test_error(self):
        backend = StubBackend(error=RuntimeError("boom"))
        assert await PantryAssistant(backend).list_models() == []

    @pytest.mark.asyncio
    async def test_mock_backend(self):
        models = await PantryAssistant(MockBackend()).list_models()
        assert [m.name for m in models] == ["mock"]


class TestItemFromAnalysis:
    def _analysis(self, **overrides):
        data = {
            "freshness": "ripe",
            "safe_to_consume": True,
            "days_left": 2,
            "confidence": 88,
            "recommendation": "Eat soon",
            "food_type": "Banana",
            "storage_tip": "Counter",
            "details": "Yellow",
            "category": "Fruits",
        }
        data.update(overrides)
        return AnalysisResult(**data)

    def test_fields(self):
        analysis = self._analysis()
        item = item_from_analysis(analysis, image_ref="/tmp/scan.jpg")
        assert item.name == "Banana"
        assert item.category == "Fruits"
        assert item.days_left == 2
        assert item.notes == "Eat soon"
        assert item.ai_analysis is analysis
        assert item.image_ref == "/tmp/scan.jpg"
        assert item.id is None

    def test_notes_override(self):
        item = item_from_analysis(self._analysis(), notes="")
        assert item.notes == ""

    def test_blank_food_type(self):
        item = item_from_analysis(self._analysis(food_type=""))
        assert item.name == "Unknown Food"
