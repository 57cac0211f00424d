"""Shared fixtures: in-memory storage, a fake Gemini model and a wired app."""

from __future__ import annotations

import json
import types
from typing import Any, Callable, List

import pytest

from models.clothing_item import ClothingItem
from models.taxonomy import Category
from tools.geolocation import Coordinates, StaticGeolocator
from tools.kv_store import InMemoryKeyValueStore
from tools.weather_provider import CurrentConditions, MockWeatherProvider
from wardrobe_app.app import WardrobeApp
from wardrobe_app.config import WardrobeConfig

PIXEL_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="


class FakeModel:
    """Stands in for ``genai.GenerativeModel`` and records each request."""

    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.calls: List[dict] = []

    def generate_content(self, contents, generation_config=None, request_options=None):
        self.calls.append(
            {
                "contents": contents,
                "generation_config": generation_config,
                "request_options": request_options,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, (dict, list)):
            response = json.dumps(response)
        return types.SimpleNamespace(text=response)


def make_item(item_id: str, category: Category | str = Category.TOP, **overrides: Any) -> ClothingItem:
    fields = {
        "item_id": item_id,
        "image_url": PIXEL_DATA_URI,
        "category": category,
        "description": f"item {item_id}",
        "tags": ["casual", "cotton", "everyday"],
        "color": "blue",
        "seasons": ["spring", "autumn"],
        "created_at": 1_700_000_000_000,
    }
    fields.update(overrides)
    return ClothingItem(**fields)


@pytest.fixture()
def config() -> WardrobeConfig:
    return WardrobeConfig(api_key="test-key", storage_backend="memory", response_language="English")


@pytest.fixture()
def fake_model() -> FakeModel:
    return FakeModel([])


@pytest.fixture()
def model_factory(fake_model: FakeModel) -> Callable[[WardrobeConfig], FakeModel]:
    return lambda _config: fake_model


@pytest.fixture()
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def weather_provider() -> MockWeatherProvider:
    return MockWeatherProvider(CurrentConditions(temperature=7, weather_code=63))


@pytest.fixture()
def app(config, kv_store, model_factory, weather_provider) -> WardrobeApp:
    return WardrobeApp(
        config,
        kv_store=kv_store,
        model_factory=model_factory,
        weather_provider=weather_provider,
        geolocator=StaticGeolocator(Coordinates(55.7558, 37.6173)),
        configure_logs=False,
    )
