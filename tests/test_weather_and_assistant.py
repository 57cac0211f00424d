"""Weather acquisition, code mapping and the outfit assistant view."""

from __future__ import annotations

from typing import Dict

import pytest
import requests

from conftest import FakeModel, make_item
from logic.recommendation import composition_warnings
from logic.weather_codes import describe_weather_code
from models.taxonomy import Category
from models.weather import WeatherState, coerce_temperature
from tools.geolocation import (
    Coordinates,
    DisabledGeolocator,
    GeolocationDeniedError,
    GeolocationUnavailableError,
    IPGeolocator,
    StaticGeolocator,
    build_geolocator,
    parse_coordinates,
)
from tools.weather_provider import (
    CurrentConditions,
    MockWeatherProvider,
    OpenMeteoProvider,
    WeatherLookupError,
)
from wardrobe_app.app import View, WardrobeApp


class FakeResponse:
    def __init__(self, payload: object, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> object:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@pytest.mark.parametrize(
    "code, label",
    [
        (0, "clear"),
        (1, "cloudy"),
        (2, "cloudy"),
        (3, "cloudy"),
        (45, "fog"),
        (48, "fog"),
        (53, "drizzle"),
        (63, "rain"),
        (75, "snow"),
        (81, "showers"),
        (95, "storm"),
        (96, "storm"),
        (99, "storm"),
        (40, "overcast"),
        (56, "overcast"),
        (85, "overcast"),
    ],
)
def test_weather_code_mapping(code: int, label: str) -> None:
    assert describe_weather_code(code) == label


def test_open_meteo_provider_parses_and_rounds(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: Dict[str, object] = {}

    def fake_get(url: str, params=None, timeout: float = 10.0):
        calls.update({"url": url, "params": params, "timeout": timeout})
        return FakeResponse({"current": {"temperature_2m": 12.5, "weather_code": 61}})

    monkeypatch.setattr("tools.weather_provider.requests.get", fake_get)
    conditions = OpenMeteoProvider(timeout_seconds=3).current_conditions(59.91, 10.75)

    assert conditions.temperature == 13
    assert conditions.condition == "rain"
    assert calls["params"]["current"] == "temperature_2m,weather_code"
    assert calls["params"]["latitude"] == 59.91
    assert calls["timeout"] == 3


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({}, status_code=500),
        FakeResponse({"hourly": {}}),
        FakeResponse(ValueError("not json")),
    ],
)
def test_open_meteo_provider_failures(monkeypatch: pytest.MonkeyPatch, response: FakeResponse) -> None:
    monkeypatch.setattr("tools.weather_provider.requests.get", lambda *args, **kwargs: response)
    with pytest.raises(WeatherLookupError):
        OpenMeteoProvider().current_conditions(0.0, 0.0)


def test_open_meteo_provider_network_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr("tools.weather_provider.requests.get", boom)
    with pytest.raises(WeatherLookupError):
        OpenMeteoProvider().current_conditions(0.0, 0.0)


def test_ip_geolocator_success_and_refusal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "tools.geolocation.requests.get",
        lambda *args, **kwargs: FakeResponse({"status": "success", "lat": 52.52, "lon": 13.405}),
    )
    assert IPGeolocator().locate() == Coordinates(52.52, 13.405)

    monkeypatch.setattr(
        "tools.geolocation.requests.get",
        lambda *args, **kwargs: FakeResponse({"status": "fail", "message": "private range"}),
    )
    with pytest.raises(GeolocationDeniedError):
        IPGeolocator().locate()


def test_ip_geolocator_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr("tools.geolocation.requests.get", boom)
    with pytest.raises(GeolocationUnavailableError):
        IPGeolocator().locate()


def test_build_geolocator_from_setting() -> None:
    assert build_geolocator(None) is None
    assert build_geolocator("  ") is None
    assert isinstance(build_geolocator("ip"), IPGeolocator)
    assert isinstance(build_geolocator("off"), DisabledGeolocator)
    static = build_geolocator("48.85, 2.35")
    assert isinstance(static, StaticGeolocator)
    assert static.locate() == Coordinates(48.85, 2.35)

    with pytest.raises(ValueError):
        parse_coordinates("100,0")


def test_coordinates_label_uses_two_decimals() -> None:
    assert Coordinates(55.7558, 37.6173).label() == "Coords: 55.76, 37.62"


def test_coerce_temperature() -> None:
    assert coerce_temperature("21") == 21
    assert coerce_temperature(-0.5) == 0
    assert coerce_temperature(2.5) == 3
    for bad in ("warm", None, True):
        with pytest.raises(ValueError):
            coerce_temperature(bad)


def test_assistant_starts_with_default_weather(app: WardrobeApp) -> None:
    assert app.assistant.weather == WeatherState("Moscow", 15, "cloudy")


def test_manual_weather_edit_replaces_state(app: WardrobeApp) -> None:
    before = app.assistant.weather
    result = app.assistant.update_weather(location="Paris", temperature="22", condition="clear")

    assert result["status"] == "ok"
    assert app.assistant.weather == WeatherState("Paris", 22, "clear")
    assert before == WeatherState("Moscow", 15, "cloudy")

    bad = app.assistant.update_weather(temperature="hot")
    assert bad["kind"] == "invalid_input"
    assert app.assistant.weather == WeatherState("Paris", 22, "clear")


def test_locate_overwrites_weather(app: WardrobeApp, weather_provider: MockWeatherProvider) -> None:
    result = app.assistant.locate()

    assert result["status"] == "ok"
    assert app.assistant.weather == WeatherState("Coords: 55.76, 37.62", 7, "rain")
    assert weather_provider.calls == [(55.7558, 37.6173)]


@pytest.mark.parametrize(
    "geolocator, provider, kind",
    [
        (None, MockWeatherProvider(), "capability"),
        (DisabledGeolocator(), MockWeatherProvider(), "permission"),
        (
            StaticGeolocator(Coordinates(1.0, 2.0)),
            MockWeatherProvider(error=WeatherLookupError("down")),
            "transport",
        ),
    ],
)
def test_locate_failures_leave_weather_untouched(config, kv_store, model_factory, geolocator, provider, kind) -> None:
    app = WardrobeApp(
        config,
        kv_store=kv_store,
        model_factory=model_factory,
        weather_provider=provider,
        geolocator=geolocator,
        configure_logs=False,
    )
    before = app.assistant.weather

    result = app.assistant.locate()

    assert result["status"] == "error"
    assert result["kind"] == kind
    assert app.assistant.weather == before


def test_failure_messages_are_distinct(config, kv_store, model_factory) -> None:
    messages = set()
    for geolocator, provider in [
        (None, MockWeatherProvider()),
        (DisabledGeolocator(), MockWeatherProvider()),
        (StaticGeolocator(Coordinates(1.0, 2.0)), MockWeatherProvider(error=WeatherLookupError("x"))),
    ]:
        app = WardrobeApp(
            config,
            kv_store=kv_store,
            model_factory=model_factory,
            weather_provider=provider,
            geolocator=geolocator,
            configure_logs=False,
        )
        messages.add(app.assistant.locate()["message"])
    assert len(messages) == 3


def test_recommend_requires_items(app: WardrobeApp, fake_model: FakeModel) -> None:
    result = app.assistant.recommend()

    assert result["kind"] == "precondition"
    assert fake_model.calls == []


def test_recommend_resolves_ids_and_drops_unknown(app: WardrobeApp, fake_model: FakeModel) -> None:
    coat = app.state.add(make_item("coat", Category.OUTERWEAR))
    jeans = app.state.add(make_item("jeans", Category.BOTTOM))
    shirt = app.state.add(make_item("shirt", Category.TOP))
    fake_model.responses.append(
        {"recommendedItemsIds": ["shirt", "ghost", "jeans", "coat"], "reasoning": "Layer up."}
    )

    result = app.assistant.recommend()

    assert result["status"] == "ok"
    recommendation = app.assistant.recommendation
    assert recommendation is not None
    assert recommendation.items == [shirt, jeans, coat]
    assert recommendation.reasoning == "Layer up."
    assert recommendation.warnings == []


def test_recommend_with_no_resolvable_ids_is_valid(app: WardrobeApp, fake_model: FakeModel) -> None:
    app.state.add(make_item("shirt", Category.TOP))
    fake_model.responses.append({"recommendedItemsIds": ["ghost"], "reasoning": "Hmm."})

    result = app.assistant.recommend()

    assert result["status"] == "ok"
    assert result["recommendation"]["items"] == []
    assert "The suggestion has no top." in result["recommendation"]["warnings"]


def test_recommend_transport_failure_offers_retry(app: WardrobeApp, fake_model: FakeModel) -> None:
    app.state.add(make_item("shirt"))
    fake_model.responses.append(ConnectionError("offline"))

    result = app.assistant.recommend()

    assert result["kind"] == "transport"
    assert result["retry"] is True
    assert app.assistant.recommendation is None


def test_recommend_without_credential(config, kv_store, fake_model) -> None:
    config.api_key = None
    app = WardrobeApp(config, kv_store=kv_store, model_factory=lambda _c: fake_model, configure_logs=False)
    app.state.add(make_item("shirt"))

    assert app.assistant.recommend()["kind"] == "configuration"


def test_leaving_assistant_discards_recommendation(app: WardrobeApp, fake_model: FakeModel) -> None:
    app.state.add(make_item("shirt"))
    fake_model.responses.append({"recommendedItemsIds": ["shirt"], "reasoning": "ok"})
    app.navigate(View.ASSISTANT)
    app.assistant.recommend()
    assert app.assistant.recommendation is not None

    app.navigate("matcher")

    assert app.current_view is View.MATCHER
    assert app.assistant.recommendation is None


def test_late_results_are_dropped(app: WardrobeApp, fake_model: FakeModel) -> None:
    app.state.add(make_item("shirt"))
    fake_model.responses.append({"recommendedItemsIds": ["shirt"], "reasoning": "late"})

    original = app.gateway.suggest_outfit

    def navigate_away_mid_request(items, weather):
        app.assistant.reset()
        return original(items, weather)

    app.gateway.suggest_outfit = navigate_away_mid_request  # type: ignore[method-assign]
    result = app.assistant.recommend()

    assert result["status"] == "stale"
    assert app.assistant.recommendation is None


def test_manual_edit_during_locate_wins(config, kv_store, model_factory) -> None:
    class SlowGeolocator(StaticGeolocator):
        def locate(self) -> Coordinates:
            app.assistant.update_weather(location="Paris", temperature=20, condition="clear")
            return super().locate()

    app = WardrobeApp(
        config,
        kv_store=kv_store,
        model_factory=model_factory,
        weather_provider=MockWeatherProvider(CurrentConditions(temperature=7, weather_code=63)),
        geolocator=SlowGeolocator(Coordinates(1.0, 2.0)),
        configure_logs=False,
    )

    result = app.assistant.locate()

    assert result["status"] == "stale"
    assert app.assistant.weather == WeatherState("Paris", 20, "clear")


def test_locate_with_explicit_geolocator(app: WardrobeApp, weather_provider: MockWeatherProvider) -> None:
    result = app.assistant.locate(StaticGeolocator(Coordinates(48.85, 2.35)))

    assert result["weather"]["location"] == "Coords: 48.85, 2.35"
    assert weather_provider.calls == [(48.85, 2.35)]


def test_composition_warnings_for_cold_weather() -> None:
    wardrobe = [
        make_item("t", Category.TOP),
        make_item("b", Category.BOTTOM),
        make_item("o", Category.OUTERWEAR),
        make_item("s", Category.SHOES),
    ]
    cold = WeatherState("Oslo", 3, "snow")
    warm = WeatherState("Rome", 25, "clear")

    warnings = composition_warnings(wardrobe[:2], wardrobe, cold)
    assert any("outerwear" in warning for warning in warnings)
    assert any("shoes" in warning for warning in warnings)
    assert composition_warnings(wardrobe, wardrobe, cold) == []
    assert not any("outerwear" in warning for warning in composition_warnings(wardrobe[:2], wardrobe, warm))


def test_mock_provider_default_conditions() -> None:
    assert MockWeatherProvider().current_conditions(0, 0) == CurrentConditions(temperature=18, weather_code=0)
