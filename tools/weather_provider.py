"""Current-weather lookup by coordinates (Open-Meteo)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests
from pydantic import BaseModel, ValidationError

from logic.weather_codes import describe_weather_code
from models.weather import round_half_up
from tools.observability import instrument_call
from wardrobe_app.config import DEFAULT_WEATHER_API_URL


LOGGER = logging.getLogger(__name__)


class WeatherLookupError(RuntimeError):
    """Raised when the weather service cannot be reached or returns garbage."""


class _Current(BaseModel):
    temperature_2m: float
    weather_code: int


class _ForecastResponse(BaseModel):
    current: _Current


@dataclass
class CurrentConditions:
    """Observed weather at a coordinate."""

    temperature: int
    weather_code: int

    @property
    def condition(self) -> str:
        return describe_weather_code(self.weather_code)


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def current_conditions(self, latitude: float, longitude: float) -> CurrentConditions:
        """Return current weather at the coordinate or raise WeatherLookupError."""


class OpenMeteoProvider(WeatherProvider):
    """Open-Meteo provider with schema validation. No API key needed."""

    def __init__(self, base_url: str = DEFAULT_WEATHER_API_URL, timeout_seconds: float = 10.0) -> None:
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds

    @instrument_call("weather_lookup")
    def current_conditions(self, latitude: float, longitude: float) -> CurrentConditions:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,weather_code",
            "wind_speed_unit": "ms",
        }
        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _ForecastResponse.model_validate(response.json())
        except requests.RequestException as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            raise WeatherLookupError(f"Weather lookup failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            raise WeatherLookupError(f"Weather service returned an unexpected payload: {exc}") from exc

        return CurrentConditions(
            temperature=round_half_up(parsed.current.temperature_2m),
            weather_code=parsed.current.weather_code,
        )


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests and demos."""

    def __init__(self, conditions: CurrentConditions | None = None, error: Exception | None = None) -> None:
        self.conditions = conditions or CurrentConditions(temperature=18, weather_code=0)
        self.error = error
        self.calls: list[tuple[float, float]] = []

    def current_conditions(self, latitude: float, longitude: float) -> CurrentConditions:
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        LOGGER.info("Returning mock weather", extra={"temperature": self.conditions.temperature})
        return self.conditions


__all__ = [
    "CurrentConditions",
    "MockWeatherProvider",
    "OpenMeteoProvider",
    "WeatherLookupError",
    "WeatherProvider",
]
