"""Outfit assistant: weather context plus an AI-picked outfit."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from logic.recommendation import Recommendation, composition_warnings, resolve_recommendation
from logic.validation import failure
from memory.wardrobe_state import WardrobeState
from models.weather import WeatherState, coerce_temperature
from tools.gemini_gateway import EmptyWardrobeError, GeminiGateway, RecommendationError
from tools.geolocation import (
    GeolocationDeniedError,
    GeolocationUnavailableError,
    Geolocator,
)
from tools.weather_provider import WeatherLookupError, WeatherProvider
from wardrobe_app.config import MissingCredentialError
from wardrobe_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


class RequestTokens:
    """Generation counter per request kind.

    A result is applied only if no newer request of the same kind was issued
    and the view was not left in the meantime.
    """

    def __init__(self) -> None:
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def issue(self, kind: str) -> int:
        with self._lock:
            self._generations[kind] = self._generations.get(kind, 0) + 1
            return self._generations[kind]

    def is_current(self, kind: str, token: int) -> bool:
        with self._lock:
            return self._generations.get(kind, 0) == token

    def invalidate_all(self) -> None:
        with self._lock:
            for kind in self._generations:
                self._generations[kind] += 1


class AssistantView:
    """Holds the weather state and the latest recommendation."""

    def __init__(
        self,
        state: WardrobeState,
        gateway: GeminiGateway,
        weather_provider: WeatherProvider,
        geolocator: Optional[Geolocator],
        default_weather: WeatherState,
    ) -> None:
        self.state = state
        self.gateway = gateway
        self.weather_provider = weather_provider
        self.geolocator = geolocator
        self.weather = default_weather
        self.recommendation: Optional[Recommendation] = None
        self.tokens = RequestTokens()

    def update_weather(
        self,
        location: Optional[str] = None,
        temperature: Any = None,
        condition: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Manual entry. Omitted fields keep their current value.

        A valid edit wins over any location lookup still in flight.
        """

        try:
            new_temperature = (
                self.weather.temperature if temperature is None else coerce_temperature(temperature)
            )
        except ValueError as exc:
            return failure("invalid_input", str(exc))

        self.tokens.issue("weather")
        self.weather = WeatherState(
            location=self.weather.location if location is None else location,
            temperature=new_temperature,
            condition=self.weather.condition if condition is None else condition,
        )
        return {"status": "ok", "weather": self.weather.to_dict()}

    def locate(self, geolocator: Optional[Geolocator] = None) -> Dict[str, Any]:
        """Replace the weather with a live lookup at the user's position.

        ``geolocator`` overrides the configured source for this call, e.g. with
        coordinates reported by the client device.
        """

        geolocator = geolocator or self.geolocator
        if geolocator is None:
            return failure("capability", "Geolocation is not supported on this device.")

        token = self.tokens.issue("weather")
        with operation_context("view:assistant.locate"):
            try:
                coordinates = geolocator.locate()
            except GeolocationDeniedError as exc:
                log_event(LOGGER, logging.WARNING, "geolocation_denied", error=str(exc))
                return failure("permission", "Could not determine your location. Allow location access.")
            except GeolocationUnavailableError as exc:
                log_event(LOGGER, logging.WARNING, "geolocation_unavailable", error=str(exc))
                return failure("capability", "Geolocation is not available right now.")

            try:
                conditions = self.weather_provider.current_conditions(
                    coordinates.latitude, coordinates.longitude
                )
            except WeatherLookupError as exc:
                log_event(LOGGER, logging.WARNING, "weather_lookup_failed", error=str(exc))
                return failure(
                    "transport",
                    "Could not fetch the weather. Check your connection.",
                    retry=True,
                )

        located = WeatherState(
            location=coordinates.label(),
            temperature=conditions.temperature,
            condition=conditions.condition,
        )
        if not self.tokens.is_current("weather", token):
            log_event(LOGGER, logging.INFO, "stale_result_dropped", request="weather")
            return {"status": "stale", "weather": self.weather.to_dict()}

        self.weather = located
        return {"status": "ok", "weather": self.weather.to_dict()}

    def recommend(self) -> Dict[str, Any]:
        items = self.state.items
        if not items:
            return failure("precondition", "Add items to your wardrobe first.")

        token = self.tokens.issue("recommendation")
        weather = self.weather
        with operation_context("view:assistant.recommend"):
            try:
                payload = self.gateway.suggest_outfit(items, weather)
            except MissingCredentialError as exc:
                return failure("configuration", str(exc))
            except EmptyWardrobeError as exc:
                return failure("precondition", str(exc))
            except RecommendationError as exc:
                log_event(LOGGER, logging.WARNING, "recommendation_failed", error=str(exc))
                return failure(
                    "transport",
                    "Could not get a recommendation. Check the API key and try again.",
                    retry=True,
                )

        chosen = resolve_recommendation(payload.recommended_item_ids, items)
        dropped = len(payload.recommended_item_ids) - len(chosen)
        recommendation = Recommendation(
            items=chosen,
            reasoning=payload.reasoning,
            warnings=composition_warnings(chosen, items, weather),
        )
        log_event(
            LOGGER,
            logging.INFO,
            "recommendation_resolved",
            chosen=len(chosen),
            dropped_ids=dropped,
            warnings=len(recommendation.warnings),
        )

        if not self.tokens.is_current("recommendation", token):
            log_event(LOGGER, logging.INFO, "stale_result_dropped", request="recommendation")
            return {"status": "stale"}

        self.recommendation = recommendation
        return {"status": "ok", "recommendation": recommendation.to_dict()}

    def reset(self) -> None:
        """Forget the current recommendation and ignore in-flight results."""

        self.recommendation = None
        self.tokens.invalidate_all()

    def render(self) -> Dict[str, Any]:
        return {
            "weather": self.weather.to_dict(),
            "can_recommend": len(self.state) > 0,
            "can_locate": self.geolocator is not None,
            "recommendation": self.recommendation.to_dict() if self.recommendation else None,
        }


__all__ = ["AssistantView", "RequestTokens"]
