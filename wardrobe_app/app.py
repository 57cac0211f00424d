"""Wardrobe AI app bootstrap."""

from enum import Enum
import logging

from memory.wardrobe_state import WardrobeState
from models.weather import WeatherState
from tools.gemini_gateway import GeminiGateway, ModelFactory
from tools.geolocation import Geolocator, build_geolocator
from tools.kv_store import KeyValueStore, build_kv_store
from tools.wardrobe_store import WardrobeStore
from tools.weather_provider import OpenMeteoProvider, WeatherProvider
from views.assistant_view import AssistantView
from views.capture_view import CaptureSession
from views.catalog_view import CatalogView
from views.matcher_view import MatcherView
from wardrobe_app.config import WardrobeConfig
from wardrobe_app.logging_config import configure_logging, get_logger, log_event


LOGGER = get_logger(__name__)

_UNSET = object()


class View(str, Enum):
    WARDROBE = "WARDROBE"
    MATCHER = "MATCHER"
    ASSISTANT = "ASSISTANT"


class WardrobeApp:
    """Wires together storage, state, the model gateway and the views."""

    def __init__(
        self,
        config: WardrobeConfig | None = None,
        *,
        kv_store: KeyValueStore | None = None,
        model_factory: ModelFactory | None = None,
        weather_provider: WeatherProvider | None = None,
        geolocator: "Geolocator | None | object" = _UNSET,
        configure_logs: bool = True,
    ) -> None:
        self.config = config or WardrobeConfig.from_env()
        if configure_logs:
            configure_logging()

        backend = kv_store or build_kv_store(self.config.storage_backend, self.config.storage_path)
        self.store = WardrobeStore(backend, key=self.config.storage_key)
        self.state = WardrobeState(self.store)
        self.state.hydrate()

        self.gateway = GeminiGateway(self.config, model_factory=model_factory)
        self.weather_provider = weather_provider or OpenMeteoProvider(
            self.config.weather_api_url, timeout_seconds=self.config.request_timeout_seconds
        )
        if geolocator is _UNSET:
            geolocator = build_geolocator(self.config.geolocation, self.config.geolocation_api_url)

        self.catalog = CatalogView(self.state)
        self.matcher = MatcherView(self.state)
        self.assistant = AssistantView(
            state=self.state,
            gateway=self.gateway,
            weather_provider=self.weather_provider,
            geolocator=geolocator,  # type: ignore[arg-type]
            default_weather=WeatherState(
                location=self.config.default_location,
                temperature=self.config.default_temperature,
                condition=self.config.default_condition,
            ),
        )
        self.current_view = View.WARDROBE

    def navigate(self, view: "View | str") -> View:
        """Switch views. Leaving the assistant discards its recommendation."""

        target = View(str(view).upper()) if not isinstance(view, View) else view
        if self.current_view is View.ASSISTANT and target is not View.ASSISTANT:
            self.assistant.reset()
        log_event(LOGGER, logging.DEBUG, "navigated", source=self.current_view.value, target=target.value)
        self.current_view = target
        return target

    def open_capture(self) -> CaptureSession:
        return CaptureSession(self.state, self.gateway)


__all__ = ["View", "WardrobeApp"]
