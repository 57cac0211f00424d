"""Device location acquisition for weather lookups."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import requests
from pydantic import BaseModel, ValidationError

from tools.observability import instrument_call
from wardrobe_app.config import DEFAULT_GEOLOCATION_API_URL

logger = logging.getLogger(__name__)


class GeolocationError(RuntimeError):
    """Base class for failures to obtain the user's position."""


class GeolocationUnavailableError(GeolocationError):
    """Raised when no location source is available."""


class GeolocationDeniedError(GeolocationError):
    """Raised when the location source refuses to report a position."""


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def label(self) -> str:
        return f"Coords: {self.latitude:.2f}, {self.longitude:.2f}"


class _IPLookupResponse(BaseModel):
    status: str
    message: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class Geolocator(ABC):
    """Source of the user's coordinates."""

    @abstractmethod
    def locate(self) -> Coordinates:
        """Return coordinates or raise a GeolocationError subclass."""


class StaticGeolocator(Geolocator):
    """Fixed coordinates, e.g. supplied by a client or configuration."""

    def __init__(self, coordinates: Coordinates) -> None:
        self.coordinates = coordinates

    def locate(self) -> Coordinates:
        return self.coordinates


class DisabledGeolocator(Geolocator):
    """The user turned location access off."""

    def locate(self) -> Coordinates:
        raise GeolocationDeniedError("Location access is disabled.")


class IPGeolocator(Geolocator):
    """Approximate location from the public IP address via ip-api."""

    def __init__(self, url: str = DEFAULT_GEOLOCATION_API_URL, timeout_seconds: float = 5.0) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

    @instrument_call("ip_geolocation")
    def locate(self) -> Coordinates:
        try:
            response = requests.get(self.url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = _IPLookupResponse.model_validate(response.json())
        except requests.RequestException as exc:
            logger.error("Geolocation service unreachable", extra={"error": str(exc)})
            raise GeolocationUnavailableError(f"Geolocation service unreachable: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise GeolocationUnavailableError(f"Unexpected geolocation payload: {exc}") from exc

        if payload.status != "success" or payload.lat is None or payload.lon is None:
            raise GeolocationDeniedError(
                f"Location could not be determined: {payload.message or payload.status}"
            )
        return Coordinates(latitude=payload.lat, longitude=payload.lon)


def parse_coordinates(raw: str) -> Coordinates:
    """Parse ``"<lat>,<lon>"`` into coordinates."""

    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2:
        raise ValueError(f"Expected '<latitude>,<longitude>', got {raw!r}")
    latitude, longitude = float(parts[0]), float(parts[1])
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValueError(f"Coordinates out of range: {raw!r}")
    return Coordinates(latitude=latitude, longitude=longitude)


def build_geolocator(setting: str | None, url: str = DEFAULT_GEOLOCATION_API_URL) -> Geolocator | None:
    """Map the ``geolocation`` config value to a geolocator.

    ``None`` or an empty value means the app has no way to locate the user.
    """

    if setting is None or not setting.strip():
        return None
    value = setting.strip().lower()
    if value == "ip":
        return IPGeolocator(url)
    if value in {"off", "disabled", "denied"}:
        return DisabledGeolocator()
    return StaticGeolocator(parse_coordinates(value))


__all__ = [
    "Coordinates",
    "DisabledGeolocator",
    "GeolocationDeniedError",
    "GeolocationError",
    "GeolocationUnavailableError",
    "Geolocator",
    "IPGeolocator",
    "StaticGeolocator",
    "build_geolocator",
    "parse_coordinates",
]
