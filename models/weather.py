"""Weather context used by the outfit assistant."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherState:
    """Current weather as seen by the assistant. Replaced, never mutated."""

    location: str
    temperature: int
    condition: str

    def summary(self) -> str:
        return (
            f"The user is in {self.location}. Weather: {self.temperature}°C, "
            f"conditions: {self.condition}."
        )

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "temperature": self.temperature,
            "condition": self.condition,
        }


def round_half_up(value: float) -> int:
    """Round to whole degrees with halves going up, as weather apps display them."""

    return int(math.floor(value + 0.5))


def coerce_temperature(value: object) -> int:
    """Parse a temperature into whole degrees, rejecting non-numeric input."""

    if isinstance(value, bool):
        raise ValueError("temperature must be a number")
    try:
        return round_half_up(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"temperature must be a number, got {value!r}") from None


__all__ = ["WeatherState", "coerce_temperature", "round_half_up"]
