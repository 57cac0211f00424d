"""Mapping of Open-Meteo numeric weather codes to condition labels."""

from typing import List, Tuple

DEFAULT_CONDITION = "overcast"

# (lowest code, highest code, label), checked in order.
WEATHER_CODE_RANGES: List[Tuple[int, int, str]] = [
    (0, 0, "clear"),
    (1, 3, "cloudy"),
    (45, 48, "fog"),
    (51, 55, "drizzle"),
    (61, 67, "rain"),
    (71, 77, "snow"),
    (80, 82, "showers"),
]
STORM_THRESHOLD = 95


def describe_weather_code(code: int) -> str:
    """Return the human-readable label for a WMO weather code."""

    for low, high, label in WEATHER_CODE_RANGES:
        if low <= code <= high:
            return label
    if code >= STORM_THRESHOLD:
        return "storm"
    return DEFAULT_CONDITION


__all__ = ["DEFAULT_CONDITION", "WEATHER_CODE_RANGES", "describe_weather_code"]
