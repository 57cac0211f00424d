"""Canonical taxonomy definitions for clothing items.

This module centralises the category enumeration, the season vocabulary and
the weather condition labels offered for manual entry. Helper functions keep
category validation consistent across the data model, views and the API.
"""

from enum import Enum
from typing import Dict, List


class Category(str, Enum):
    """Closed classification of a clothing item."""

    TOP = "TOP"
    BOTTOM = "BOTTOM"
    SHOES = "SHOES"
    OUTERWEAR = "OUTERWEAR"
    ACCESSORY = "ACCESSORY"


ALL_FILTER = "ALL"

CATEGORY_LABELS: Dict[str, str] = {
    ALL_FILTER: "All",
    Category.TOP.value: "Tops",
    Category.BOTTOM.value: "Bottoms",
    Category.SHOES.value: "Shoes",
    Category.OUTERWEAR.value: "Outerwear",
    Category.ACCESSORY.value: "Accessories",
}

SEASONS: List[str] = ["summer", "winter", "spring", "autumn", "all"]

WEATHER_CONDITIONS: List[str] = [
    "clear",
    "cloudy",
    "overcast",
    "fog",
    "drizzle",
    "rain",
    "showers",
    "snow",
    "storm",
]


def validate_category(value: "str | Category") -> Category:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    if isinstance(value, Category):
        return value
    key = str(value).strip().upper()
    try:
        return Category(key)
    except ValueError:
        raise ValueError(
            f"Unsupported category '{value}'. Allowed: {[c.value for c in Category]}"
        ) from None


def validate_filter(value: str) -> str:
    """Accept ``ALL`` or any category, returning the canonical key."""

    if str(value).strip().upper() == ALL_FILTER:
        return ALL_FILTER
    return validate_category(value).value


__all__ = [
    "ALL_FILTER",
    "CATEGORY_LABELS",
    "Category",
    "SEASONS",
    "WEATHER_CONDITIONS",
    "validate_category",
    "validate_filter",
]
