"""Instruction prompts sent to the multimodal model."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from models.taxonomy import SEASONS, Category
from models.weather import WeatherState

OUTERWEAR_THRESHOLD_C = 15

_CATEGORY_HINTS = {
    Category.TOP: "tops",
    Category.BOTTOM: "bottoms",
    Category.SHOES: "shoes",
    Category.OUTERWEAR: "outerwear",
    Category.ACCESSORY: "accessories",
}


def classification_prompt(language: str) -> str:
    """Compose the instruction for classifying one clothing photo."""

    categories = ", ".join(f"{category.value} ({hint})" for category, hint in _CATEGORY_HINTS.items())
    return (
        "Analyze the clothing item in the image.\n"
        "Ignore the background.\n"
        f"Classify the item into exactly one category: {categories}.\n"
        "\n"
        "Provide:\n"
        f"1. A short description in {language} (10 words at most).\n"
        f"2. A list of 3-5 tags in {language} (style, material, occasion).\n"
        f"3. The primary color in {language}.\n"
        f"4. Suitable seasons ({', '.join(SEASONS)}).\n"
    )


def recommendation_prompt(
    weather: WeatherState,
    wardrobe: List[Dict[str, Any]],
    language: str,
    outerwear_threshold: int = OUTERWEAR_THRESHOLD_C,
) -> str:
    """Compose the instruction for picking one outfit for the given weather."""

    return (
        f"Context: {weather.summary()}\n"
        "\n"
        "Task: pick the best outfit from the user's wardrobe.\n"
        "Rules:\n"
        f"1. Pick at least one {Category.TOP.value} and one {Category.BOTTOM.value} "
        "(unless a single piece such as a dress covers both).\n"
        f"2. If it is cold (< {outerwear_threshold}°C), try to add {Category.OUTERWEAR.value}.\n"
        f"3. Pick {Category.SHOES.value} if there are any.\n"
        "4. Return the ids of the chosen items and a short friendly explanation "
        f"in {language} of why this choice suits the weather.\n"
        "\n"
        "Wardrobe JSON:\n"
        f"{json.dumps(wardrobe, ensure_ascii=False)}\n"
    )


__all__ = ["OUTERWEAR_THRESHOLD_C", "classification_prompt", "recommendation_prompt"]
