"""Helpers around the AI outfit recommendation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from logic.prompts import OUTERWEAR_THRESHOLD_C
from models.clothing_item import ClothingItem
from models.taxonomy import Category
from models.weather import WeatherState


@dataclass
class Recommendation:
    """One resolved outfit suggestion. Never persisted."""

    items: List[ClothingItem]
    reasoning: str
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "reasoning": self.reasoning,
            "warnings": list(self.warnings),
        }


def simplify_wardrobe(items: Sequence[ClothingItem]) -> List[Dict[str, Any]]:
    """Reduce items to the fields the model needs, leaving out image payloads."""

    return [item.summary() for item in items]


def resolve_recommendation(item_ids: Sequence[str], items: Sequence[ClothingItem]) -> List[ClothingItem]:
    """Map returned ids back to wardrobe items, keeping model order.

    Ids that are not in the wardrobe are dropped without raising.
    """

    by_id = {}
    for item in items:
        by_id.setdefault(item.item_id, item)
    return [by_id[item_id] for item_id in item_ids if item_id in by_id]


def composition_warnings(
    chosen: Sequence[ClothingItem],
    wardrobe: Sequence[ClothingItem],
    weather: WeatherState,
    outerwear_threshold: int = OUTERWEAR_THRESHOLD_C,
) -> List[str]:
    """Point out where a suggestion departs from the rules given to the model.

    The suggestion itself is left untouched; the notes are for display only.
    """

    chosen_categories = {item.category for item in chosen}
    available = {item.category for item in wardrobe}
    warnings: List[str] = []

    if Category.TOP not in chosen_categories:
        warnings.append("The suggestion has no top.")
    if Category.BOTTOM not in chosen_categories:
        warnings.append("The suggestion has no bottom.")
    if (
        weather.temperature < outerwear_threshold
        and Category.OUTERWEAR in available
        and Category.OUTERWEAR not in chosen_categories
    ):
        warnings.append(f"It is below {outerwear_threshold}°C but no outerwear was picked.")
    if Category.SHOES in available and Category.SHOES not in chosen_categories:
        warnings.append("No shoes were picked although the wardrobe has some.")
    return warnings


__all__ = [
    "Recommendation",
    "composition_warnings",
    "resolve_recommendation",
    "simplify_wardrobe",
]
