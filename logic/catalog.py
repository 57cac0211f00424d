"""Catalog filtering helpers."""

from __future__ import annotations

from typing import List, Sequence

from models.clothing_item import ClothingItem
from models.taxonomy import ALL_FILTER, validate_filter

VISIBLE_TAG_COUNT = 2


def filter_items(items: Sequence[ClothingItem], category: str = ALL_FILTER) -> List[ClothingItem]:
    """Return items of ``category`` in wardrobe order; ``ALL`` returns everything."""

    key = validate_filter(category)
    if key == ALL_FILTER:
        return list(items)
    return [item for item in items if item.category == key]


def visible_tags(item: ClothingItem, limit: int = VISIBLE_TAG_COUNT) -> List[str]:
    return list(item.tags[:limit])


__all__ = ["VISIBLE_TAG_COUNT", "filter_items", "visible_tags"]
