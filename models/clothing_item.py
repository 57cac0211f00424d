"""Clothing item data model and helpers."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.taxonomy import Category, validate_category

DEFAULT_DESCRIPTION = "New item"
DEFAULT_COLOR = "Unknown"
DEFAULT_SEASONS = ["all"]

_REQUIRED_FIELDS = ["id", "imageUrl", "category", "description", "tags", "color", "seasons", "createdAt"]


class DuplicateItemError(ValueError):
    """Raised when an item id is already present in the wardrobe."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def _string_list(value: Any) -> List[str]:
    """Coerce a scalar or iterable into a list of strings."""

    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return [str(entry) for entry in value]
    raise ValueError(f"Expected a list of strings, got {type(value).__name__}")


@dataclass
class ClothingItem:
    """One catalogued clothing entry with its image and AI-derived metadata."""

    item_id: str
    image_url: str
    category: Category
    description: str
    tags: List[str] = field(default_factory=list)
    color: str = DEFAULT_COLOR
    seasons: List[str] = field(default_factory=lambda: list(DEFAULT_SEASONS))
    created_at: int = field(default_factory=_now_ms)

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.tags = _string_list(self.tags)
        self.seasons = _string_list(self.seasons)
        self.created_at = int(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted (camelCase) representation."""

        return {
            "id": self.item_id,
            "imageUrl": self.image_url,
            "category": self.category.value,
            "description": self.description,
            "tags": list(self.tags),
            "color": self.color,
            "seasons": list(self.seasons),
            "createdAt": self.created_at,
        }

    def summary(self) -> Dict[str, Any]:
        """Reduced record sent to the recommendation model."""

        return {
            "id": self.item_id,
            "category": self.category.value,
            "description": self.description,
            "color": self.color,
            "seasons": list(self.seasons),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ClothingItem":
        """Build an item from its persisted representation.

        Raises :class:`ValueError` when a field is missing or the category is
        outside the taxonomy.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"Expected an object, got {type(payload).__name__}")
        missing = [name for name in _REQUIRED_FIELDS if name not in payload]
        if missing:
            raise ValueError(f"Missing required fields for ClothingItem: {missing}")

        return cls(
            item_id=str(payload["id"]),
            image_url=str(payload["imageUrl"]),
            category=payload["category"],
            description=str(payload["description"]),
            tags=payload["tags"],
            color=str(payload["color"]),
            seasons=payload["seasons"],
            created_at=payload["createdAt"],
        )


def new_item(image_url: str, analysis: Optional[Mapping[str, Any]] = None) -> ClothingItem:
    """Create a fresh item from a captured image and its classification.

    Empty analysis fields fall back to neutral defaults so a partially
    classified photo can still be saved.
    """

    analysis = analysis or {}
    return ClothingItem(
        item_id=str(uuid.uuid4()),
        image_url=image_url,
        category=analysis.get("category") or Category.TOP,
        description=analysis.get("description") or DEFAULT_DESCRIPTION,
        tags=analysis.get("tags") or [],
        color=analysis.get("color") or DEFAULT_COLOR,
        seasons=analysis.get("seasons") or list(DEFAULT_SEASONS),
        created_at=_now_ms(),
    )


__all__ = ["ClothingItem", "DuplicateItemError", "new_item"]
