"""Catalog view: browse, filter and delete wardrobe items."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from logic.catalog import filter_items, visible_tags
from logic.validation import failure
from memory.wardrobe_state import WardrobeState
from models.clothing_item import ClothingItem
from models.taxonomy import ALL_FILTER, CATEGORY_LABELS, Category, validate_filter
from tools.kv_store import StorageError
from wardrobe_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


class CatalogView:
    """Lists the wardrobe, optionally narrowed to one category."""

    def __init__(self, state: WardrobeState) -> None:
        self.state = state
        self.filter = ALL_FILTER

    @staticmethod
    def categories() -> List[Dict[str, str]]:
        keys = [ALL_FILTER, *(category.value for category in Category)]
        return [{"key": key, "label": CATEGORY_LABELS[key]} for key in keys]

    def set_filter(self, value: str) -> str:
        self.filter = validate_filter(value)
        return self.filter

    def visible_items(self) -> List[ClothingItem]:
        return filter_items(self.state.items, self.filter)

    def render(self) -> Dict[str, Any]:
        items = self.visible_items()
        return {
            "filter": self.filter,
            "count": len(items),
            "empty": not items,
            "items": [
                {**item.to_dict(), "visibleTags": visible_tags(item)}
                for item in items
            ],
        }

    def delete(self, item_id: str) -> Dict[str, Any]:
        """Remove an item; the state manager persists the change."""

        with operation_context("view:catalog.delete"):
            try:
                removed = self.state.remove(item_id)
            except StorageError as exc:
                log_event(LOGGER, logging.ERROR, "catalog_delete_failed", item_id=item_id, error=str(exc))
                return failure("storage", "The wardrobe could not be saved. Please try again.")

        if not removed:
            return failure("not_found", f"Item {item_id} is not in the wardrobe.")
        return {"status": "ok", "deleted": item_id}


__all__ = ["CatalogView"]
