"""Wardrobe persistence on top of a key-value backend."""
from __future__ import annotations

import json
import logging
from typing import List, Sequence

from models.clothing_item import ClothingItem
from tools.kv_store import KeyValueStore, StorageError
from wardrobe_app.config import DEFAULT_STORAGE_KEY
from wardrobe_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


class WardrobeStore:
    """Reads and writes the whole wardrobe as one JSON array under a fixed key."""

    def __init__(self, backend: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.backend = backend
        self.key = key

    @staticmethod
    def serialise(items: Sequence[ClothingItem]) -> str:
        return json.dumps([item.to_dict() for item in items], ensure_ascii=False)

    @staticmethod
    def deserialise(raw: str) -> List[ClothingItem]:
        """Parse a persisted payload. Raises :class:`ValueError` when malformed."""

        payload = json.loads(raw)
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")
        return [ClothingItem.from_dict(entry) for entry in payload]

    def load(self) -> List[ClothingItem]:
        """Return the persisted wardrobe, or an empty one if absent or unreadable."""

        try:
            raw = self.backend.get(self.key)
        except StorageError as exc:
            log_event(LOGGER, logging.ERROR, "wardrobe_load_failed", key=self.key, error=str(exc))
            return []
        if raw is None:
            log_event(LOGGER, logging.INFO, "wardrobe_not_found", key=self.key)
            return []

        try:
            items = self.deserialise(raw)
        except (ValueError, TypeError) as exc:
            log_event(
                LOGGER,
                logging.ERROR,
                "wardrobe_payload_malformed",
                key=self.key,
                error=str(exc),
            )
            return []

        log_event(LOGGER, logging.INFO, "wardrobe_loaded", key=self.key, item_count=len(items))
        return items

    def save(self, items: Sequence[ClothingItem]) -> None:
        """Overwrite the stored wardrobe with ``items``."""

        self.backend.set(self.key, self.serialise(items))
        log_event(LOGGER, logging.DEBUG, "wardrobe_saved", key=self.key, item_count=len(items))


__all__ = ["WardrobeStore"]
