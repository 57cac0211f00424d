"""In-memory wardrobe state with persistence on every mutation."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Tuple

from models.clothing_item import ClothingItem, DuplicateItemError
from tools.wardrobe_store import WardrobeStore
from wardrobe_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class MutationEvent:
    """Emitted after the in-memory wardrobe changed."""

    kind: Literal["add", "remove"]
    item_id: str
    snapshot: Tuple[ClothingItem, ...]


MutationListener = Callable[[MutationEvent], None]


class WardrobeState:
    """Owns the ordered wardrobe (newest first).

    The only mutations are ``add`` (insert at the head) and ``remove`` (by id).
    Each one notifies listeners while still holding the lock, so the
    persistence listener always writes snapshots in mutation order. If a
    listener raises, the mutation is rolled back before the error propagates.
    """

    def __init__(self, store: Optional[WardrobeStore] = None) -> None:
        self.store = store
        self._items: List[ClothingItem] = []
        self._listeners: List[MutationListener] = []
        self._lock = threading.RLock()
        if store is not None:
            self.subscribe(self._persist)

    @property
    def items(self) -> Tuple[ClothingItem, ...]:
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[ClothingItem]:
        with self._lock:
            return next((item for item in self._items if item.item_id == item_id), None)

    def subscribe(self, listener: MutationListener) -> None:
        self._listeners.append(listener)

    def hydrate(self) -> Tuple[ClothingItem, ...]:
        """Replace the in-memory wardrobe with the persisted one. Never raises."""

        loaded = self.store.load() if self.store is not None else []
        with self._lock:
            self._items = list(loaded)
        log_event(LOGGER, logging.INFO, "wardrobe_hydrated", item_count=len(loaded))
        return self.items

    def add(self, item: ClothingItem) -> ClothingItem:
        """Insert ``item`` at the head. Nothing changes if persisting fails."""

        with self._lock:
            if any(existing.item_id == item.item_id for existing in self._items):
                raise DuplicateItemError(f"Item {item.item_id} is already in the wardrobe")
            previous = list(self._items)
            self._items.insert(0, item)
            self._commit(MutationEvent(kind="add", item_id=item.item_id, snapshot=tuple(self._items)), previous)
        log_event(LOGGER, logging.INFO, "wardrobe_item_added", item_id=item.item_id, category=item.category.value)
        return item

    def remove(self, item_id: str) -> bool:
        """Remove the item with ``item_id``. Returns False if it was not present."""

        with self._lock:
            previous = list(self._items)
            remaining = [existing for existing in previous if existing.item_id != item_id]
            if len(remaining) == len(previous):
                return False
            self._items = remaining
            self._commit(MutationEvent(kind="remove", item_id=item_id, snapshot=tuple(self._items)), previous)
        log_event(LOGGER, logging.INFO, "wardrobe_item_removed", item_id=item_id)
        return True

    def _commit(self, event: MutationEvent, previous: List[ClothingItem]) -> None:
        try:
            for listener in list(self._listeners):
                listener(event)
        except Exception:
            self._items = previous
            log_event(LOGGER, logging.WARNING, "wardrobe_mutation_rolled_back", kind=event.kind, item_id=event.item_id)
            raise

    def _persist(self, event: MutationEvent) -> None:
        self.store.save(event.snapshot)  # type: ignore[union-attr]


__all__ = ["MutationEvent", "MutationListener", "WardrobeState"]
