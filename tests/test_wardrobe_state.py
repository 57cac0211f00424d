"""Wardrobe state manager: ordering, mutation events and persistence."""

from __future__ import annotations

from typing import List

import pytest

from conftest import make_item
from memory.wardrobe_state import MutationEvent, WardrobeState
from models.clothing_item import DuplicateItemError
from models.taxonomy import Category
from tools.kv_store import InMemoryKeyValueStore, StorageError
from tools.wardrobe_store import WardrobeStore


@pytest.fixture()
def store() -> WardrobeStore:
    return WardrobeStore(InMemoryKeyValueStore())


def test_add_places_newest_item_first(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    for name in ("a", "b", "c"):
        state.add(make_item(name))
        assert state.items[0].item_id == name

    assert [item.item_id for item in state.items] == ["c", "b", "a"]


def test_remove_deletes_one_and_keeps_order(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    for name in ("a", "b", "c", "d"):
        state.add(make_item(name))

    assert state.remove("b") is True
    assert [item.item_id for item in state.items] == ["d", "c", "a"]


def test_remove_unknown_id_is_noop(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    state.add(make_item("a"))
    events: List[MutationEvent] = []
    state.subscribe(events.append)

    assert state.remove("missing") is False
    assert [item.item_id for item in state.items] == ["a"]
    assert events == []


def test_duplicate_ids_are_rejected(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    state.add(make_item("a"))

    with pytest.raises(DuplicateItemError):
        state.add(make_item("a", Category.SHOES))
    assert len(state) == 1


def test_every_mutation_is_persisted(store: WardrobeStore) -> None:
    state = WardrobeState(store)

    state.add(make_item("a"))
    assert [item.item_id for item in store.load()] == ["a"]

    state.add(make_item("b"))
    assert [item.item_id for item in store.load()] == ["b", "a"]

    state.remove("a")
    assert [item.item_id for item in store.load()] == ["b"]


def test_listeners_see_snapshot_after_mutation(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    events: List[MutationEvent] = []
    state.subscribe(events.append)

    state.add(make_item("a"))
    state.add(make_item("b"))
    state.remove("a")

    assert [(event.kind, event.item_id) for event in events] == [("add", "a"), ("add", "b"), ("remove", "a")]
    assert [item.item_id for item in events[1].snapshot] == ["b", "a"]
    assert [item.item_id for item in events[2].snapshot] == ["b"]


def test_hydrate_restores_persisted_order(store: WardrobeStore) -> None:
    first = WardrobeState(store)
    first.add(make_item("a"))
    first.add(make_item("b", Category.BOTTOM))

    second = WardrobeState(store)
    assert second.items == ()
    second.hydrate()

    assert second.items == first.items


def test_hydrate_with_malformed_payload_starts_empty() -> None:
    backend = InMemoryKeyValueStore({"wardrobe_ai_data": "{{{ definitely not json"})
    state = WardrobeState(WardrobeStore(backend))

    assert state.hydrate() == ()


def test_items_snapshot_is_read_only(store: WardrobeStore) -> None:
    state = WardrobeState(store)
    state.add(make_item("a"))

    snapshot = state.items
    state.add(make_item("b"))

    assert isinstance(snapshot, tuple)
    assert len(snapshot) == 1


def test_storage_errors_propagate_to_caller() -> None:
    class BrokenBackend(InMemoryKeyValueStore):
        def set(self, key: str, value: str) -> None:
            raise StorageError("disk full")

    state = WardrobeState(WardrobeStore(BrokenBackend()))
    with pytest.raises(StorageError):
        state.add(make_item("a"))
    assert state.items == ()


def test_failed_remove_keeps_item_in_memory() -> None:
    class FlakyBackend(InMemoryKeyValueStore):
        broken = False

        def set(self, key: str, value: str) -> None:
            if self.broken:
                raise StorageError("disk full")
            super().set(key, value)

    backend = FlakyBackend()
    state = WardrobeState(WardrobeStore(backend))
    state.add(make_item("b"))
    state.add(make_item("a"))

    backend.broken = True
    with pytest.raises(StorageError):
        state.remove("b")

    assert [item.item_id for item in state.items] == ["a", "b"]
    assert [item.item_id for item in state.store.load()] == ["a", "b"]
