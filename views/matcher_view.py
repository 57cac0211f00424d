"""Mix & match view: flip through tops and bottoms independently."""

from __future__ import annotations

import random
from typing import Any, Dict, Literal

from logic.matcher import CyclicIndex, partition
from memory.wardrobe_state import WardrobeState

Slot = Literal["top", "bottom"]


class MatcherView:
    """Local pairing carousel. Never calls the model."""

    def __init__(self, state: WardrobeState, rng: random.Random | None = None) -> None:
        self.state = state
        self.rng = rng or random.Random()
        self.top_index = CyclicIndex()
        self.bottom_index = CyclicIndex()

    def _sets(self):
        return partition(self.state.items)

    def has_enough_items(self) -> bool:
        tops, bottoms = self._sets()
        return bool(tops) and bool(bottoms)

    def pair(self) -> Dict[str, Any]:
        tops, bottoms = self._sets()
        if not tops or not bottoms:
            return {"status": "insufficient", "tops": len(tops), "bottoms": len(bottoms)}

        top_position = self.top_index.current(len(tops))
        bottom_position = self.bottom_index.current(len(bottoms))
        return {
            "status": "ok",
            "top": tops[top_position].to_dict(),
            "bottom": bottoms[bottom_position].to_dict(),
            "top_position": top_position,
            "bottom_position": bottom_position,
            "tops": len(tops),
            "bottoms": len(bottoms),
        }

    def move(self, slot: Slot, direction: Literal["next", "previous"]) -> Dict[str, Any]:
        tops, bottoms = self._sets()
        if not tops or not bottoms:
            return self.pair()

        index, size = (self.top_index, len(tops)) if slot == "top" else (self.bottom_index, len(bottoms))
        if direction == "next":
            index.next(size)
        elif direction == "previous":
            index.previous(size)
        else:
            raise ValueError(f"Unknown direction {direction!r}")
        return self.pair()

    def next_top(self) -> Dict[str, Any]:
        return self.move("top", "next")

    def previous_top(self) -> Dict[str, Any]:
        return self.move("top", "previous")

    def next_bottom(self) -> Dict[str, Any]:
        return self.move("bottom", "next")

    def previous_bottom(self) -> Dict[str, Any]:
        return self.move("bottom", "previous")

    def randomize(self) -> Dict[str, Any]:
        tops, bottoms = self._sets()
        if not tops or not bottoms:
            return self.pair()
        self.top_index.randomize(len(tops), self.rng)
        self.bottom_index.randomize(len(bottoms), self.rng)
        return self.pair()


__all__ = ["MatcherView"]
