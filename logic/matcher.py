"""Index arithmetic for the local top/bottom pairing carousel."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from models.clothing_item import ClothingItem
from models.taxonomy import Category

TOP_CATEGORIES = {Category.TOP, Category.OUTERWEAR}
BOTTOM_CATEGORIES = {Category.BOTTOM}


def partition(items: Sequence[ClothingItem]) -> Tuple[List[ClothingItem], List[ClothingItem]]:
    """Split the wardrobe into (tops, bottoms), each in wardrobe order."""

    tops = [item for item in items if item.category in TOP_CATEGORIES]
    bottoms = [item for item in items if item.category in BOTTOM_CATEGORIES]
    return tops, bottoms


@dataclass
class CyclicIndex:
    """Position in a carousel that wraps around in both directions.

    The size is passed on every call because the underlying set shrinks and
    grows with the wardrobe. All methods require ``size > 0``.
    """

    position: int = 0

    @staticmethod
    def _check(size: int) -> None:
        if size <= 0:
            raise ValueError("cannot index into an empty set")

    def current(self, size: int) -> int:
        self._check(size)
        return self.position % size

    def next(self, size: int) -> int:
        self._check(size)
        self.position = (self.current(size) + 1) % size
        return self.position

    def previous(self, size: int) -> int:
        self._check(size)
        self.position = (self.current(size) - 1 + size) % size
        return self.position

    def randomize(self, size: int, rng: random.Random | None = None) -> int:
        self._check(size)
        self.position = (rng or random).randrange(size)
        return self.position


__all__ = ["BOTTOM_CATEGORIES", "CyclicIndex", "TOP_CATEGORIES", "partition"]
