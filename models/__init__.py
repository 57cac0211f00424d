"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, DuplicateItemError, new_item
from models.weather import WeatherState

__all__ = ["ClothingItem", "DuplicateItemError", "WeatherState", "new_item"]
