"""Wardrobe AI application package."""
