"""Pydantic schemas and helpers for validating model output and user-facing results."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from models.taxonomy import Category


class ClassificationSchema(TypedDict):
    """Response schema handed to Gemini for image classification."""

    category: Category
    description: str
    tags: list[str]
    color: str
    seasons: list[str]


class RecommendationSchema(TypedDict):
    """Response schema handed to Gemini for outfit recommendation."""

    recommendedItemsIds: list[str]
    reasoning: str


class ClassificationResult(BaseModel):
    """Validated classification returned by the model. All fields are required."""

    category: Category
    description: str
    tags: List[str]
    color: str
    seasons: List[str]


class RecommendationPayload(BaseModel):
    """Validated recommendation returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    recommended_item_ids: List[str] = Field(alias="recommendedItemsIds")
    reasoning: str


ErrorKind = Literal[
    "configuration",
    "transport",
    "capability",
    "permission",
    "precondition",
    "storage",
    "invalid_input",
    "not_found",
]


class Notification(BaseModel):
    """Dismissable message shown to the user when an action fails."""

    status: Literal["error"] = "error"
    kind: ErrorKind
    message: str
    retry: bool = False


def failure(kind: ErrorKind, message: str, *, retry: bool = False) -> Dict[str, Any]:
    """Build the payload views return instead of raising."""

    return Notification(kind=kind, message=message, retry=retry).model_dump(exclude_none=True)


__all__ = [
    "ClassificationResult",
    "ClassificationSchema",
    "Notification",
    "RecommendationPayload",
    "RecommendationSchema",
    "failure",
]
