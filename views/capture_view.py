"""Item capture: photo in, AI metadata out, item committed on confirmation."""

from __future__ import annotations

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional

from logic.validation import ClassificationResult, failure
from memory.wardrobe_state import WardrobeState
from models.clothing_item import ClothingItem, new_item
from tools.gemini_gateway import ClassificationError, GeminiGateway, InvalidImageError
from tools.kv_store import StorageError
from wardrobe_app.config import MissingCredentialError
from wardrobe_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


def encode_image(data: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode raw image bytes as a data URI."""

    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class CaptureSession:
    """Modal flow for adding one item. Discard the session to cancel."""

    def __init__(self, state: WardrobeState, gateway: GeminiGateway) -> None:
        self.state = state
        self.gateway = gateway
        self.image: Optional[str] = None
        self.analysis: Optional[ClassificationResult] = None
        self.saved: Optional[ClothingItem] = None

    def load_image(self, source: str | Path | bytes, mime_type: str | None = None) -> str:
        """Accept a file path, raw bytes or an existing data URI."""

        if isinstance(source, bytes):
            image = encode_image(source, mime_type or "image/jpeg")
        elif isinstance(source, str) and source.startswith("data:"):
            image = source
        else:
            path = Path(source)
            guessed, _ = mimetypes.guess_type(path.name)
            image = encode_image(path.read_bytes(), mime_type or guessed or "image/jpeg")

        self.image = image
        self.analysis = None
        self.saved = None
        return image

    def analyze(self) -> Dict[str, Any]:
        if not self.image:
            return failure("precondition", "Take or choose a photo first.")

        with operation_context("view:capture.analyze"):
            try:
                self.analysis = self.gateway.classify_image(self.image)
            except MissingCredentialError as exc:
                return failure("configuration", str(exc))
            except InvalidImageError as exc:
                log_event(LOGGER, logging.WARNING, "capture_image_invalid", error=str(exc))
                return failure("invalid_input", "The photo could not be read. Choose another image.")
            except ClassificationError as exc:
                log_event(LOGGER, logging.WARNING, "capture_analysis_failed", error=str(exc))
                return failure(
                    "transport",
                    "Could not analyze the image. Please try again.",
                    retry=True,
                )

        return {"status": "ok", "analysis": self.analysis.model_dump(mode="json")}

    def save(self) -> Dict[str, Any]:
        """Commit the analysed item to the wardrobe."""

        if self.saved is not None:
            return failure("precondition", "This item is already in your wardrobe.")
        if not self.image or self.analysis is None:
            return failure("precondition", "Analyze the photo before saving.")

        item = new_item(self.image, self.analysis.model_dump())
        with operation_context("view:capture.save"):
            try:
                self.state.add(item)
            except StorageError as exc:
                log_event(LOGGER, logging.ERROR, "capture_save_failed", error=str(exc))
                return failure("storage", "The wardrobe could not be saved. Please try again.")

        self.saved = item
        return {"status": "ok", "item": item.to_dict()}


__all__ = ["CaptureSession", "encode_image"]
