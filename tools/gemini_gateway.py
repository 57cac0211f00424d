"""Gemini-backed gateway for clothing classification and outfit recommendation."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any, Callable, List, Sequence, Tuple

import google.generativeai as genai
from pydantic import BaseModel, ValidationError

from logic.prompts import classification_prompt, recommendation_prompt
from logic.recommendation import simplify_wardrobe
from logic.validation import (
    ClassificationResult,
    ClassificationSchema,
    RecommendationPayload,
    RecommendationSchema,
)
from models.clothing_item import ClothingItem
from models.weather import WeatherState
from tools.observability import instrument_call
from wardrobe_app.config import WardrobeConfig
from wardrobe_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
_DATA_URI_PREFIX = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[\w.+-]+)*;base64,", re.IGNORECASE)


class GatewayError(RuntimeError):
    """Raised when a model call fails in transport or returns an unusable body."""


class ClassificationError(GatewayError):
    """Raised when an image could not be classified."""


class RecommendationError(GatewayError):
    """Raised when an outfit recommendation could not be produced."""


class EmptyWardrobeError(ValueError):
    """Raised when a recommendation is requested for an empty wardrobe."""


class InvalidImageError(ValueError):
    """Raised when an image payload is not decodable base64; retrying will not help."""


def strip_data_uri(image_payload: str) -> Tuple[str, str]:
    """Split a data URI into (mime type, bare base64 text).

    Payloads without a prefix are returned unchanged with the default mime type.
    """

    match = _DATA_URI_PREFIX.match(image_payload)
    if not match:
        return DEFAULT_IMAGE_MIME_TYPE, image_payload
    mime_type = match.group("mime") or DEFAULT_IMAGE_MIME_TYPE
    return mime_type.lower(), image_payload[match.end():]


ModelFactory = Callable[[WardrobeConfig], Any]


def _default_model_factory(config: WardrobeConfig) -> Any:
    genai.configure(api_key=config.require_api_key())
    return genai.GenerativeModel(config.model)


class GeminiGateway:
    """Stateless wrapper over the two model requests the app makes."""

    def __init__(self, config: WardrobeConfig, model_factory: ModelFactory | None = None) -> None:
        self.config = config
        self.model_factory = model_factory or _default_model_factory

    def _model(self) -> Any:
        self.config.require_api_key()
        return self.model_factory(self.config)

    def _generate(self, contents: List[Any], schema: type, error_cls: type[GatewayError]) -> str:
        model = self._model()
        try:
            response = model.generate_content(
                contents,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
                request_options={"timeout": self.config.request_timeout_seconds},
            )
            text = response.text
        except Exception as exc:
            raise error_cls(f"Gemini request failed: {exc}") from exc

        if not text:
            raise error_cls("No response from the model")
        return text

    @staticmethod
    def _parse(text: str, model_cls: type[BaseModel], error_cls: type[GatewayError]) -> Any:
        try:
            return model_cls.model_validate_json(text)
        except ValidationError as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "model_response_invalid",
                schema=model_cls.__name__,
                errors=exc.errors(include_url=False, include_context=False),
            )
            raise error_cls(f"Model returned an invalid {model_cls.__name__}: {exc}") from exc

    @instrument_call("classify_image")
    def classify_image(self, image_payload: str) -> ClassificationResult:
        """Classify one clothing photo given as a data URI or bare base64 text."""

        mime_type, encoded = strip_data_uri(image_payload)
        try:
            image_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidImageError(f"Image payload is not valid base64: {exc}") from exc

        contents = [
            {"mime_type": mime_type, "data": image_bytes},
            classification_prompt(self.config.response_language),
        ]
        text = self._generate(contents, ClassificationSchema, ClassificationError)
        return self._parse(text, ClassificationResult, ClassificationError)

    @instrument_call("suggest_outfit")
    def suggest_outfit(
        self, items: Sequence[ClothingItem], weather: WeatherState
    ) -> RecommendationPayload:
        """Ask the model for one outfit; returns ids and reasoning unresolved."""

        if not items:
            raise EmptyWardrobeError("Add items to the wardrobe before asking for an outfit.")

        prompt = recommendation_prompt(
            weather, simplify_wardrobe(items), self.config.response_language
        )
        text = self._generate([prompt], RecommendationSchema, RecommendationError)
        return self._parse(text, RecommendationPayload, RecommendationError)


__all__ = [
    "ClassificationError",
    "EmptyWardrobeError",
    "GatewayError",
    "GeminiGateway",
    "InvalidImageError",
    "RecommendationError",
    "strip_data_uri",
]
