"""Domain logic for turning an uploaded photo into its "future" version."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence

from .aiservices.geminiimagegenerationclient import GeminiImageGenerationClient
from .aiservices.imagegenerationclient import (
    ImageGenerationClient,
    ImagePart,
    ImagePayload,
    ResponsePart,
    TextPart,
)
from .config import Settings, get_settings
from .errors import ConfigurationError, GenerationError, InputError, TransformationError
from .prompts import Period, get_transformation_prompt, resolve_period
from .utils import to_data_uri

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "The image generation API key is not configured."
MISSING_IMAGE_MESSAGE = "No image was uploaded."
EMPTY_RESPONSE_MESSAGE = "Failed to generate the image."
NO_IMAGE_MESSAGE = "Failed to generate the image. Please try again with a different photo."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


@dataclass(frozen=True)
class TransformationResult:
    before: str
    after: str
    period: Period


def select_generated_image(parts: Sequence[ResponsePart]) -> ImagePart:
    """Pick the first image in the model response.

    Without an image, the first text part is the model's explanation (usually a
    refusal) and becomes the error message.
    """
    if not parts:
        raise GenerationError(EMPTY_RESPONSE_MESSAGE)

    for part in parts:
        if isinstance(part, ImagePart):
            return part

    for part in parts:
        if isinstance(part, TextPart) and part.text.strip():
            raise GenerationError(part.text)

    raise GenerationError(NO_IMAGE_MESSAGE)


class TransformationService:
    """Sends the photo and the period prompt to the image model."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: ImageGenerationClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or self.settings.has_api_key

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

    def transform(
        self,
        image: Optional[bytes],
        mime_type: Optional[str] = None,
        period: Optional[str] = None,
    ) -> TransformationResult:
        self.ensure_configured()
        if not image:
            raise InputError(MISSING_IMAGE_MESSAGE)

        payload = ImagePayload(data=image, mime_type=mime_type or self.settings.default_mime_type)
        resolved = resolve_period(period)
        prompt = get_transformation_prompt(resolved)
        logger.info(
            "Transforming %s byte %s image for period %s",
            len(payload.data),
            payload.mime_type,
            resolved.value,
        )

        try:
            parts = self._get_client().generate(prompt, payload)
        except TransformationError:
            raise
        except Exception as exc:
            logger.exception("Image generation failed for period %s", resolved.value)
            raise GenerationError(str(exc) or UNEXPECTED_ERROR_MESSAGE) from exc

        try:
            generated = select_generated_image(parts)
        except GenerationError as exc:
            logger.warning("Model returned no image for period %s: %s", resolved.value, exc.message)
            raise

        return TransformationResult(
            before=to_data_uri(payload.data, payload.mime_type),
            after=to_data_uri(generated.data, generated.mime_type),
            period=resolved,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_client(self) -> ImageGenerationClient:
        if self._client is None:
            self._client = GeminiImageGenerationClient(self.settings)
        return self._client


@lru_cache
def get_transformation_service() -> TransformationService:
    return TransformationService(get_settings())
