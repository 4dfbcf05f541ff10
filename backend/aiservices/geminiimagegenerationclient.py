from __future__ import annotations

import base64
import logging
from typing import Any, Iterable, List, Optional

from google import genai
from google.genai import types

from ..config import Settings, get_settings
from ..errors import ConfigurationError
from .imagegenerationclient import (
    ImageGenerationClient,
    ImagePart,
    ImagePayload,
    ResponsePart,
    TextPart,
)

logger = logging.getLogger(__name__)


class GeminiImageGenerationClient(ImageGenerationClient):
    """
    Edits a photo with a Gemini model that can answer with both text and images
    (e.g. gemini-2.0-flash-exp-image-generation).
    """

    RESPONSE_MODALITIES = ["TEXT", "IMAGE"]

    def __init__(self, settings: Optional[Settings] = None, sdk_client: Any = None) -> None:
        self.settings = settings or get_settings()
        self._model = self.settings.image_model_id

        if sdk_client is not None:
            self._client = sdk_client
        else:
            api_key = self.settings.gemini_api_key.get_secret_value().strip()
            if not api_key:
                raise ConfigurationError("The image generation API key is not configured.")
            self._client = genai.Client(api_key=api_key)

    def generate(self, prompt: str, image: ImagePayload) -> List[ResponsePart]:
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                ],
            )
        ]
        config = types.GenerateContentConfig(response_modalities=self.RESPONSE_MODALITIES)

        logger.debug("Sending %s bytes of %s to %s", len(image.data), image.mime_type, self._model)
        response = self._client.models.generate_content(
            model=self._model,
            contents=contents,
            config=config,
        )
        return list(self._parse_parts(self._first_candidate_parts(response)))

    # --- Internals ------------------------------------------------------------

    @staticmethod
    def _first_candidate_parts(response: Any) -> Iterable[Any]:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            return []
        content = getattr(candidates[0], "content", None)
        if content is None:
            return []
        return getattr(content, "parts", None) or []

    @staticmethod
    def _parse_parts(parts: Iterable[Any]) -> Iterable[ResponsePart]:
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None) if inline_data is not None else None
            if data:
                # Older SDK layouts hand back the payload still base64-encoded.
                if isinstance(data, str):
                    data = base64.b64decode(data)
                yield ImagePart(data=data, mime_type=inline_data.mime_type or "image/png")
                continue

            text = getattr(part, "text", None)
            if text:
                yield TextPart(text=text)
