from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class ImagePayload:
    """Raw image bytes together with their MIME type."""

    data: bytes
    mime_type: str


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class TextPart:
    text: str


ResponsePart = Union[ImagePart, TextPart]


class ImageGenerationClient(ABC):
    """Abstract interface for an image editing client.

    Implementations must provide a synchronous generation method
    used by the rest of the application.
    """

    @abstractmethod
    def generate(self, prompt: str, image: ImagePayload) -> List[ResponsePart]:
        """Edit ``image`` following ``prompt`` and return the model's response parts in order."""
