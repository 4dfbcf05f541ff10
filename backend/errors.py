"""Failures raised while transforming a photo.

Every error carries the HTTP status the endpoint answers with and a message
that the UI shows to the user verbatim.
"""

from __future__ import annotations

from fastapi import status


class TransformationError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(TransformationError):
    """A required setting (usually the API key) is missing."""


class InputError(TransformationError):
    """The request did not contain what the endpoint needs."""

    status_code = status.HTTP_400_BAD_REQUEST


class GenerationError(TransformationError):
    """The image model failed or answered without an image."""
