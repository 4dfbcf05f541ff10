"""Tests covering the FastAPI routes defined in :mod:`backend.main`."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient


sys.path.insert(0, str(Path(__file__).resolve().parents[2]))
from backend.aiservices.imagegenerationclient import (
    ImageGenerationClient,
    ImagePart,
    ImagePayload,
    ResponsePart,
    TextPart,
)
from backend.config import Settings
from backend.main import app
from backend.prompts import TRANSFORMATION_PROMPTS, Period
from backend.service import TransformationService, get_transformation_service
from backend.utils import parse_data_uri


UPLOADED_BYTES = b"\x89PNG\r\n\x1a\nuploaded-photo"
GENERATED_BYTES = b"\xff\xd8\xffgenerated-photo\x00\x01"


class FakeImageClient(ImageGenerationClient):
    """Test double standing in for the Gemini model."""

    def __init__(self) -> None:
        self.parts: List[ResponsePart] = [ImagePart(data=GENERATED_BYTES, mime_type="image/jpeg")]
        self.calls: list[tuple[str, ImagePayload]] = []
        self.exception: Exception | None = None

    def generate(self, prompt: str, image: ImagePayload) -> List[ResponsePart]:
        self.calls.append((prompt, image))
        if self.exception is not None:
            raise self.exception
        return self.parts


class ExplodingService:
    """Emulates a service failing outside the model call."""

    is_configured = True

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def ensure_configured(self) -> None:
        return None

    def transform(self, image, mime_type=None, period=None):
        raise RuntimeError("disk on fire")


def _settings(api_key: str = "test-key") -> Settings:
    return Settings(gemini_api_key=api_key, _env_file=None)


@pytest.fixture
def fake_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def client(fake_client: FakeImageClient):
    """Yield a :class:`TestClient` whose service talks to :class:`FakeImageClient`."""

    service = TransformationService(_settings(), client=fake_client)
    app.dependency_overrides[get_transformation_service] = lambda: service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _upload(client: TestClient, period: str | None = "3months", mime_type: str = "image/png"):
    data = {"period": period} if period is not None else {}
    return client.post(
        "/api/generate",
        files={"image": ("me.png", UPLOADED_BYTES, mime_type)},
        data=data,
    )


def test_generate_returns_before_and_after_data_uris(client: TestClient, fake_client: FakeImageClient) -> None:
    response = _upload(client, period="4months")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["period"] == "4months"

    before_mime, before_bytes = parse_data_uri(payload["before"])
    assert before_mime == "image/png"
    assert before_bytes == UPLOADED_BYTES

    prompt, image = fake_client.calls[0]
    assert prompt == TRANSFORMATION_PROMPTS[Period.FOUR_MONTHS]
    assert image == ImagePayload(data=UPLOADED_BYTES, mime_type="image/png")


def test_generate_after_matches_generated_image_bytes(client: TestClient, fake_client: FakeImageClient) -> None:
    fake_client.parts = [
        TextPart(text="Here is the edited photo."),
        ImagePart(data=GENERATED_BYTES, mime_type="image/webp"),
        ImagePart(data=b"second", mime_type="image/png"),
    ]

    response = _upload(client)

    assert response.status_code == 200
    after_mime, after_bytes = parse_data_uri(response.json()["after"])
    assert after_mime == "image/webp"
    assert after_bytes == GENERATED_BYTES


@pytest.mark.parametrize("period", ["3months", "4months", "6months"])
def test_generate_echoes_supported_period(client: TestClient, period: str) -> None:
    response = _upload(client, period=period)

    assert response.status_code == 200
    assert response.json()["period"] == period


def test_generate_falls_back_to_default_period(client: TestClient, fake_client: FakeImageClient) -> None:
    response = _upload(client, period="12months")

    assert response.status_code == 200
    assert response.json()["period"] == "3months"
    assert fake_client.calls[0][0] == TRANSFORMATION_PROMPTS[Period.THREE_MONTHS]


def test_generate_without_period_uses_default(client: TestClient) -> None:
    response = _upload(client, period=None)

    assert response.status_code == 200
    assert response.json()["period"] == "3months"


def test_generate_requires_image(client: TestClient, fake_client: FakeImageClient) -> None:
    response = client.post("/api/generate", data={"period": "3months"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]
    assert fake_client.calls == []


def test_generate_rejects_empty_upload(client: TestClient) -> None:
    response = client.post("/api/generate", files={"image": ("empty.png", b"", "image/png")})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_generate_reports_missing_api_key() -> None:
    service = TransformationService(_settings(api_key=""))
    app.dependency_overrides[get_transformation_service] = lambda: service
    try:
        with TestClient(app) as test_client:
            response = _upload(test_client)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert "not configured" in payload["error"]


def test_generate_surfaces_model_text_when_no_image(client: TestClient, fake_client: FakeImageClient) -> None:
    fake_client.parts = [TextPart(text="I can't edit photos of this kind.")]

    response = _upload(client)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "I can't edit photos of this kind."}


def test_generate_reports_generic_failure_for_empty_response(client: TestClient, fake_client: FakeImageClient) -> None:
    fake_client.parts = []

    response = _upload(client)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to generate the image."}


def test_generate_propagates_model_errors(client: TestClient, fake_client: FakeImageClient) -> None:
    fake_client.exception = ConnectionError("503 UNAVAILABLE: model overloaded")

    response = _upload(client)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "503 UNAVAILABLE: model overloaded"}
    assert len(fake_client.calls) == 1


def test_generate_wraps_unexpected_service_failures() -> None:
    app.dependency_overrides[get_transformation_service] = lambda: ExplodingService(_settings())
    try:
        with TestClient(app) as test_client:
            response = _upload(test_client)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "disk on fire"}


def test_healthcheck_reports_model_and_configuration(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "imageModel": "gemini-2.0-flash-exp-image-generation",
        "configured": True,
    }


def test_periods_endpoint_lists_supported_periods(client: TestClient) -> None:
    response = client.get("/api/periods")

    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["periods"]] == ["3months", "4months", "6months"]
    assert all(item["label"] for item in payload["periods"])
    assert payload["default"] == "3months"


def test_generate_rejects_image_sent_as_text(client: TestClient, fake_client: FakeImageClient) -> None:
    response = client.post("/api/generate", data={"image": "not-a-file", "period": "3months"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"].startswith("Invalid request")
    assert fake_client.calls == []
