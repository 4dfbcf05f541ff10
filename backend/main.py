"""FastAPI entry point exposing the Fitness Future REST API."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .config import get_settings
from .errors import GenerationError, InputError, TransformationError
from .prompts import DEFAULT_PERIOD, PERIOD_LABELS
from .schemas import (
    ErrorResponse,
    HealthResponse,
    PeriodItem,
    PeriodListResponse,
    TransformationResponse,
)
from .service import (
    MISSING_IMAGE_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    TransformationService,
    get_transformation_service,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = first.get("msg", "invalid value")
    return f"Invalid request: {field}: {message}" if field else f"Invalid request: {message}"


app = FastAPI(title="Fitness Future Backend", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TransformationError)
async def handle_transformation_error(request: Request, exc: TransformationError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or UNEXPECTED_ERROR_MESSAGE)


@app.get("/health", response_model=HealthResponse, summary="Health Check Endpoint")
async def healthcheck(
    service: TransformationService = Depends(get_transformation_service),
):
    return HealthResponse(
        status="ok",
        imageModel=service.settings.image_model_id,
        configured=service.is_configured,
    )


@app.get(
    "/api/periods",
    response_model=PeriodListResponse,
    summary="List the periods a photo can be projected to",
)
async def list_periods():
    return PeriodListResponse(
        periods=[PeriodItem(id=period.value, label=label) for period, label in PERIOD_LABELS.items()],
        default=DEFAULT_PERIOD.value,
    )


@app.post(
    "/api/generate",
    response_model=TransformationResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    summary="Generate the future version of an uploaded photo",
)
async def generate(
    image: Optional[UploadFile] = File(None, description="Photo to transform"),
    period: Optional[str] = Form(None, description="One of 3months, 4months, 6months"),
    service: TransformationService = Depends(get_transformation_service),
):
    # Credentials before input.
    service.ensure_configured()
    if image is None:
        raise InputError(MISSING_IMAGE_MESSAGE)

    data = await image.read()

    try:
        result = await run_in_threadpool(service.transform, data, image.content_type, period)
    except TransformationError:
        raise
    except Exception as exc:
        logger.exception("Transformation failed for period %s", period)
        raise GenerationError(str(exc) or UNEXPECTED_ERROR_MESSAGE) from exc

    return TransformationResponse(
        before=result.before,
        after=result.after,
        period=result.period.value,
    )


__all__ = ["app"]


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    import uvicorn

    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=True)
