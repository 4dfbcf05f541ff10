"""Pydantic models shared by the FastAPI endpoints."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class TransformationResponse(BaseModel):
    success: Literal[True] = True
    before: str = Field(..., description="Data URI of the uploaded photo")
    after: str = Field(..., description="Data URI of the generated photo")
    period: str = Field(..., description="Period the generated photo illustrates")


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str = Field(..., description="Human-readable reason, shown to the user as-is")


class PeriodItem(BaseModel):
    id: str
    label: str


class PeriodListResponse(BaseModel):
    periods: List[PeriodItem]
    default: str


class HealthResponse(BaseModel):
    status: str
    imageModel: Optional[str]
    configured: bool
