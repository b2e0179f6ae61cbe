"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    llm_configured: bool = False


class SentimentResponse(BaseModel):
    valence: float = 0.5
    arousal: float = 0.5
    focus: float = 0.5
    fallback: bool = Field(default=False, description="True when the neutral vector was substituted")


class TileProgressEvent(BaseModel):
    index: int
    total: int
    x: int
    y: int
    width: int
    height: int
    fraction: float


class GenerateResult(BaseModel):
    width: int
    height: int
    regions: int
    processing_time_ms: float = 0.0
    png_base64: str
