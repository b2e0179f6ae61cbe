"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cue.config import settings
from cue.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        llm_configured=bool(settings.anthropic_api_key),
    )
