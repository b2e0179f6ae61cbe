"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SentimentRequest(BaseModel):
    prompt: str = Field(..., description="Free text describing the desired mood")
