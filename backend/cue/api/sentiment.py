"""POST /api/sentiment — free text → sentiment dimensions."""

from __future__ import annotations

from fastapi import APIRouter

from cue.llm.sentiment import analyze_sentiment
from cue.models.requests import SentimentRequest
from cue.models.responses import SentimentResponse

router = APIRouter()


@router.post("/sentiment", response_model=SentimentResponse)
async def sentiment(req: SentimentRequest) -> SentimentResponse:
    vector, fallback = await analyze_sentiment(req.prompt)
    return SentimentResponse(
        valence=vector.valence,
        arousal=vector.arousal,
        focus=vector.focus,
        fallback=fallback,
    )
