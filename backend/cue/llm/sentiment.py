"""Sentiment provider — free text → SentimentVector via LangChain ChatAnthropic.

The provider never fails the caller: a missing API key, a network error
or an unparseable reply all yield the neutral vector.
"""

from __future__ import annotations

import json
import logging
import re

from cue.config import settings
from cue.engine.context import SentimentVector
from cue.llm.prompts import get_sentiment_prompt

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*?\}", re.DOTALL)


def parse_sentiment(text: str) -> SentimentVector:
    """Extract the first JSON object from a model reply. Raises ValueError if absent or malformed."""
    match = _JSON_OBJECT.search(text)
    if match is None:
        raise ValueError(f"No JSON object in model reply: {text[:80]!r}")
    data = json.loads(match.group(0))
    try:
        vector = SentimentVector(
            valence=float(data["valence"]),
            arousal=float(data["arousal"]),
            focus=float(data.get("focus", 0.5)),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed sentiment object: {data!r}") from e
    return vector.clamped()


async def analyze_sentiment(prompt: str) -> tuple[SentimentVector, bool]:
    """Returns (vector, fallback). ``fallback`` is True when the neutral vector was substituted."""
    if not settings.anthropic_api_key:
        logger.info("Sentiment provider not configured; using neutral sentiment")
        return SentimentVector.neutral(), True

    from langchain_anthropic import ChatAnthropic
    from langchain_core.messages import HumanMessage

    llm = ChatAnthropic(
        model=settings.model_sentiment,
        api_key=settings.anthropic_api_key,
        max_tokens=128,
    )

    try:
        response = await llm.ainvoke([HumanMessage(content=get_sentiment_prompt(prompt))])
        return parse_sentiment(str(response.content)), False
    except Exception as e:
        logger.warning("Sentiment analysis failed, using neutral sentiment: %s", e)
        return SentimentVector.neutral(), True
