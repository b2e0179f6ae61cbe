"""Prompt templates for the sentiment provider."""

from __future__ import annotations

SENTIMENT_TEMPLATE = """You rate the mood of a short piece of text on three axes, each a number between 0 and 1:

- valence: 0 = sad, dark, negative; 1 = happy, bright, positive
- arousal: 0 = calm, still, sleepy; 1 = energetic, agitated, excited
- focus: 0 = scattered, dreamy, diffuse; 1 = sharp, deliberate, concentrated

0.5 on any axis means neutral.

Respond with a single JSON object and nothing else, for example:
{{"valence": 0.7, "arousal": 0.3, "focus": 0.5}}

Text:
{prompt}"""


def get_sentiment_prompt(prompt: str) -> str:
    return SENTIMENT_TEMPLATE.format(prompt=prompt)
