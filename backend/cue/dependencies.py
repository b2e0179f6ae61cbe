"""FastAPI dependency injection."""

from __future__ import annotations

from cue.config import settings
from cue.engine.config import RenderSettings


def get_render_settings() -> RenderSettings:
    return settings.render_settings()
