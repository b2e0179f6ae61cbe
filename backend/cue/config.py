"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from cue.engine.config import RenderSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    cue_env: str = "development"
    cue_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Sentiment model
    model_sentiment: str = "claude-haiku-4-5-20251001"

    # Render limits
    min_dimension: int = 100
    max_dimension: int = 8192
    max_tile_dim: int = 2048
    max_surface_pixels: int = 2048 * 2048
    preview_max_dim: int = 1200
    compositor_workers: int = 4
    compositor_band_rows: int = 128

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def render_settings(self) -> RenderSettings:
        return RenderSettings(
            min_dimension=self.min_dimension,
            max_dimension=self.max_dimension,
            max_tile_dim=self.max_tile_dim,
            max_surface_pixels=self.max_surface_pixels,
            preview_max_dim=self.preview_max_dim,
            compositor_workers=self.compositor_workers,
            compositor_band_rows=self.compositor_band_rows,
        )


settings = Settings()
