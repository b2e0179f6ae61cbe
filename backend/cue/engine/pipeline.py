"""Generation request surface — one call per image.

``generate()`` resolves a configuration, lays out the canonical shapes at
the requested resolution and renders a preview right away. The returned
``Generation.export()`` performs the full-resolution render on demand,
segmenting once and tiling when the image is larger than one surface.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from cue.engine.compositor import EffectParams, GlassCompositor
from cue.engine.config import ColorConfig, RenderSettings, ResolvedConfig
from cue.engine.context import RegionData, SentimentVector, ShapeSet
from cue.engine.generators import generate as generate_shapes
from cue.engine.resolver import resolve
from cue.engine.segmentation import segment
from cue.engine.template import DEFAULT_TEMPLATE, ConfigTemplate
from cue.engine.tiling import ProgressCallback, needs_tiling, render_single, render_tiled
from cue.utils.rasterizer import rasterize_boundaries

logger = logging.getLogger(__name__)


def clamp_dimensions(width: int, height: int, settings: RenderSettings) -> tuple[int, int]:
    lo, hi = settings.min_dimension, settings.max_dimension
    return max(lo, min(hi, int(width))), max(lo, min(hi, int(height)))


def preview_scale(width: int, height: int, preview_max_dim: int) -> float:
    """Factor that fits the longer side into ``preview_max_dim``; never upscales."""
    return min(1.0, preview_max_dim / max(width, height))


def segment_shapes(shapes: ShapeSet, colors: ColorConfig, palette_seed: int) -> RegionData:
    """Rasterize and segment a shape set at its own resolution.

    The palette RNG is re-seeded per call so the preview and the export
    discover matching colors.
    """
    boundary = rasterize_boundaries(shapes)
    return segment(boundary, colors, np.random.default_rng(palette_seed))


@dataclass
class Generation:
    """A resolved, laid-out image with its preview already rendered."""

    width: int
    height: int
    sentiment: SentimentVector
    config: ResolvedConfig
    shapes: ShapeSet
    params: EffectParams
    palette_seed: int
    settings: RenderSettings
    preview: NDArray[np.uint8] = field(repr=False)
    preview_scale: float = 1.0
    region_count: int = 0

    def export(
        self,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> NDArray[np.uint8]:
        """Full-resolution RGBA8 pixels, (height, width, 4)."""
        start = time.perf_counter()
        regions = segment_shapes(self.shapes, self.config.colors, self.palette_seed)
        s = self.settings

        with GlassCompositor(s.compositor_workers, s.compositor_band_rows) as compositor:
            if needs_tiling(self.width, self.height, s.max_tile_dim, s.max_surface_pixels):
                # Pixel budget can bind before the side limit
                tile_dim = min(s.max_tile_dim, int(s.max_surface_pixels**0.5))
                pixels = render_tiled(
                    compositor,
                    regions,
                    self.shapes,
                    self.params,
                    tile_dim,
                    on_progress=on_progress,
                    cancel_event=cancel_event,
                )
            else:
                pixels = render_single(compositor, regions, self.shapes, self.params)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Exported %dx%d in %.0fms", self.width, self.height, elapsed)
        return pixels


def generate(
    width: int,
    height: int,
    sentiment: SentimentVector | None = None,
    *,
    template: ConfigTemplate = DEFAULT_TEMPLATE,
    seed: int | None = None,
    settings: RenderSettings | None = None,
) -> Generation:
    """Resolve, lay out and preview one image. Out-of-range sizes clamp."""
    settings = settings or RenderSettings()
    width, height = clamp_dimensions(width, height, settings)
    sentiment = (sentiment or SentimentVector.neutral()).clamped()
    rng = np.random.default_rng(seed)

    t0 = time.perf_counter()
    config = resolve(template, sentiment, rng)
    shapes = generate_shapes(config, width, height, rng)
    noise_seed = int(rng.integers(0, 2**31))
    palette_seed = int(rng.integers(0, 2**31))
    params = EffectParams.from_config(config, noise_seed)
    t1 = time.perf_counter()

    scale = preview_scale(width, height, settings.preview_max_dim)
    preview_w = max(1, round(width * scale))
    preview_h = max(1, round(height * scale))
    preview_shapes = shapes.scaled(scale, preview_w, preview_h) if scale < 1.0 else shapes
    regions = segment_shapes(preview_shapes, config.colors, palette_seed)
    t2 = time.perf_counter()

    with GlassCompositor(settings.compositor_workers, settings.compositor_band_rows) as compositor:
        preview = render_single(compositor, regions, preview_shapes, params.scaled(scale))
    t3 = time.perf_counter()

    logger.info(
        "Generation %dx%d: resolve+shapes=%.0fms segment=%.0fms preview(%dx%d)=%.0fms",
        width,
        height,
        (t1 - t0) * 1000,
        (t2 - t1) * 1000,
        preview_w,
        preview_h,
        (t3 - t2) * 1000,
    )
    return Generation(
        width=width,
        height=height,
        sentiment=sentiment,
        config=config,
        shapes=shapes,
        params=params,
        palette_seed=palette_seed,
        settings=settings,
        preview=preview,
        preview_scale=scale,
        region_count=regions.region_count,
    )
