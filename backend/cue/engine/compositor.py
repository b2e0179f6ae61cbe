"""Glass compositor — region raster + shape list → shaded RGBA pixels.

Per pixel, in order:
1. Leading distance: wobble-warped sample position, smooth-minimum union of
   segment and ring distances, plus edge irregularity.
2. Base color: palette lookup by region id; boundary pixels take the
   leading color.
3. Watercolor bleed: low-frequency hue and saturation drift keyed by
   position and region id.
4. Stained glass light: center glow away from leading, darkening near it.
5. Glass texture: fractal noise mixed with a finer single octave.
6. Leading blend over a ±1px antialiasing band, with inward shading.
7. Grain, clamp, and 8-bit output.

Every term is a function of the global pixel position and the noise seed
only. Rendering a tile with its offset gives the same pixels as the same
rectangle of a full-image pass.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace

import numpy as np
from numpy.typing import NDArray

from cue.engine.config import ResolvedConfig
from cue.engine.constants import (
    BOUNDARY_ID,
    FAR_DISTANCE,
    LEADING_AA,
    MAX_SHADER_CIRCLES,
    MAX_SHADER_LINES,
)
from cue.engine.context import RegionData, ShapeSet
from cue.engine.errors import CompositorNotInitializedError
from cue.engine.noise import fractal_noise, grain, value_noise
from cue.engine.surface import RenderSurface
from cue.utils.color import hsb_to_rgb_array
from cue.utils.math_helpers import ring_distance, segment_distance, smin, smoothstep

logger = logging.getLogger(__name__)

# Noise streams, offset from the generation's noise seed
_SEED_WOBBLE_X = 11
_SEED_WOBBLE_Y = 12
_SEED_IRREGULARITY = 13
_SEED_BLEED_HUE = 21
_SEED_BLEED_SAT = 22
_SEED_TEXTURE = 31
_SEED_TEXTURE_FINE = 32
_SEED_GRAIN = 41

# Texture frequency in cycles per pixel is noise_scale / _TEXTURE_PERIOD
_TEXTURE_PERIOD = 100.0


@dataclass(frozen=True)
class EffectParams:
    """Uniform inputs to the compositor for one render."""

    center_glow: float
    edge_darken: float
    glow_falloff: float
    noise_scale: float
    noise_intensity: float
    grain_intensity: float
    wobble_amount: float
    wobble_scale: float
    color_bleed: float
    saturation_bleed: float
    bleed_scale: float
    edge_irregularity: float
    leading_color: tuple[float, float, float]
    leading_thickness: float
    rounding_radius: float
    noise_seed: int

    @classmethod
    def from_config(cls, config: ResolvedConfig, noise_seed: int) -> EffectParams:
        sg = config.stained_glass
        wc = config.watercolor
        return cls(
            center_glow=sg.center_glow,
            edge_darken=sg.edge_darken,
            glow_falloff=sg.glow_falloff,
            noise_scale=sg.noise_scale,
            noise_intensity=sg.noise_intensity,
            grain_intensity=wc.grain_intensity,
            wobble_amount=wc.wobble_amount,
            wobble_scale=wc.wobble_scale,
            color_bleed=wc.color_bleed,
            saturation_bleed=wc.saturation_bleed,
            bleed_scale=wc.bleed_scale,
            edge_irregularity=wc.edge_irregularity,
            leading_color=config.leading.color,
            leading_thickness=config.leading.thickness,
            rounding_radius=config.leading.rounding_radius,
            noise_seed=int(noise_seed),
        )

    def scaled(self, factor: float) -> EffectParams:
        """Params for a canvas ``factor`` times the full-resolution size.

        Pixel-length parameters are multiplied by ``factor``; spatial
        frequencies are divided by it, so the preview looks like a
        downscaled export.
        """
        if factor == 1.0:
            return self
        return replace(
            self,
            glow_falloff=self.glow_falloff * factor,
            leading_thickness=self.leading_thickness * factor,
            rounding_radius=self.rounding_radius * factor,
            wobble_amount=self.wobble_amount * factor,
            wobble_scale=self.wobble_scale / factor,
            bleed_scale=self.bleed_scale / factor,
            noise_scale=self.noise_scale / factor,
        )


def pack_shapes(shapes: ShapeSet) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Line and circle arrays truncated to the compositor's uniform capacity."""
    lines = shapes.line_array()
    circles = shapes.circle_array()
    if len(lines) > MAX_SHADER_LINES:
        logger.warning("Truncating %d lines to %d for compositing", len(lines), MAX_SHADER_LINES)
        lines = lines[:MAX_SHADER_LINES]
    if len(circles) > MAX_SHADER_CIRCLES:
        logger.warning("Truncating %d circles to %d for compositing", len(circles), MAX_SHADER_CIRCLES)
        circles = circles[:MAX_SHADER_CIRCLES]
    return lines, circles


def leading_distance(
    px: NDArray[np.float64],
    py: NDArray[np.float64],
    lines: NDArray[np.float64],
    circles: NDArray[np.float64],
    rounding_radius: float,
) -> NDArray[np.float64]:
    """Smooth-union distance from each point to the nearest leading centerline."""
    dist: NDArray[np.float64] | None = None
    for x1, y1, x2, y2 in lines:
        d = segment_distance(px, py, x1, y1, x2, y2)
        dist = d if dist is None else smin(dist, d, rounding_radius)
    for cx, cy, r in circles:
        d = ring_distance(px, py, cx, cy, r)
        dist = d if dist is None else smin(dist, d, rounding_radius)
    if dist is None:
        return np.full(np.broadcast(px, py).shape, FAR_DISTANCE, dtype=np.float64)
    return dist


def shade(
    ids: NDArray[np.uint8],
    palette: NDArray[np.float64],
    lines: NDArray[np.float64],
    circles: NDArray[np.float64],
    params: EffectParams,
    offset: tuple[int, int],
) -> NDArray[np.float64]:
    """RGB in [0, 1] for a block of region ids whose top-left is at global ``offset``."""
    h, w = ids.shape
    ox, oy = offset
    seed = params.noise_seed
    xs = ox + np.arange(w, dtype=np.float64) + 0.5
    ys = oy + np.arange(h, dtype=np.float64) + 0.5
    px, py = np.meshgrid(xs, ys)

    # 1. leading distance
    sx, sy = px, py
    if params.wobble_amount > 0:
        wx = px * params.wobble_scale
        wy = py * params.wobble_scale
        sx = px + (value_noise(wx, wy, seed + _SEED_WOBBLE_X) - 0.5) * 2.0 * params.wobble_amount
        sy = py + (value_noise(wx, wy, seed + _SEED_WOBBLE_Y) - 0.5) * 2.0 * params.wobble_amount
    dist = leading_distance(sx, sy, lines, circles, params.rounding_radius)
    if params.edge_irregularity > 0:
        f = params.wobble_scale * 4.0
        n = value_noise(px * f, py * f, seed + _SEED_IRREGULARITY)
        dist = dist + (n - 0.5) * params.edge_irregularity * params.leading_thickness

    # 2. base color
    boundary = ids == BOUNDARY_ID
    hsb = palette[ids]

    # 3. watercolor bleed
    region = ids.astype(np.float64)
    bx = px * params.bleed_scale + region * 37.17
    by = py * params.bleed_scale + region * 19.73
    if params.color_bleed > 0:
        hsb[..., 0] += (fractal_noise(bx, by, seed + _SEED_BLEED_HUE, octaves=2) - 0.5) * params.color_bleed
    if params.saturation_bleed > 0:
        drift = fractal_noise(bx + 5.2, by + 1.3, seed + _SEED_BLEED_SAT, octaves=2) - 0.5
        hsb[..., 1] = np.clip(hsb[..., 1] + drift * 2.0 * params.saturation_bleed, 0.0, 1.0)
    rgb = hsb_to_rgb_array(hsb)

    # 4. stained glass light
    glow = smoothstep(0.0, params.glow_falloff, dist)
    rgb = rgb + (1.0 - rgb) * (glow * params.center_glow)[..., None]
    near = 1.0 - smoothstep(
        params.leading_thickness,
        params.leading_thickness + params.glow_falloff * 0.3,
        dist,
    )
    rgb = rgb * (1.0 - params.edge_darken * near)[..., None]

    # 5. glass texture
    f = params.noise_scale / _TEXTURE_PERIOD
    texture = fractal_noise(px * f, py * f, seed + _SEED_TEXTURE) * 0.65
    texture += value_noise(px * f * 4.0, py * f * 4.0, seed + _SEED_TEXTURE_FINE) * 0.35
    t = ((texture - 0.5) * params.noise_intensity)[..., None]
    gray = (rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114)[..., None]
    rgb = gray + (rgb - gray) * (1.0 + t)
    rgb = rgb * (1.0 + t)

    leading = np.asarray(params.leading_color, dtype=np.float64)
    rgb = np.where(boundary[..., None], leading, rgb)

    # 6. leading blend
    th = params.leading_thickness
    blend = (1.0 - smoothstep(th - LEADING_AA, th + LEADING_AA, dist))[..., None]
    inner = 1.0 - np.clip(dist / max(th, 1e-6), 0.0, 1.0)
    lead_rgb = leading * (0.7 + 0.6 * inner)[..., None]
    rgb = rgb * (1.0 - blend) + lead_rgb * blend

    # 7. grain
    g = (grain(px, py, seed + _SEED_GRAIN) - 0.5) * params.grain_intensity
    rgb = rgb + g[..., None]
    return np.clip(rgb, 0.0, 1.0)


def to_rgba8(rgb: NDArray[np.float64]) -> NDArray[np.uint8]:
    out = np.empty((*rgb.shape[:2], 4), dtype=np.uint8)
    out[..., :3] = np.floor(rgb * 255.0 + 0.5).astype(np.uint8)
    out[..., 3] = 255
    return out


class GlassCompositor:
    """Composites region rasters onto a provided surface.

    Work is split into horizontal bands and shaded on a thread pool created
    by ``init()``. Calling ``render()`` before ``init()`` raises
    CompositorNotInitializedError.
    """

    def __init__(self, workers: int = 4, band_rows: int = 128) -> None:
        self.workers = max(1, workers)
        self.band_rows = max(1, band_rows)
        self._executor: ThreadPoolExecutor | None = None

    @property
    def initialized(self) -> bool:
        return self._executor is not None

    def init(self) -> None:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="cue-compositor",
            )

    def dispose(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> GlassCompositor:
        self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def render(
        self,
        surface: RenderSurface,
        regions: RegionData,
        shapes: ShapeSet,
        params: EffectParams,
        offset: tuple[int, int] = (0, 0),
    ) -> NDArray[np.uint8]:
        """Shade ``regions`` into the top-left of ``surface`` and return that view.

        ``offset`` is the global position of the region raster's first pixel.
        """
        if not self.initialized:
            raise CompositorNotInitializedError()

        start = time.perf_counter()
        height, width = regions.ids.shape
        target = surface.view(width, height)
        palette = regions.palette_array()
        lines, circles = pack_shapes(shapes)
        ox, oy = offset

        def run_band(y0: int) -> None:
            y1 = min(y0 + self.band_rows, height)
            rgb = shade(regions.ids[y0:y1], palette, lines, circles, params, (ox, oy + y0))
            target[y0:y1] = to_rgba8(rgb)

        # list() re-raises the first worker exception
        list(self._executor.map(run_band, range(0, height, self.band_rows)))

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            "Composited %dx%d at (%d, %d) in %.0fms",
            width,
            height,
            ox,
            oy,
            elapsed,
        )
        return target
