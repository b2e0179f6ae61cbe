"""Tile planning and tiled compositing for exports larger than one surface."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from cue.engine.compositor import EffectParams, GlassCompositor
from cue.engine.context import RegionData, ShapeSet, TileDescriptor, TileProgress
from cue.engine.errors import ExportCancelledError
from cue.engine.surface import RenderSurface, allocate_pixels

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TileProgress], None]


def plan_tiles(width: int, height: int, max_tile_dim: int) -> list[TileDescriptor]:
    """Row-major grid of tiles, each at most ``max_tile_dim`` per side.

    Tiles are disjoint and their union is exactly the full rectangle; edge
    tiles are clipped.
    """
    if max_tile_dim <= 0:
        raise ValueError(f"max_tile_dim must be positive, got {max_tile_dim}")
    tiles: list[TileDescriptor] = []
    for y in range(0, height, max_tile_dim):
        th = min(max_tile_dim, height - y)
        for x in range(0, width, max_tile_dim):
            tw = min(max_tile_dim, width - x)
            tiles.append(TileDescriptor(x=x, y=y, width=tw, height=th))
    return tiles


def needs_tiling(width: int, height: int, max_tile_dim: int, max_pixels: int | None = None) -> bool:
    """Whether a single surface cannot hold the whole image."""
    if width > max_tile_dim or height > max_tile_dim:
        return True
    return max_pixels is not None and width * height > max_pixels


def render_single(
    compositor: GlassCompositor,
    regions: RegionData,
    shapes: ShapeSet,
    params: EffectParams,
    surface: RenderSurface | None = None,
) -> NDArray[np.uint8]:
    """Composite the whole raster in one pass and return a copy of the pixels."""
    surface = surface if surface is not None else RenderSurface(regions.width, regions.height)
    return compositor.render(surface, regions, shapes, params).copy()


def render_tiled(
    compositor: GlassCompositor,
    regions: RegionData,
    shapes: ShapeSet,
    params: EffectParams,
    max_tile_dim: int,
    surface: RenderSurface | None = None,
    on_progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> NDArray[np.uint8]:
    """Composite tile by tile into one full-size output buffer.

    ``regions`` is the full-resolution raster from a single segmentation
    pass; each tile crops it, so region ids and palette are identical across
    tiles. One surface is reused for every tile. Cancellation is checked
    before each tile and raises ExportCancelledError; the partial output is
    discarded.
    """
    width, height = regions.width, regions.height
    tiles = plan_tiles(width, height, max_tile_dim)
    if surface is None:
        surface = RenderSurface(min(max_tile_dim, width), min(max_tile_dim, height))
    output = allocate_pixels(width, height)

    start = time.perf_counter()
    logger.info("Tiled render %dx%d: %d tiles of up to %dpx", width, height, len(tiles), max_tile_dim)

    for index, tile in enumerate(tiles):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Tiled render cancelled after %d/%d tiles", index, len(tiles))
            raise ExportCancelledError(f"Export cancelled after {index} of {len(tiles)} tiles")

        pixels = compositor.render(surface, regions.crop(tile), shapes, params, offset=(tile.x, tile.y))
        output[tile.y : tile.y_end, tile.x : tile.x_end] = pixels

        if on_progress is not None:
            on_progress(TileProgress(index=index, total=len(tiles), tile=tile))

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("Tiled render finished in %.0fms", elapsed)
    return output
