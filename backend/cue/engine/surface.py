"""Render surfaces — bounded RGBA8 pixel buffers.

A surface is provisioned by the caller and handed to the compositor for
each invocation; the engine never pools surfaces itself.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from cue.engine.errors import SurfaceAllocationError

logger = logging.getLogger(__name__)


def allocate_pixels(width: int, height: int) -> NDArray[np.uint8]:
    """Zeroed (H, W, 4) RGBA8 buffer, or SurfaceAllocationError with the attempted size."""
    if width < 0 or height < 0:
        raise SurfaceAllocationError(width, height, "negative dimensions")
    try:
        return np.zeros((height, width, 4), dtype=np.uint8)
    except (MemoryError, ValueError) as e:
        logger.error("Allocation of %dx%d RGBA buffer failed: %s", width, height, e)
        raise SurfaceAllocationError(width, height, str(e)) from e


class RenderSurface:
    """Drawable RGBA8 surface with a fixed pixel capacity."""

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.pixels = allocate_pixels(self.width, self.height)

    def view(self, width: int, height: int) -> NDArray[np.uint8]:
        """Top-left ``width`` × ``height`` window of the surface."""
        if width > self.width or height > self.height:
            raise SurfaceAllocationError(
                width,
                height,
                f"exceeds surface capacity {self.width}x{self.height}",
            )
        return self.pixels[:height, :width]

    def read_pixels(self, width: int | None = None, height: int | None = None) -> bytes:
        """Raw RGBA8 bytes of the top-left window, row-major."""
        w = self.width if width is None else width
        h = self.height if height is None else height
        return np.ascontiguousarray(self.view(w, h)).tobytes()
