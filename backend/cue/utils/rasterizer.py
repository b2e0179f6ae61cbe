"""Boundary rasterizer — draws shape outlines into a monochrome buffer.

The buffer only answers "ink or blank" per pixel; stroke color is irrelevant.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

if TYPE_CHECKING:
    from cue.engine.context import Circle, Line, ShapeSet

logger = logging.getLogger(__name__)

# Buffer values: blank canvas is white, strokes are black.
_BLANK = 255
_INK = 0


def _stroke_width(weight: float) -> int:
    return max(1, int(round(weight)))


def draw_line(draw: ImageDraw.ImageDraw, line: Line) -> None:
    draw.line([line.start, line.end], fill=_INK, width=_stroke_width(line.weight))


def draw_circle(draw: ImageDraw.ImageDraw, circle: Circle) -> None:
    """Unfilled ring whose stroke straddles the radius."""
    width = _stroke_width(circle.weight)
    cx, cy = circle.center
    # PIL strokes ellipses inward from the bounding box; grow the box by half
    # the stroke so the ring is centered on the radius.
    outer = circle.radius + width / 2.0
    box = [cx - outer, cy - outer, cx + outer, cy + outer]
    draw.ellipse(box, outline=_INK, width=width)


def rasterize_boundaries(shapes: ShapeSet) -> NDArray[np.uint8]:
    """Rasterize every shape's stroke outline into an (H, W) uint8 buffer.

    Returns:
        Array where 255 = blank and dark values = boundary ink.
    """
    image = Image.new("L", (shapes.width, shapes.height), color=_BLANK)
    draw = ImageDraw.Draw(image)

    for line in shapes.lines:
        draw_line(draw, line)
    for circle in shapes.circles:
        draw_circle(draw, circle)

    buffer = np.asarray(image, dtype=np.uint8)
    logger.debug(
        "Rasterized %d lines, %d circles into %dx%d boundary buffer",
        len(shapes.lines),
        len(shapes.circles),
        shapes.width,
        shapes.height,
    )
    return buffer
