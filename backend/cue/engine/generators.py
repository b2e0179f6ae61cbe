"""Shape generator — ResolvedConfig + canvas size → lines and circles.

Lines always run frame-to-frame: each picks two distinct canvas edges and a
uniform point along each, so every boundary closes against the frame.
Circles are placed with their centers at least radius × 0.5 from each edge.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from cue.engine.config import ColorConfig, ResolvedConfig, ShapeConfig
from cue.engine.constants import CIRCLE_HUE_OFFSET, CIRCLE_MARGIN_RATIO, SHAPE_COLOR_VARIANCE
from cue.engine.context import HSB, Circle, Line, ShapeSet
from cue.utils.color import distinct_color
from cue.utils.math_helpers import round_half_up

logger = logging.getLogger(__name__)

EDGES = ("top", "bottom", "left", "right")


def resolution_scale(width: int, height: int, reference: tuple[int, int]) -> tuple[float, float]:
    """Scale factors relative to the reference resolution.

    Returns:
        (count_scale, size_scale): counts scale with sqrt(area), sizes with
        the shorter side.
    """
    ref_w, ref_h = reference
    count_scale = math.sqrt((width * height) / (ref_w * ref_h))
    size_scale = min(width, height) / min(ref_w, ref_h)
    return count_scale, size_scale


def point_on_edge(rng: np.random.Generator, edge: str, width: int, height: int) -> tuple[float, float]:
    match edge:
        case "top":
            return (float(rng.uniform(0, width)), 0.0)
        case "bottom":
            return (float(rng.uniform(0, width)), float(height))
        case "left":
            return (0.0, float(rng.uniform(0, height)))
        case "right":
            return (float(width), float(rng.uniform(0, height)))
        case _:
            raise ValueError(f"Unknown edge: {edge!r}")


def _jittered_color(rng: np.random.Generator, index: int, colors: ColorConfig) -> HSB:
    saturation = colors.saturation + rng.uniform(-SHAPE_COLOR_VARIANCE, SHAPE_COLOR_VARIANCE)
    brightness = colors.brightness + rng.uniform(-SHAPE_COLOR_VARIANCE, SHAPE_COLOR_VARIANCE)
    return distinct_color(index, saturation, brightness)


def generate_line(
    rng: np.random.Generator,
    index: int,
    width: int,
    height: int,
    config: ShapeConfig,
    colors: ColorConfig,
) -> Line:
    """One edge-to-edge line between two distinct, uniformly chosen edges."""
    start_edge, end_edge = rng.choice(len(EDGES), size=2, replace=False)
    color = _jittered_color(rng, index, colors)
    return Line(
        start=point_on_edge(rng, EDGES[start_edge], width, height),
        end=point_on_edge(rng, EDGES[end_edge], width, height),
        weight=config.weight,
        color=color,
    )


def _radius_bounds(config: ShapeConfig, width: int, height: int, size_scale: float) -> tuple[float, float]:
    r_min = config.radius_min if config.radius_min is not None else 200.0
    r_max = config.radius_max if config.radius_max is not None else 600.0
    if config.radius_is_fraction:
        side = min(width, height)
        return r_min * side, r_max * side
    return r_min * size_scale, r_max * size_scale


def generate_circle(
    rng: np.random.Generator,
    index: int,
    width: int,
    height: int,
    config: ShapeConfig,
    colors: ColorConfig,
    size_scale: float = 1.0,
) -> Circle:
    r_min, r_max = _radius_bounds(config, width, height, size_scale)
    radius = float(rng.uniform(min(r_min, r_max), max(r_min, r_max)))

    # Keep the center radius * 0.5 away from each edge; on canvases too small
    # for that margin the center collapses to the middle of the axis.
    margin_x = min(radius * CIRCLE_MARGIN_RATIO, width / 2.0)
    margin_y = min(radius * CIRCLE_MARGIN_RATIO, height / 2.0)
    center = (
        float(rng.uniform(margin_x, width - margin_x)),
        float(rng.uniform(margin_y, height - margin_y)),
    )

    color = _jittered_color(rng, index + CIRCLE_HUE_OFFSET, colors)
    return Circle(center=center, radius=radius, weight=config.weight, color=color)


def _scaled_count(config: ShapeConfig, count_scale: float, minimum: int) -> int:
    if not config.scale_counts:
        return max(minimum, config.count)
    return max(minimum, round_half_up(config.count * count_scale))


def generate(
    config: ResolvedConfig,
    width: int,
    height: int,
    rng: np.random.Generator | None = None,
) -> ShapeSet:
    """Generate the canonical shape set for a ``width`` × ``height`` canvas."""
    rng = rng if rng is not None else np.random.default_rng()
    count_scale, size_scale = resolution_scale(width, height, config.reference_resolution)

    n_lines = _scaled_count(config.lines, count_scale, minimum=1)
    n_circles = _scaled_count(config.circles, count_scale, minimum=0)

    lines = tuple(
        generate_line(rng, i, width, height, config.lines, config.colors) for i in range(n_lines)
    )
    circles = tuple(
        generate_circle(rng, i, width, height, config.circles, config.colors, size_scale)
        for i in range(n_circles)
    )

    logger.info(
        "Generated %d lines, %d circles for %dx%d (size scale %.3f)",
        len(lines),
        len(circles),
        width,
        height,
        size_scale,
    )
    return ShapeSet(width=width, height=height, lines=lines, circles=circles)
