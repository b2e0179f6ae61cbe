"""Math helpers — smoothstep, smooth minimum, segment distance. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def smoothstep(edge0: float, edge1: float, x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hermite step between edge0 and edge1 (GLSL semantics)."""
    if edge1 == edge0:
        return np.where(x < edge0, 0.0, 1.0)
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def smin(a: NDArray[np.float64], b: NDArray[np.float64], k: float) -> NDArray[np.float64]:
    """Polynomial smooth minimum.

    smin(a, b, k) = min(a, b) - (max(k - |a - b|, 0) / k)² · k / 4

    Within ``k`` of each other the two distances blend into a rounded
    junction; further apart it is exactly ``min``. ``k <= 0`` degrades to min.
    """
    if k <= 0:
        return np.minimum(a, b)
    h = np.maximum(k - np.abs(a - b), 0.0) / k
    return np.minimum(a, b) - h * h * k * 0.25


def segment_distance(
    px: NDArray[np.float64],
    py: NDArray[np.float64],
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> NDArray[np.float64]:
    """Distance from each point to the segment (x1, y1)-(x2, y2)."""
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    ax = px - x1
    ay = py - y1
    if length_sq < 1e-12:
        return np.sqrt(ax * ax + ay * ay)

    t = np.clip((ax * dx + ay * dy) / length_sq, 0.0, 1.0)
    cx = ax - t * dx
    cy = ay - t * dy
    return np.sqrt(cx * cx + cy * cy)


def ring_distance(
    px: NDArray[np.float64],
    py: NDArray[np.float64],
    cx: float,
    cy: float,
    radius: float,
) -> NDArray[np.float64]:
    """Distance from each point to a circle outline: | ‖p - c‖ - r |."""
    ax = px - cx
    ay = py - cy
    return np.abs(np.sqrt(ax * ax + ay * ay) - radius)


def round_half_up(x: float) -> int:
    """Nearest integer with halves rounded up (2.5 → 3), unlike banker's ``round``."""
    return math.floor(x + 0.5)
