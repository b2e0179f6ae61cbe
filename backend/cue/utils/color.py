"""HSB color helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

GOLDEN_RATIO_CONJUGATE = 0.618033988749895


def clamp01(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


def golden_hue(index: int) -> float:
    """Low-discrepancy hue for the ``index``-th item: index * φ⁻¹ mod 1."""
    return (index * GOLDEN_RATIO_CONJUGATE) % 1.0


def distinct_color(index: int, saturation: float, brightness: float) -> tuple[float, float, float]:
    """HSB color whose hue is well separated from every other index."""
    return (golden_hue(index), clamp01(saturation), clamp01(brightness))


def hsb_to_rgb(h: float, s: float, b: float) -> tuple[float, float, float]:
    """Scalar HSB → RGB, all channels in [0, 1]."""
    rgb = hsb_to_rgb_array(np.array([[h, s, b]], dtype=np.float64))[0]
    return (float(rgb[0]), float(rgb[1]), float(rgb[2]))


def hsb_to_rgb_array(hsb: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorised HSB → RGB over the last axis.

    Only floor, multiply, add and comparisons are used, so each output
    element depends on its own input element alone.
    """
    h = np.mod(hsb[..., 0], 1.0) * 6.0
    s = np.clip(hsb[..., 1], 0.0, 1.0)
    v = np.clip(hsb[..., 2], 0.0, 1.0)

    sector = np.floor(h)
    f = h - sector
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    sector = sector.astype(np.int64) % 6
    r = np.choose(sector, [v, q, p, p, t, v])
    g = np.choose(sector, [t, v, v, q, p, p])
    b = np.choose(sector, [p, p, t, v, v, q])
    return np.stack([r, g, b], axis=-1)
