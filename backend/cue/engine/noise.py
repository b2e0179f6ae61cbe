"""Position-only noise.

Every function here is a pure function of (x, y, seed). Lattice values come
from an integer hash, and interpolation uses only add, multiply and floor,
so a pixel gets the same value whether it is evaluated in a full-image pass
or as part of any tile.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

_MASK32 = 0xFFFFFFFF
_PRIME_X = np.uint32(0x8DA6B343)
_PRIME_Y = np.uint32(0xD8163841)
_PRIME_SEED = 0xCB1AB31F
_MIX_A = np.uint32(0x7FEB352D)
_MIX_B = np.uint32(0x846CA68B)
_INV_2_32 = 1.0 / 4294967296.0


def _to_u32(v: NDArray[np.int64]) -> NDArray[np.uint32]:
    return (v & _MASK32).astype(np.uint32)


def hash2(ix: NDArray[np.int64], iy: NDArray[np.int64], seed: int) -> NDArray[np.float64]:
    """Hash integer lattice coordinates to [0, 1)."""
    seed_term = np.uint32((int(seed) * _PRIME_SEED) & _MASK32)
    h = (_to_u32(ix) * _PRIME_X) ^ (_to_u32(iy) * _PRIME_Y) ^ seed_term
    # lowbias32 avalanche
    h ^= h >> np.uint32(16)
    h *= _MIX_A
    h ^= h >> np.uint32(15)
    h *= _MIX_B
    h ^= h >> np.uint32(16)
    return h.astype(np.float64) * _INV_2_32


def value_noise(x: NDArray[np.float64], y: NDArray[np.float64], seed: int) -> NDArray[np.float64]:
    """Smooth value noise in [0, 1) with unit lattice spacing."""
    fx0 = np.floor(x)
    fy0 = np.floor(y)
    ix = fx0.astype(np.int64)
    iy = fy0.astype(np.int64)
    tx = x - fx0
    ty = y - fy0
    ux = tx * tx * (3.0 - 2.0 * tx)
    uy = ty * ty * (3.0 - 2.0 * ty)

    a = hash2(ix, iy, seed)
    b = hash2(ix + 1, iy, seed)
    c = hash2(ix, iy + 1, seed)
    d = hash2(ix + 1, iy + 1, seed)

    top = a + (b - a) * ux
    bottom = c + (d - c) * ux
    return top + (bottom - top) * uy


def fractal_noise(
    x: NDArray[np.float64],
    y: NDArray[np.float64],
    seed: int,
    octaves: int = 4,
) -> NDArray[np.float64]:
    """Fractal sum of value noise (lacunarity 2, gain 0.5), normalised to [0, 1)."""
    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0
    norm = 0.0
    for octave in range(octaves):
        total += amplitude * value_noise(x * frequency, y * frequency, seed + octave * 101)
        norm += amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return total / norm


def grain(px: NDArray[np.float64], py: NDArray[np.float64], seed: int) -> NDArray[np.float64]:
    """Independent per-pixel value in [0, 1) keyed by the integer pixel position."""
    return hash2(np.floor(px).astype(np.int64), np.floor(py).astype(np.int64), seed)
