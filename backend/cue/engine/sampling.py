"""Gamma and Beta sampling on an explicit numpy random source."""

from __future__ import annotations

import math

import numpy as np


def sample_gamma(rng: np.random.Generator, shape: float) -> float:
    """Draw from Gamma(shape, 1) using Marsaglia and Tsang's rejection method.

    Valid for shape >= 1. Smaller shapes are boosted:
    Gamma(a) = Gamma(a + 1) * U^(1/a).
    """
    if shape <= 0:
        raise ValueError(f"Gamma shape must be positive, got {shape}")
    if shape < 1:
        return sample_gamma(rng, shape + 1) * float(rng.random()) ** (1.0 / shape)

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)

    while True:
        x = float(rng.standard_normal())
        v = 1.0 + c * x
        while v <= 0:
            x = float(rng.standard_normal())
            v = 1.0 + c * x

        v = v * v * v
        u = float(rng.random())

        # Squeeze test accepts most samples without the log
        if u < 1.0 - 0.0331 * (x * x) * (x * x):
            return d * v
        if u > 0 and math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v


def sample_beta(rng: np.random.Generator, alpha: float, beta: float) -> float:
    """Draw from Beta(alpha, beta) in [0, 1] as Ga / (Ga + Gb)."""
    if alpha == 1 and beta == 1:
        return float(rng.random())

    ga = sample_gamma(rng, alpha)
    gb = sample_gamma(rng, beta)
    total = ga + gb
    if total <= 0:
        # Both draws underflowed (tiny shapes); fall back to the mean
        return alpha / (alpha + beta)
    return ga / total
