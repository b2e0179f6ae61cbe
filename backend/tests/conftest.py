"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from cue.engine.compositor import EffectParams, GlassCompositor
from cue.engine.config import (
    ColorConfig,
    LeadingConfig,
    RenderSettings,
    ResolvedConfig,
    ShapeConfig,
    StainedGlassEffect,
    WatercolorEffect,
)
from cue.engine.context import Circle, Line, ShapeSet

COLORS = ColorConfig(hue_base=0.55, hue_range=0.2, saturation=0.6, brightness=0.75)

# Small limits so tiled paths run on tiny images
SMALL_SETTINGS = RenderSettings(
    min_dimension=100,
    max_dimension=8192,
    max_tile_dim=64,
    max_surface_pixels=64 * 64,
    preview_max_dim=80,
    compositor_workers=2,
    compositor_band_rows=16,
)


def make_config(
    lines: ShapeConfig | None = None,
    circles: ShapeConfig | None = None,
    colors: ColorConfig = COLORS,
) -> ResolvedConfig:
    return ResolvedConfig(
        lines=lines or ShapeConfig(count=3, weight=6),
        circles=circles or ShapeConfig(count=1, weight=6, radius_min=20, radius_max=40),
        colors=colors,
        stained_glass=StainedGlassEffect(
            center_glow=0.3,
            edge_darken=0.1,
            glow_falloff=30,
            noise_scale=2.5,
            noise_intensity=0.15,
        ),
        watercolor=WatercolorEffect(
            grain_intensity=0.02,
            wobble_amount=3,
            wobble_scale=0.02,
            color_bleed=0.1,
            saturation_bleed=0.1,
            bleed_scale=0.01,
            edge_irregularity=0.2,
        ),
        leading=LeadingConfig(color=(0.08, 0.06, 0.04), rounding_radius=8, thickness=3),
        reference_resolution=(1920, 1080),
    )


def make_params(**overrides) -> EffectParams:
    params = EffectParams.from_config(make_config(), noise_seed=1234)
    if not overrides:
        return params
    from dataclasses import replace

    return replace(params, **overrides)


def sample_shapes(width: int = 150, height: int = 110) -> ShapeSet:
    return ShapeSet(
        width=width,
        height=height,
        lines=(
            Line(start=(0.0, 20.0), end=(float(width), 90.0), weight=4, color=(0.1, 0.5, 0.8)),
            Line(start=(60.0, 0.0), end=(40.0, float(height)), weight=4, color=(0.7, 0.5, 0.8)),
        ),
        circles=(Circle(center=(100.0, 55.0), radius=25.0, weight=4, color=(0.3, 0.5, 0.8)),),
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def colors() -> ColorConfig:
    return COLORS


@pytest.fixture
def config() -> ResolvedConfig:
    return make_config()


@pytest.fixture
def params() -> EffectParams:
    return make_params()


@pytest.fixture
def shapes() -> ShapeSet:
    return sample_shapes()


@pytest.fixture
def small_settings() -> RenderSettings:
    return SMALL_SETTINGS


@pytest.fixture
def compositor():
    comp = GlassCompositor(workers=2, band_rows=16)
    comp.init()
    yield comp
    comp.dispose()
