"""Resolved configuration — plain numbers produced by the resolver.

One ``ResolvedConfig`` is created per generation and never mutated; every
downstream stage of that generation reads from it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ShapeConfig:
    count: int
    weight: float
    radius_min: float | None = None
    radius_max: float | None = None
    radius_is_fraction: bool = False
    scale_counts: bool = False


@dataclass(frozen=True)
class ColorConfig:
    hue_base: float
    hue_range: float
    saturation: float
    brightness: float


@dataclass(frozen=True)
class StainedGlassEffect:
    center_glow: float
    edge_darken: float
    glow_falloff: float
    noise_scale: float
    noise_intensity: float


@dataclass(frozen=True)
class WatercolorEffect:
    grain_intensity: float
    wobble_amount: float
    wobble_scale: float
    color_bleed: float
    saturation_bleed: float
    bleed_scale: float
    edge_irregularity: float


@dataclass(frozen=True)
class LeadingConfig:
    color: tuple[float, float, float]
    rounding_radius: float
    thickness: float


@dataclass(frozen=True)
class ResolvedConfig:
    lines: ShapeConfig
    circles: ShapeConfig
    colors: ColorConfig
    stained_glass: StainedGlassEffect
    watercolor: WatercolorEffect
    leading: LeadingConfig
    reference_resolution: tuple[int, int]


@dataclass(frozen=True)
class RenderSettings:
    """Limits for one generation request."""

    min_dimension: int = 100
    max_dimension: int = 8192
    # Largest side of a single render surface; bigger exports are tiled
    max_tile_dim: int = 2048
    max_surface_pixels: int = 2048 * 2048
    preview_max_dim: int = 1200
    compositor_workers: int = 4
    compositor_band_rows: int = 128
