"""Declarative generation template.

Two layers:
1. Template types (this module) describe how each value is produced.
2. Resolved types (``cue.engine.config``) hold the final numbers.

A template field is a ``ConfigValue``: either ``Constant`` (a fixed number) or
``Seeded`` (a ``SeededValue`` drawn from a beta distribution and optionally
shifted by one sentiment dimension).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields, is_dataclass
from typing import Literal, Union

from cue.engine.constants import DEFAULT_BETA_SHAPE

SeedDimension = Literal["valence", "arousal", "focus"]
SEED_DIMENSIONS: tuple[str, ...] = ("valence", "arousal", "focus")


@dataclass(frozen=True)
class SentimentCoupling:
    dimension: SeedDimension
    influence: float  # 0-1, how far the dimension can shift the sample

    def __post_init__(self) -> None:
        if self.dimension not in SEED_DIMENSIONS:
            raise ValueError(f"Unknown sentiment dimension: {self.dimension!r}")
        if not 0.0 <= self.influence <= 1.0:
            raise ValueError(f"influence must be in [0, 1], got {self.influence}")


@dataclass(frozen=True)
class SeededValue:
    """A scalar drawn from Beta(alpha, beta), mapped into ``range``."""

    range: tuple[float, float]
    beta: tuple[float, float] = DEFAULT_BETA_SHAPE
    seed: SentimentCoupling | None = None

    def __post_init__(self) -> None:
        low, high = self.range
        if low > high:
            raise ValueError(f"range must be ordered (low <= high), got {self.range}")
        alpha, beta = self.beta
        if alpha <= 0 or beta <= 0:
            raise ValueError(f"beta shape parameters must be positive, got {self.beta}")


@dataclass(frozen=True)
class Constant:
    value: float


@dataclass(frozen=True)
class Seeded:
    source: SeededValue


ConfigValue = Union[Constant, Seeded]


def seeded(
    low: float,
    high: float,
    beta: tuple[float, float] = DEFAULT_BETA_SHAPE,
    dimension: SeedDimension | None = None,
    influence: float = 0.0,
) -> Seeded:
    """Shorthand for building a ``Seeded`` template value."""
    coupling = SentimentCoupling(dimension, influence) if dimension is not None else None
    return Seeded(SeededValue(range=(low, high), beta=beta, seed=coupling))


@dataclass(frozen=True)
class ShapeTemplate:
    count: ConfigValue
    weight: ConfigValue
    radius_min: ConfigValue | None = None
    radius_max: ConfigValue | None = None
    # Radii are fractions of the shorter canvas side instead of reference pixels
    radius_is_fraction: bool = False
    # Multiply counts by sqrt(area / reference area)
    scale_counts: bool = False


@dataclass(frozen=True)
class ColorTemplate:
    hue_base: ConfigValue
    hue_range: ConfigValue
    saturation: ConfigValue
    brightness: ConfigValue


@dataclass(frozen=True)
class StainedGlassTemplate:
    center_glow: ConfigValue
    edge_darken: ConfigValue
    glow_falloff: ConfigValue
    noise_scale: ConfigValue
    noise_intensity: ConfigValue


@dataclass(frozen=True)
class WatercolorTemplate:
    grain_intensity: ConfigValue
    wobble_amount: ConfigValue
    wobble_scale: ConfigValue
    color_bleed: ConfigValue
    saturation_bleed: ConfigValue
    bleed_scale: ConfigValue
    edge_irregularity: ConfigValue


@dataclass(frozen=True)
class LeadingTemplate:
    color: tuple[float, float, float]
    rounding_radius: ConfigValue
    thickness: ConfigValue


@dataclass(frozen=True)
class ConfigTemplate:
    lines: ShapeTemplate
    circles: ShapeTemplate
    colors: ColorTemplate
    stained_glass: StainedGlassTemplate
    watercolor: WatercolorTemplate
    leading: LeadingTemplate
    reference_resolution: tuple[int, int] = (1920, 1080)


def iter_seeded_values(template: ConfigTemplate) -> Iterator[tuple[str, SeededValue]]:
    """Yield ``(dotted_path, SeededValue)`` for every seeded field in the template."""

    def _walk(node: object, prefix: str) -> Iterator[tuple[str, SeededValue]]:
        for f in fields(node):  # type: ignore[arg-type]
            value = getattr(node, f.name)
            path = f"{prefix}.{f.name}" if prefix else f.name
            if isinstance(value, Seeded):
                yield path, value.source
            elif is_dataclass(value):
                yield from _walk(value, path)

    yield from _walk(template, "")


DEFAULT_TEMPLATE = ConfigTemplate(
    lines=ShapeTemplate(
        count=seeded(2, 8, beta=(2, 2), dimension="arousal", influence=0.7),
        weight=seeded(6, 12),
    ),
    circles=ShapeTemplate(
        count=seeded(0, 4, beta=(2, 2), dimension="arousal", influence=0.6),
        weight=seeded(6, 12),
        radius_min=Constant(200),
        radius_max=Constant(600),
    ),
    colors=ColorTemplate(
        hue_base=seeded(0, 1, dimension="valence", influence=0.8),
        hue_range=seeded(0.1, 0.3, beta=(2, 2), dimension="valence", influence=0.4),
        saturation=seeded(0.35, 0.85, beta=(2, 2), dimension="valence", influence=0.6),
        brightness=seeded(0.5, 0.95, beta=(2, 2), dimension="valence", influence=0.5),
    ),
    stained_glass=StainedGlassTemplate(
        center_glow=seeded(0.15, 0.45, beta=(2, 2), dimension="focus", influence=0.5),
        edge_darken=seeded(0.03, 0.18, beta=(2, 2), dimension="focus", influence=0.4),
        glow_falloff=Constant(100),
        noise_scale=Constant(2.5),
        noise_intensity=seeded(0.05, 0.3, beta=(2, 2), dimension="focus", influence=0.5),
    ),
    watercolor=WatercolorTemplate(
        grain_intensity=seeded(0.008, 0.05, beta=(2, 2), dimension="focus", influence=0.4),
        wobble_amount=seeded(1, 10, beta=(2, 2), dimension="focus", influence=0.6),
        wobble_scale=seeded(0.001, 0.005, dimension="focus", influence=0.3),
        color_bleed=seeded(0.02, 0.25, beta=(2, 2), dimension="focus", influence=0.5),
        saturation_bleed=seeded(0.03, 0.25, beta=(2, 2), dimension="focus", influence=0.4),
        bleed_scale=Constant(0.0005),
        edge_irregularity=Constant(0.0),
    ),
    leading=LeadingTemplate(
        color=(0.08, 0.06, 0.04),
        rounding_radius=Constant(15),
        thickness=Constant(4),
    ),
    reference_resolution=(1920, 1080),
)
