"""Parameter resolver — ConfigTemplate + SentimentVector → ResolvedConfig.

For every SeededValue:
1. Sample t ~ Beta(alpha, beta)
2. If coupled to a sentiment dimension, shift t by (value - 0.5) * influence * 2
   and clamp to [0, 1]. A dimension value of 0.5 leaves the beta sample as is.
3. Map t linearly into the value's range.
"""

from __future__ import annotations

import logging

import numpy as np

from cue.engine.config import (
    ColorConfig,
    LeadingConfig,
    ResolvedConfig,
    ShapeConfig,
    StainedGlassEffect,
    WatercolorEffect,
)
from cue.engine.context import SentimentVector
from cue.engine.sampling import sample_beta
from cue.engine.template import (
    DEFAULT_TEMPLATE,
    ConfigTemplate,
    ConfigValue,
    Constant,
    Seeded,
    SeededValue,
    ShapeTemplate,
)
from cue.utils.math_helpers import round_half_up

logger = logging.getLogger(__name__)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def resolve_seeded(value: SeededValue, sentiment: SentimentVector, rng: np.random.Generator) -> float:
    alpha, beta = value.beta
    low, high = value.range

    t = sample_beta(rng, alpha, beta)

    if value.seed is not None:
        dimension_value = sentiment.get(value.seed.dimension)
        t = t + (dimension_value - 0.5) * value.seed.influence * 2
        t = max(0.0, min(1.0, t))

    # Interpolation can overshoot by one ulp at t = 1
    return min(max(_lerp(low, high, t), low), high)


def resolve_value(value: ConfigValue, sentiment: SentimentVector, rng: np.random.Generator) -> float:
    match value:
        case Constant(value=v):
            return float(v)
        case Seeded(source=source):
            return resolve_seeded(source, sentiment, rng)
        case _:
            raise TypeError(f"Unsupported config value: {value!r}")


def _resolve_optional(
    value: ConfigValue | None, sentiment: SentimentVector, rng: np.random.Generator
) -> float | None:
    if value is None:
        return None
    return resolve_value(value, sentiment, rng)


def _resolve_shapes(
    shapes: ShapeTemplate,
    sentiment: SentimentVector,
    rng: np.random.Generator,
    min_count: int,
) -> ShapeConfig:
    count = round_half_up(resolve_value(shapes.count, sentiment, rng))
    return ShapeConfig(
        count=max(min_count, count),
        weight=resolve_value(shapes.weight, sentiment, rng),
        radius_min=_resolve_optional(shapes.radius_min, sentiment, rng),
        radius_max=_resolve_optional(shapes.radius_max, sentiment, rng),
        radius_is_fraction=shapes.radius_is_fraction,
        scale_counts=shapes.scale_counts,
    )


def resolve(
    template: ConfigTemplate = DEFAULT_TEMPLATE,
    sentiment: SentimentVector | None = None,
    rng: np.random.Generator | None = None,
) -> ResolvedConfig:
    """Materialize ``template`` into plain numbers for one generation.

    Sentiment values must already be clamped to [0, 1] by the caller.
    Fields are resolved in a fixed order, so a seeded ``rng`` gives an
    identical result on every call.
    """
    sentiment = sentiment or SentimentVector.neutral()
    rng = rng if rng is not None else np.random.default_rng()

    def r(value: ConfigValue) -> float:
        return resolve_value(value, sentiment, rng)

    # At least one line: a canvas with no boundaries is a single flat pane
    lines = _resolve_shapes(template.lines, sentiment, rng, min_count=1)
    circles = _resolve_shapes(template.circles, sentiment, rng, min_count=0)

    sg = template.stained_glass
    wc = template.watercolor
    config = ResolvedConfig(
        lines=lines,
        circles=circles,
        colors=ColorConfig(
            hue_base=r(template.colors.hue_base),
            hue_range=r(template.colors.hue_range),
            saturation=r(template.colors.saturation),
            brightness=r(template.colors.brightness),
        ),
        stained_glass=StainedGlassEffect(
            center_glow=r(sg.center_glow),
            edge_darken=r(sg.edge_darken),
            glow_falloff=r(sg.glow_falloff),
            noise_scale=r(sg.noise_scale),
            noise_intensity=r(sg.noise_intensity),
        ),
        watercolor=WatercolorEffect(
            grain_intensity=r(wc.grain_intensity),
            wobble_amount=r(wc.wobble_amount),
            wobble_scale=r(wc.wobble_scale),
            color_bleed=r(wc.color_bleed),
            saturation_bleed=r(wc.saturation_bleed),
            bleed_scale=r(wc.bleed_scale),
            edge_irregularity=r(wc.edge_irregularity),
        ),
        leading=LeadingConfig(
            color=template.leading.color,
            rounding_radius=r(template.leading.rounding_radius),
            thickness=r(template.leading.thickness),
        ),
        reference_resolution=template.reference_resolution,
    )
    logger.debug(
        "Resolved config: %d lines, %d circles, hue_base=%.3f (sentiment %s)",
        lines.count,
        circles.count,
        config.colors.hue_base,
        sentiment.as_dict(),
    )
    return config
