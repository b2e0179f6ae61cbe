"""Cue stained glass synthesis engine."""

from cue.engine.compositor import EffectParams, GlassCompositor
from cue.engine.context import Circle, Line, RegionData, SentimentVector, ShapeSet, TileDescriptor
from cue.engine.pipeline import Generation, generate
from cue.engine.resolver import resolve
from cue.engine.segmentation import segment
from cue.engine.template import DEFAULT_TEMPLATE
from cue.engine.tiling import plan_tiles, render_tiled

__all__ = [
    "EffectParams",
    "GlassCompositor",
    "Circle",
    "Line",
    "RegionData",
    "SentimentVector",
    "ShapeSet",
    "TileDescriptor",
    "Generation",
    "generate",
    "resolve",
    "segment",
    "DEFAULT_TEMPLATE",
    "plan_tiles",
    "render_tiled",
]
