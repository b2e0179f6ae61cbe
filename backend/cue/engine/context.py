"""Data model flowing between pipeline stages.

SentimentVector → (resolver) → ResolvedConfig → (generators) → ShapeSet
ShapeSet → (rasterizer, segmentation) → RegionData → (compositor, tiling) → pixels
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np
from numpy.typing import NDArray

from cue.engine.constants import NEUTRAL_SENTIMENT
from cue.utils.color import clamp01

# Hue, saturation, brightness, each in [0, 1]
HSB = tuple[float, float, float]


@dataclass(frozen=True)
class SentimentVector:
    """Three sentiment scalars in [0, 1]; 0.5 is neutral."""

    valence: float = NEUTRAL_SENTIMENT
    arousal: float = NEUTRAL_SENTIMENT
    focus: float = NEUTRAL_SENTIMENT

    @classmethod
    def neutral(cls) -> SentimentVector:
        return cls()

    def clamped(self) -> SentimentVector:
        return SentimentVector(clamp01(self.valence), clamp01(self.arousal), clamp01(self.focus))

    def get(self, dimension: str) -> float:
        return float(getattr(self, dimension))

    def as_dict(self) -> dict[str, float]:
        return {"valence": self.valence, "arousal": self.arousal, "focus": self.focus}


@dataclass(frozen=True)
class Line:
    start: tuple[float, float]
    end: tuple[float, float]
    weight: float
    color: HSB


@dataclass(frozen=True)
class Circle:
    center: tuple[float, float]
    radius: float
    weight: float
    color: HSB


@dataclass(frozen=True)
class ShapeSet:
    """Lines and circles in absolute pixel coordinates of one canvas size."""

    width: int
    height: int
    lines: tuple[Line, ...] = ()
    circles: tuple[Circle, ...] = ()

    def __len__(self) -> int:
        return len(self.lines) + len(self.circles)

    def scaled(self, factor: float, width: int | None = None, height: int | None = None) -> ShapeSet:
        """Derived copy with coordinates, weights and radii multiplied by ``factor``."""
        lines = tuple(
            replace(
                ln,
                start=(ln.start[0] * factor, ln.start[1] * factor),
                end=(ln.end[0] * factor, ln.end[1] * factor),
                weight=ln.weight * factor,
            )
            for ln in self.lines
        )
        circles = tuple(
            replace(
                c,
                center=(c.center[0] * factor, c.center[1] * factor),
                radius=c.radius * factor,
                weight=c.weight * factor,
            )
            for c in self.circles
        )
        return ShapeSet(
            width=width if width is not None else max(1, round(self.width * factor)),
            height=height if height is not None else max(1, round(self.height * factor)),
            lines=lines,
            circles=circles,
        )

    def line_array(self) -> NDArray[np.float64]:
        """Nx4 array of (x1, y1, x2, y2)."""
        if not self.lines:
            return np.empty((0, 4), dtype=np.float64)
        return np.array([(*ln.start, *ln.end) for ln in self.lines], dtype=np.float64)

    def circle_array(self) -> NDArray[np.float64]:
        """Nx3 array of (cx, cy, radius)."""
        if not self.circles:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([(*c.center, c.radius) for c in self.circles], dtype=np.float64)


@dataclass(frozen=True)
class TileDescriptor:
    """Sub-rectangle of the full image, in full-image pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x_end(self) -> int:
        return self.x + self.width

    @property
    def y_end(self) -> int:
        return self.y + self.height


@dataclass
class RegionData:
    """Region-id raster plus the palette discovered in the same pass."""

    # (H, W) uint8: 0..253 = region id, 255 = boundary / unassigned
    ids: NDArray[np.uint8]
    # palette[i] is the base HSB color of region i
    palette: list[HSB] = field(default_factory=list)
    limit_reached: bool = False

    @property
    def width(self) -> int:
        return int(self.ids.shape[1])

    @property
    def height(self) -> int:
        return int(self.ids.shape[0])

    @property
    def region_count(self) -> int:
        return len(self.palette)

    def palette_array(self) -> NDArray[np.float64]:
        """256x3 HSB lookup table; unused slots are black."""
        table = np.zeros((256, 3), dtype=np.float64)
        if self.palette:
            table[: len(self.palette)] = np.asarray(self.palette, dtype=np.float64)
        return table

    def crop(self, tile: TileDescriptor) -> RegionData:
        """Sub-raster for ``tile``; palette and ids stay globally consistent."""
        return RegionData(
            ids=self.ids[tile.y : tile.y_end, tile.x : tile.x_end],
            palette=self.palette,
            limit_reached=self.limit_reached,
        )


@dataclass(frozen=True)
class TileProgress:
    """Milestone emitted after each tile is composited."""

    index: int
    total: int
    tile: TileDescriptor

    @property
    def fraction(self) -> float:
        return (self.index + 1) / self.total if self.total else 1.0
