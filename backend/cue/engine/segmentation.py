"""Region segmentation — boundary buffer → region-id raster + palette.

Algorithm:
1. Threshold the boundary buffer. Pixels darker than LINE_THRESHOLD are
   boundary and get the reserved id 255.
2. Extract every maximal horizontal run of interior pixels (vectorised).
   A run is exactly the span a pixel-walking fill would find by scanning
   left and right from a seed until it hits boundary or the frame.
3. Visit runs in row-major order. The first unvisited run starts a new
   region: a stack of spans is seeded with it, and each popped span looks up
   the runs in the rows above and below whose x-range overlaps its own
   (4-connectivity) and pushes the unvisited ones. The stack holds spans,
   never pixels, and no recursion is involved.
4. The palette entry for a region is generated the moment its id is
   assigned, so colors follow flood-fill discovery order.

At most MAX_REGIONS (254) regions are assigned. Components discovered after
the cap stay unassigned (id 255, no palette entry); this is a capacity
cutoff, reported through ``RegionData.limit_reached`` and a warning.
"""

from __future__ import annotations

import bisect
import logging
import time

import numpy as np
from numpy.typing import NDArray

from cue.engine.config import ColorConfig
from cue.engine.constants import BOUNDARY_ID, LINE_THRESHOLD, MAX_REGIONS, REGION_COLOR_VARIANCE
from cue.engine.context import HSB, RegionData
from cue.utils.color import clamp01, golden_hue

logger = logging.getLogger(__name__)


def extract_boundaries(buffer: NDArray, threshold: int = LINE_THRESHOLD) -> NDArray[np.bool_]:
    """True where the buffer is darker than ``threshold``.

    Accepts a single-channel (H, W) buffer or an (H, W, 3|4) RGB(A) readback.
    """
    if buffer.ndim == 3:
        rgb = buffer[..., :3].astype(np.float64)
        luminance = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
        return luminance < threshold
    return buffer < threshold


def find_runs(interior: NDArray[np.bool_]) -> tuple[NDArray[np.int64], NDArray[np.int64], NDArray[np.int64]]:
    """Maximal horizontal runs of True pixels, in row-major order.

    Returns:
        (rows, x_start, x_end) with ``x_end`` exclusive.
    """
    height, width = interior.shape
    padded = np.zeros((height, width + 2), dtype=np.int8)
    padded[:, 1:-1] = interior
    edges = np.diff(padded, axis=1)

    # np.nonzero walks row-major, so starts and ends pair up in order
    rows, x_start = np.nonzero(edges == 1)
    _, x_end = np.nonzero(edges == -1)
    return rows.astype(np.int64), x_start.astype(np.int64), x_end.astype(np.int64)


def region_color(region_id: int, colors: ColorConfig, rng: np.random.Generator) -> HSB:
    """Base color for a region: golden-ratio hue inside the resolved hue range."""
    saturation = colors.saturation + (rng.random() - 0.5) * 2 * REGION_COLOR_VARIANCE
    brightness = colors.brightness + (rng.random() - 0.5) * 2 * REGION_COLOR_VARIANCE

    hue_offset = golden_hue(region_id)
    hue = (colors.hue_base + (hue_offset - 0.5) * colors.hue_range + 1) % 1
    return (hue, clamp01(saturation), clamp01(brightness))


def _fill_region(
    seed: int,
    region_id: int,
    labels: list[int],
    rows: list[int],
    x_start: list[int],
    x_end: list[int],
    row_offsets: list[int],
    height: int,
) -> None:
    """Span-stack fill of the component containing run ``seed``."""
    labels[seed] = region_id
    stack = [seed]

    while stack:
        span = stack.pop()
        y = rows[span]
        left = x_start[span]
        right = x_end[span]

        for ny in (y - 1, y + 1):
            if ny < 0 or ny >= height:
                continue
            lo = row_offsets[ny]
            hi = row_offsets[ny + 1]
            # First run in the neighbouring row that ends after our left edge
            k = bisect.bisect_right(x_end, left, lo, hi)
            while k < hi and x_start[k] < right:
                if labels[k] < 0:
                    labels[k] = region_id
                    stack.append(k)
                k += 1


def segment(
    boundary_buffer: NDArray,
    colors: ColorConfig,
    rng: np.random.Generator | None = None,
    threshold: int = LINE_THRESHOLD,
) -> RegionData:
    """Convert a boundary buffer into a region raster and palette."""
    rng = rng if rng is not None else np.random.default_rng()
    start = time.perf_counter()

    boundaries = extract_boundaries(boundary_buffer, threshold)
    height, width = boundaries.shape
    interior = ~boundaries

    run_rows, run_start, run_end = find_runs(interior)
    n_runs = len(run_rows)
    row_offsets = np.searchsorted(run_rows, np.arange(height + 1), side="left")

    rows = run_rows.tolist()
    x_start = run_start.tolist()
    x_end = run_end.tolist()
    offsets = row_offsets.tolist()
    labels = [-1] * n_runs

    palette: list[HSB] = []
    limit_reached = False
    region_id = 0

    for i in range(n_runs):
        if labels[i] >= 0:
            continue

        if region_id >= MAX_REGIONS:
            limit_reached = True
            logger.warning(
                "Maximum region count (%d) reached; remaining components left unassigned",
                MAX_REGIONS,
            )
            break

        palette.append(region_color(region_id, colors, rng))
        _fill_region(i, region_id, labels, rows, x_start, x_end, offsets, height)
        region_id += 1

    ids = np.full((height, width), BOUNDARY_ID, dtype=np.uint8)
    if n_runs:
        run_labels = np.asarray(labels, dtype=np.int64)
        run_labels[run_labels < 0] = BOUNDARY_ID
        # Boolean-mask assignment is row-major, the same order the runs were found in
        ids[interior] = np.repeat(run_labels.astype(np.uint8), run_end - run_start)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "Segmented %dx%d into %d regions (%d spans) in %.0fms",
        width,
        height,
        len(palette),
        n_runs,
        elapsed,
    )
    return RegionData(ids=ids, palette=palette, limit_reached=limit_reached)
