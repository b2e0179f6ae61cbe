"""Named constants shared across the generation pipeline."""

from __future__ import annotations

# Boundary buffer luminance below this value counts as ink.
LINE_THRESHOLD = 50

# Region raster ids: 0..253 are regions, 255 is reserved for boundary pixels
# and for components left unassigned once the region cap is hit.
BOUNDARY_ID = 255
MAX_REGIONS = 254

# Hue index offset for circles so they never share a hue with lines.
CIRCLE_HUE_OFFSET = 100

# Per-shape and per-region color jitter (± around the resolved value).
SHAPE_COLOR_VARIANCE = 0.1
REGION_COLOR_VARIANCE = 0.15

# Uniform capacity of the compositor program.
MAX_SHADER_LINES = 64
MAX_SHADER_CIRCLES = 32

# Default beta shape for SeededValue: moderately peaked, symmetric.
DEFAULT_BETA_SHAPE = (1.5, 1.5)

# Neutral sentiment value; reproduces the pure-beta sample.
NEUTRAL_SENTIMENT = 0.5

# Circle centers stay at least radius × this from every canvas edge.
CIRCLE_MARGIN_RATIO = 0.5

# Anti-aliasing half-width of the leading edge, in pixels.
LEADING_AA = 1.0

# Distance returned when there is no geometry at all.
FAR_DISTANCE = 1.0e9
