"""Tests for shape generation."""

from __future__ import annotations

import numpy as np
import pytest

from cue.engine.config import ShapeConfig
from cue.engine.generators import generate, resolution_scale
from cue.utils.color import golden_hue
from cue.utils.math_helpers import round_half_up
from tests.conftest import make_config


def _edges_touched(point: tuple[float, float], width: int, height: int) -> set[str]:
    x, y = point
    touched = set()
    if y == 0:
        touched.add("top")
    if y == height:
        touched.add("bottom")
    if x == 0:
        touched.add("left")
    if x == width:
        touched.add("right")
    return touched


def test_lines_run_frame_to_frame(rng):
    config = make_config(lines=ShapeConfig(count=40, weight=5), circles=ShapeConfig(count=0, weight=5))
    shapes = generate(config, 640, 480, rng)
    assert len(shapes.lines) == 40
    for line in shapes.lines:
        start = _edges_touched(line.start, 640, 480)
        end = _edges_touched(line.end, 640, 480)
        assert start, f"start {line.start} not on frame"
        assert end, f"end {line.end} not on frame"
        assert start.isdisjoint(end)


def test_circles_respect_margin(rng):
    config = make_config(circles=ShapeConfig(count=30, weight=5, radius_min=50, radius_max=120))
    shapes = generate(config, 1920, 1080, rng)
    assert len(shapes.circles) == 30
    for circle in shapes.circles:
        cx, cy = circle.center
        margin = circle.radius * 0.5
        assert 50 <= circle.radius <= 120
        assert margin <= cx <= 1920 - margin
        assert margin <= cy <= 1080 - margin


def test_radius_scales_with_resolution(rng):
    config = make_config(circles=ShapeConfig(count=20, weight=5, radius_min=100, radius_max=100))
    shapes = generate(config, 3840, 2160, rng)
    assert all(c.radius == pytest.approx(200) for c in shapes.circles)


def test_fractional_radius(rng):
    config = make_config(
        circles=ShapeConfig(count=20, weight=5, radius_min=0.1, radius_max=0.2, radius_is_fraction=True)
    )
    shapes = generate(config, 1000, 500, rng)
    for circle in shapes.circles:
        assert 50 <= circle.radius <= 100


def test_resolution_scale():
    assert resolution_scale(3840, 2160, (1920, 1080)) == pytest.approx((2.0, 2.0))
    assert resolution_scale(1920, 1080, (1920, 1080)) == pytest.approx((1.0, 1.0))


def test_scale_counts_opt_in(rng):
    fixed = make_config(lines=ShapeConfig(count=4, weight=5), circles=ShapeConfig(count=0, weight=5))
    dense = make_config(
        lines=ShapeConfig(count=4, weight=5, scale_counts=True),
        circles=ShapeConfig(count=0, weight=5),
    )
    assert len(generate(fixed, 3840, 2160, rng).lines) == 4
    assert len(generate(dense, 3840, 2160, rng).lines) == 8


def test_shape_hues_follow_golden_ratio(rng):
    config = make_config(lines=ShapeConfig(count=5, weight=5), circles=ShapeConfig(count=2, weight=5))
    shapes = generate(config, 800, 600, rng)
    assert [ln.color[0] for ln in shapes.lines] == [golden_hue(i) for i in range(5)]
    assert [c.color[0] for c in shapes.circles] == [golden_hue(100 + i) for i in range(2)]
    for shape in (*shapes.lines, *shapes.circles):
        assert 0 <= shape.color[1] <= 1
        assert 0 <= shape.color[2] <= 1


def test_generation_is_deterministic():
    config = make_config()
    a = generate(config, 800, 600, np.random.default_rng(3))
    b = generate(config, 800, 600, np.random.default_rng(3))
    assert a == b


def test_scaled_shape_set_is_a_derived_copy(shapes):
    half = shapes.scaled(0.5)
    assert half.width == 75
    assert half.height == 55
    assert half.lines[0].end == (75.0, 45.0)
    assert half.circles[0].radius == 12.5
    assert half.lines[0].weight == 2
    # canonical set untouched
    assert shapes.lines[0].end == (150.0, 90.0)
    assert shapes.circles[0].radius == 25.0


def test_scaled_counts_round_half_up(rng):
    # count_scale is 0.5 at a quarter of the reference area: 5 * 0.5 = 2.5 lines
    config = make_config(
        lines=ShapeConfig(count=5, weight=5, scale_counts=True),
        circles=ShapeConfig(count=0, weight=5),
    )
    assert len(generate(config, 960, 540, rng).lines) == 3


def test_round_half_up():
    assert [round_half_up(x) for x in (0.5, 1.5, 2.5, 2.49, -0.5)] == [1, 2, 3, 2, 0]
