"""Tests for the parameter resolver and its samplers."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from cue.engine.context import SentimentVector
from cue.engine.resolver import resolve, resolve_value
from cue.engine.sampling import sample_beta, sample_gamma
from cue.engine.template import (
    DEFAULT_TEMPLATE,
    Constant,
    Seeded,
    SeededValue,
    SentimentCoupling,
    ShapeTemplate,
    iter_seeded_values,
    seeded,
)


def test_constant_resolves_to_value(rng):
    assert resolve_value(Constant(2.5), SentimentVector.neutral(), rng) == 2.5


def test_unknown_value_type_raises(rng):
    with pytest.raises(TypeError):
        resolve_value(3.0, SentimentVector.neutral(), rng)  # type: ignore[arg-type]


def test_seeded_values_stay_in_range(rng):
    value = seeded(2, 8, beta=(0.5, 0.5))
    samples = [resolve_value(value, SentimentVector.neutral(), rng) for _ in range(500)]
    assert min(samples) >= 2
    assert max(samples) <= 8


def test_extreme_sentiment_saturates_range(rng):
    value = seeded(0, 10, dimension="valence", influence=1.0)
    high = [resolve_value(value, SentimentVector(valence=1.0), rng) for _ in range(50)]
    low = [resolve_value(value, SentimentVector(valence=0.0), rng) for _ in range(50)]
    assert all(v == 10 for v in high)
    assert all(v == 0 for v in low)


def test_neutral_sentiment_matches_uncoupled_draw():
    coupled = seeded(0, 1, beta=(2, 3), dimension="arousal", influence=0.9)
    plain = seeded(0, 1, beta=(2, 3))
    a = resolve_value(coupled, SentimentVector.neutral(), np.random.default_rng(7))
    b = resolve_value(plain, SentimentVector.neutral(), np.random.default_rng(7))
    assert a == b


def test_resolve_is_idempotent_with_fixed_seed():
    sentiment = SentimentVector(0.2, 0.9, 0.4)
    first = resolve(DEFAULT_TEMPLATE, sentiment, np.random.default_rng(99))
    second = resolve(DEFAULT_TEMPLATE, sentiment, np.random.default_rng(99))
    assert first == second


def test_default_template_resolves_within_bounds(rng):
    config = resolve(DEFAULT_TEMPLATE, SentimentVector.neutral(), rng)
    assert 2 <= config.lines.count <= 8
    assert 0 <= config.circles.count <= 4
    assert 6 <= config.lines.weight <= 12
    assert config.circles.radius_min == 200
    assert config.circles.radius_max == 600
    assert config.stained_glass.glow_falloff == 100
    assert config.leading.thickness == 4
    assert 0 <= config.colors.hue_base <= 1


def test_line_count_never_below_one(rng):
    template = replace(
        DEFAULT_TEMPLATE,
        lines=ShapeTemplate(count=Constant(0), weight=Constant(5)),
        circles=ShapeTemplate(count=Constant(-3), weight=Constant(5)),
    )
    config = resolve(template, SentimentVector.neutral(), rng)
    assert config.lines.count == 1
    assert config.circles.count == 0


def test_counts_round_to_integers(rng):
    config = resolve(DEFAULT_TEMPLATE, SentimentVector.neutral(), rng)
    assert isinstance(config.lines.count, int)
    assert isinstance(config.circles.count, int)


def test_clamped_sentiment():
    s = SentimentVector(valence=1.7, arousal=-0.2, focus=0.5).clamped()
    assert s == SentimentVector(1.0, 0.0, 0.5)


def test_iter_seeded_values_paths():
    paths = dict(iter_seeded_values(DEFAULT_TEMPLATE))
    assert "lines.count" in paths
    assert "colors.hue_base" in paths
    assert "watercolor.wobble_amount" in paths
    # Constants are not enumerated
    assert "stained_glass.glow_falloff" not in paths
    assert paths["lines.count"].seed == SentimentCoupling("arousal", 0.7)


def test_seeded_value_validation():
    with pytest.raises(ValueError):
        SeededValue(range=(5, 1))
    with pytest.raises(ValueError):
        SeededValue(range=(0, 1), beta=(0, 2))
    with pytest.raises(ValueError):
        SentimentCoupling("mood", 0.5)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        SentimentCoupling("focus", 1.5)


def test_seeded_wrapper_carries_distribution():
    value = seeded(1, 2)
    assert isinstance(value, Seeded)
    assert value.source.range == (1, 2)
    assert value.source.beta == (1.5, 1.5)


# ── sampling ──


def test_beta_mean(rng):
    draws = [sample_beta(rng, 2, 5) for _ in range(2000)]
    assert np.mean(draws) == pytest.approx(2 / 7, abs=0.02)
    assert all(0 <= d <= 1 for d in draws)


def test_uniform_beta_shortcut(rng):
    draws = [sample_beta(rng, 1, 1) for _ in range(2000)]
    assert np.mean(draws) == pytest.approx(0.5, abs=0.03)


def test_gamma_small_shape_mean(rng):
    draws = [sample_gamma(rng, 0.5) for _ in range(4000)]
    assert np.mean(draws) == pytest.approx(0.5, abs=0.06)
    assert min(draws) >= 0


def test_gamma_rejects_non_positive_shape(rng):
    with pytest.raises(ValueError):
        sample_gamma(rng, 0)


def test_every_seeded_value_stays_in_range_across_sentiment_cube():
    rng = np.random.default_rng(2024)
    for path, value in iter_seeded_values(DEFAULT_TEMPLATE):
        low, high = value.range
        source = Seeded(value)
        for _ in range(10_000):
            sentiment = SentimentVector(*rng.random(3))
            v = resolve_value(source, sentiment, rng)
            assert low <= v <= high, f"{path}={v!r} outside {value.range}"


def test_upper_bound_is_exact_at_full_influence(rng):
    # 0.15 + (0.45 - 0.15) * 1.0 overshoots 0.45 in floating point
    value = seeded(0.15, 0.45, dimension="focus", influence=1.0)
    for _ in range(20):
        assert resolve_value(value, SentimentVector(focus=1.0), rng) == 0.45


def test_half_counts_round_up(rng):
    template = replace(
        DEFAULT_TEMPLATE,
        lines=ShapeTemplate(count=Constant(1.5), weight=Constant(5)),
        circles=ShapeTemplate(count=Constant(2.5), weight=Constant(5)),
    )
    config = resolve(template, SentimentVector.neutral(), rng)
    assert config.lines.count == 2
    assert config.circles.count == 3
