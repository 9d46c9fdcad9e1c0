"""Unit tests for the LQI edge classifier."""

from __future__ import annotations

import math

import pytest

from zhaviz.topology.classifier import TIER_COLORS, classify_lqi, parse_lqi


@pytest.mark.parametrize(
    ("lqi", "tier"),
    [
        (0, "weak"),
        (128, "weak"),
        (129, "medium"),
        (192, "medium"),
        (193, "strong"),
        (255, "strong"),
    ],
)
def test_tier_boundaries(lqi, tier):
    assert classify_lqi(lqi).tier == tier


def test_strong_width_scales_with_lqi():
    style = classify_lqi(240)
    assert style.width == 12
    assert style.color.color == TIER_COLORS["strong"]


def test_medium_and_weak_widths_are_fixed():
    assert classify_lqi(150).width == 9
    assert classify_lqi(180).width == 9
    assert classify_lqi(10).width == 1
    assert classify_lqi(128).width == 1


def test_length_shrinks_as_quality_rises():
    assert classify_lqi(0).length == 2000
    assert classify_lqi(200).length == 1200
    assert classify_lqi(255).length == 980


def test_physics_disabled_in_every_tier():
    assert not any(classify_lqi(lqi).physics for lqi in (0, 150, 250, math.nan))


def test_highlight_matches_tier_color():
    style = classify_lqi(150)
    assert style.color.highlight == style.color.color == TIER_COLORS["medium"]


def test_nan_is_weakest_tier():
    style = classify_lqi(math.nan)
    assert style.tier == "weak"
    assert style.width == 1
    assert math.isnan(style.length)


def test_parse_lqi():
    assert parse_lqi("200") == 200
    assert parse_lqi(" 77") == 77
    assert parse_lqi("150 & 200") == 150
    assert math.isnan(parse_lqi("unknown"))
    assert math.isnan(parse_lqi(""))
