from __future__ import annotations

import math

import pytest
from pygame.math import Vector2
from pytest import approx

from flock.sim.core.rng import DeterministicRng
from flock.sim.utils.math2d import distance, heading_vector, normalize_heading, smallest_delta_theta

TWO_PI = 2 * math.pi


def _same_angle(a: float, b: float) -> bool:
    return abs(math.remainder(a - b, TWO_PI)) < 1e-9


@pytest.mark.parametrize(
    "theta, expected",
    [
        (0.0, 0.0),
        (math.pi, math.pi),
        (-math.pi, math.pi),
        (3 * math.pi, math.pi),
        (-3 * math.pi / 2, math.pi / 2),
        (5.0, 5.0 - TWO_PI),
        (-7.0, -7.0 + TWO_PI),
    ],
)
def test_normalize_heading_lands_in_half_open_range(theta, expected):
    result = normalize_heading(theta)
    assert -math.pi < result <= math.pi
    assert result == approx(expected)


@pytest.mark.parametrize(
    "src, dst",
    [
        (0.0, 1.0),
        (1.0, 0.0),
        (3.0, -3.0),
        (-3.0, 3.0),
        (-2.5, 0.4),
        (math.pi, -math.pi / 2),
        (0.1, 0.1),
    ],
)
def test_smallest_delta_theta_maps_src_onto_dst(src, dst):
    delta = smallest_delta_theta(src, dst, DeterministicRng(0))
    assert -math.pi < delta <= math.pi
    assert _same_angle(src + delta, dst)


def test_smallest_delta_theta_takes_short_way_across_branch_cut():
    delta = smallest_delta_theta(3.0, -3.0, DeterministicRng(0))
    assert delta == approx(TWO_PI - 6.0)


@pytest.mark.parametrize("offset", [0.0, 0.05, -0.05, 0.099])
def test_near_opposite_headings_turn_by_exactly_pi(offset):
    rng = DeterministicRng(3)
    signs = set()
    for _ in range(64):
        delta = smallest_delta_theta(0.2, 0.2 + math.pi + offset, rng)
        assert abs(delta) == math.pi
        signs.add(delta > 0)
    assert signs == {True, False}


def test_just_outside_opposite_band_is_deterministic():
    delta = smallest_delta_theta(0.0, math.pi - 0.2, DeterministicRng(0))
    assert delta == approx(math.pi - 0.2)


def test_distance_and_heading_vector_use_screen_coordinates():
    assert distance(Vector2(0, 0), Vector2(3, 4)) == approx(5.0)
    up = heading_vector(math.pi / 2)
    assert up.x == approx(0.0, abs=1e-12)
    assert up.y == approx(-1.0)
