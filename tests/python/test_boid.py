from __future__ import annotations

import pytest
from pygame.math import Vector2

from flock.sim.core.boid import Boid
from flock.sim.core.config import FlockConfig

COLORS = FlockConfig().colors


def _create(**overrides):
    values = dict(
        boid_id=0,
        position=Vector2(100.0, 100.0),
        heading=0.0,
        speed=250.0,
        size=25.0,
        visual_radius=120.0,
        independence=4,
        colors=COLORS,
    )
    values.update(overrides)
    return Boid.create(**values)


def test_boid_uses_slots():
    boid = _create()
    assert not hasattr(boid, "__dict__")
    assert hasattr(Boid, "__slots__")


def test_color_darkens_with_independence():
    conformist = _create(independence=0)
    loner = _create(independence=len(COLORS) - 1)
    assert conformist.color == "#FFFFFF"
    assert loner.color == "#000000"
    assert conformist.independence_levels == len(COLORS)


def test_create_copies_position():
    position = Vector2(1.0, 2.0)
    boid = _create(position=position)
    boid.position.x = 50.0
    assert position.x == 1.0


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"speed": -1.0}, "speed"),
        ({"size": 0.0}, "size"),
        ({"visual_radius": -5.0}, "visual_radius"),
        ({"independence": -1}, "independence"),
        ({"independence": len(COLORS)}, "independence"),
    ],
)
def test_out_of_range_inputs_are_rejected(overrides, message):
    with pytest.raises(ValueError, match=message):
        _create(**overrides)


def test_copy_is_detached():
    boid = _create()
    clone = boid.copy()
    clone.position.x += 10.0
    clone.heading = 1.0
    assert boid.position.x == 100.0
    assert boid.heading == 0.0
    assert clone.id == boid.id
