from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pygame.math import Vector2

if TYPE_CHECKING:
    from ..core.rng import DeterministicRng

TWO_PI = 2.0 * math.pi

# Headings closer than this to exact opposition get a random half-turn.
OPPOSITE_TOLERANCE = 0.1


def normalize_heading(theta: float) -> float:
    while theta <= -math.pi:
        theta += TWO_PI
    while theta > math.pi:
        theta -= TWO_PI
    return theta


def distance(a: Vector2, b: Vector2) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy)


def smallest_delta_theta(src: float, dst: float, rng: DeterministicRng) -> float:
    """Signed rotation in (-pi, pi] taking ``src`` onto ``dst`` modulo 2*pi.

    Near-opposite headings are ambiguous, so the direction of the half-turn
    is picked at random.
    """
    delta = math.remainder(dst - src, TWO_PI)
    if delta <= -math.pi:
        delta += TWO_PI
    if abs(abs(delta) - math.pi) < OPPOSITE_TOLERANCE:
        return rng.next_sign() * math.pi
    return delta


def heading_vector(theta: float) -> Vector2:
    # Screen coordinates: y grows downward, so a positive heading points up.
    return Vector2(math.cos(theta), -math.sin(theta))
