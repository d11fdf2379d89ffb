from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, Tuple

from pygame.math import Vector2

from ..core.boid import Boid
from ..utils.math2d import heading_vector

if TYPE_CHECKING:
    from ..core.config import SimulationConfig

DEBUG_COLOR = "green"

Triangle = Tuple[Vector2, Vector2, Vector2]


class DrawingSurface(Protocol):
    def stroke_circle(self, center: Vector2, radius: float, color: str) -> None: ...

    def fill_triangle(self, points: Sequence[Vector2], color: str) -> None: ...


def _point_at(origin: Vector2, length: float, theta: float) -> Vector2:
    return origin + heading_vector(theta) * length


def triangle_points(boid: Boid, minor_angle: float) -> Triangle:
    """Tip first, then the two rear corners either side of the reversed heading."""
    tip = _point_at(boid.position, boid.size, boid.heading)
    left = _point_at(boid.position, boid.size, boid.heading + math.pi - minor_angle)
    right = _point_at(boid.position, boid.size, boid.heading + math.pi + minor_angle)
    return tip, left, right


def draw_boid(surface: DrawingSurface, boid: Boid, config: SimulationConfig) -> None:
    if config.debug:
        surface.stroke_circle(Vector2(boid.position), boid.size, DEBUG_COLOR)
    surface.fill_triangle(triangle_points(boid, config.flock.minor_angle), boid.color)


def draw_world(surface: DrawingSurface, boids: Iterable[Boid], config: SimulationConfig) -> None:
    for boid in boids:
        draw_boid(surface, boid, config)
