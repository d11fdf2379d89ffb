from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pygame.math import Vector2


@dataclass(slots=True)
class Boid:
    id: int
    position: Vector2
    heading: float
    speed: float
    size: float
    visual_radius: float
    independence: int
    color: str
    independence_levels: int

    def __post_init__(self) -> None:
        if self.speed < 0:
            raise ValueError(f"boid {self.id}: speed must be non-negative, got {self.speed}")
        if self.size <= 0:
            raise ValueError(f"boid {self.id}: size must be positive, got {self.size}")
        if self.visual_radius < 0:
            raise ValueError(f"boid {self.id}: visual_radius must be non-negative, got {self.visual_radius}")
        if not 0 <= self.independence < self.independence_levels:
            raise ValueError(
                f"boid {self.id}: independence {self.independence} outside [0, {self.independence_levels - 1}]"
            )

    @classmethod
    def create(
        cls,
        boid_id: int,
        position: Vector2,
        heading: float,
        speed: float,
        size: float,
        visual_radius: float,
        independence: int,
        colors: Sequence[str],
    ) -> "Boid":
        # Darker colours mark more independent boids.
        levels = len(colors)
        color = colors[independence] if 0 <= independence < levels else ""
        return cls(
            id=boid_id,
            position=Vector2(position),
            heading=heading,
            speed=speed,
            size=size,
            visual_radius=visual_radius,
            independence=independence,
            color=color,
            independence_levels=levels,
        )

    def copy(self) -> "Boid":
        return Boid(
            id=self.id,
            position=Vector2(self.position),
            heading=self.heading,
            speed=self.speed,
            size=self.size,
            visual_radius=self.visual_radius,
            independence=self.independence,
            color=self.color,
            independence_levels=self.independence_levels,
        )
