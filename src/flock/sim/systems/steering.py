from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from pygame.math import Vector2

from ..core.boid import Boid
from ..utils.math2d import distance, normalize_heading, smallest_delta_theta

if TYPE_CHECKING:
    from ..core.config import SimulationConfig
    from ..core.rng import DeterministicRng

HALF_PI = math.pi / 2


class SteeringRule(str, Enum):
    AVOID_WALL = "AvoidWall"
    FLOCK = "Flock"
    CRUISE = "Cruise"


@dataclass(slots=True)
class FlockObservation:
    checks: int = 0
    visible: int = 0
    average_position: Optional[Vector2] = None
    average_heading: Optional[float] = None
    delta: float = 0.0


@dataclass(slots=True)
class UpdateOutcome:
    rule: SteeringRule
    delta: float
    checks: int = 0
    visible: int = 0
    bounced_x: bool = False
    bounced_y: bool = False


def can_see(observer: Boid, other: Boid) -> bool:
    return observer.visual_radius + other.size > distance(observer.position, other.position)


def collide_left(boid: Boid) -> bool:
    return boid.position.x - boid.size < 0


def collide_right(boid: Boid, width: float) -> bool:
    return boid.position.x + boid.size > width


def collide_top(boid: Boid) -> bool:
    return boid.position.y - boid.size < 0


def collide_bottom(boid: Boid, height: float) -> bool:
    return boid.position.y + boid.size > height


# The facing tests are deliberately literal: facing_right holds for every
# heading, so at exactly +/-pi/2 a boid faces right and not left.
def facing_left(boid: Boid) -> bool:
    return boid.heading > HALF_PI or boid.heading < -HALF_PI


def facing_right(boid: Boid) -> bool:
    return boid.heading < HALF_PI or boid.heading > -HALF_PI


def facing_up(boid: Boid) -> bool:
    return boid.heading > 0


def facing_down(boid: Boid) -> bool:
    return boid.heading < 0


def will_collide_left(boid: Boid, config: SimulationConfig) -> bool:
    margin = config.flock.collision_prevention_distance
    return boid.position.x - boid.size <= margin and facing_left(boid)


def will_collide_right(boid: Boid, config: SimulationConfig) -> bool:
    margin = config.flock.collision_prevention_distance
    return boid.position.x + boid.size >= config.width - margin and facing_right(boid)


def will_collide_top(boid: Boid, config: SimulationConfig) -> bool:
    margin = config.flock.collision_prevention_distance
    return boid.position.y - boid.size <= margin and facing_up(boid)


def will_collide_bottom(boid: Boid, config: SimulationConfig) -> bool:
    margin = config.flock.collision_prevention_distance
    return boid.position.y + boid.size >= config.height - margin and facing_down(boid)


def will_collide(boid: Boid, config: SimulationConfig) -> bool:
    return (
        will_collide_left(boid, config)
        or will_collide_right(boid, config)
        or will_collide_top(boid, config)
        or will_collide_bottom(boid, config)
    )


def collision_delta(boid: Boid, config: SimulationConfig, clock_tick: float, rng: DeterministicRng) -> float:
    """Heading change that steers ``boid`` away from the wall it is about to hit.

    Clockwise is negative. The turn direction follows from which wall is near
    and which diagonal the boid is facing; with no usable diagonal the
    direction is a coin flip.
    """
    max_difference = config.flock.max_radians_per_second * clock_tick
    left = will_collide_left(boid, config)
    right = will_collide_right(boid, config)
    top = will_collide_top(boid, config)
    bottom = will_collide_bottom(boid, config)

    if (
        (left and facing_up(boid))
        or (right and facing_down(boid))
        or (top and facing_right(boid))
        or (bottom and facing_left(boid))
    ):
        delta = -max_difference
    elif (
        (left and facing_down(boid))
        or (right and facing_up(boid))
        or (top and facing_left(boid))
        or (bottom and facing_right(boid))
    ):
        delta = max_difference
    else:
        delta = rng.next_sign() * max_difference

    return delta * config.flock.collision_prevention_turn_factor


def flock_delta(
    boid: Boid,
    peers: Iterable[Boid],
    config: SimulationConfig,
    clock_tick: float,
    rng: DeterministicRng,
) -> FlockObservation:
    observation = FlockObservation()
    sum_x = 0.0
    sum_y = 0.0
    sum_heading = 0.0
    for other in peers:
        if other.id == boid.id:
            continue
        observation.checks += 1
        if not can_see(boid, other):
            continue
        observation.visible += 1
        sum_x += other.position.x
        sum_y += other.position.y
        # Shift from (-pi, pi] to (0, 2*pi] so headings either side of the
        # branch cut do not cancel out.
        sum_heading += other.heading + math.pi

    if observation.visible == 0:
        return observation

    count = observation.visible
    average_heading = sum_heading / count - math.pi
    observation.average_position = Vector2(sum_x / count, sum_y / count)
    observation.average_heading = average_heading

    delta = smallest_delta_theta(boid.heading, average_heading, rng)
    levels = config.flock.independence_levels
    max_difference = config.flock.max_radians_per_second * clock_tick * (levels - boid.independence)
    if delta > max_difference:
        delta = max_difference
    elif delta < -max_difference:
        delta = -max_difference
    observation.delta = delta
    return observation


def update_boid(
    boid: Boid,
    peers: Iterable[Boid],
    config: SimulationConfig,
    clock_tick: float,
    rng: DeterministicRng,
) -> UpdateOutcome:
    if will_collide(boid, config):
        delta = collision_delta(boid, config, clock_tick, rng)
        outcome = UpdateOutcome(rule=SteeringRule.AVOID_WALL, delta=delta)
    else:
        observation = flock_delta(boid, peers, config, clock_tick, rng)
        rule = SteeringRule.FLOCK if observation.visible else SteeringRule.CRUISE
        delta = observation.delta
        outcome = UpdateOutcome(rule=rule, delta=delta, checks=observation.checks, visible=observation.visible)
    boid.heading += delta

    travel = boid.speed * clock_tick
    position = boid.position

    left = collide_left(boid)
    if left or collide_right(boid, config.width):
        boid.heading = math.pi - boid.heading
        position.x += travel if left else -travel
        outcome.bounced_x = True

    top = collide_top(boid)
    if top or collide_bottom(boid, config.height):
        boid.heading = -boid.heading
        position.y += travel if top else -travel
        outcome.bounced_y = True

    boid.heading = normalize_heading(boid.heading)

    position.x += math.cos(boid.heading) * travel
    position.y -= math.sin(boid.heading) * travel
    return outcome
