from __future__ import annotations

import math
from typing import Iterable, Sequence

from ..core.boid import Boid
from ..types.metrics import TickMetrics
from .steering import SteeringRule, UpdateOutcome


def heading_order(boids: Iterable[Boid]) -> tuple[float, float]:
    """Polarization (length of the mean unit heading) and the mean heading angle."""
    sum_x = 0.0
    sum_y = 0.0
    count = 0
    for boid in boids:
        sum_x += math.cos(boid.heading)
        sum_y += math.sin(boid.heading)
        count += 1
    if count == 0:
        return 0.0, 0.0
    mean_x = sum_x / count
    mean_y = sum_y / count
    return math.hypot(mean_x, mean_y), math.atan2(mean_y, mean_x)


def create_metrics(
    tick: int,
    boids: Sequence[Boid],
    outcomes: Sequence[UpdateOutcome],
    clock_tick: float,
    duration_ms: float,
) -> TickMetrics:
    avoidance_turns = 0
    flock_turns = 0
    wall_bounces = 0
    checks = 0
    visible = 0
    for outcome in outcomes:
        if outcome.rule is SteeringRule.AVOID_WALL:
            avoidance_turns += 1
        elif outcome.rule is SteeringRule.FLOCK:
            flock_turns += 1
        wall_bounces += int(outcome.bounced_x) + int(outcome.bounced_y)
        checks += outcome.checks
        visible += outcome.visible
    polarization, mean_heading = heading_order(boids)
    return TickMetrics(
        tick=tick,
        population=len(boids),
        clock_tick=clock_tick,
        avoidance_turns=avoidance_turns,
        flock_turns=flock_turns,
        wall_bounces=wall_bounces,
        visibility_checks=checks,
        visible_pairs=visible,
        polarization=polarization,
        mean_heading=mean_heading,
        tick_duration_ms=duration_ms,
    )
