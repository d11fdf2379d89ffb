from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    clock_tick: float
    avoidance_turns: int
    flock_turns: int
    wall_bounces: int
    visibility_checks: int
    visible_pairs: int
    polarization: float
    mean_heading: float
    tick_duration_ms: float = 0.0
