from __future__ import annotations

import logging
import math
from time import perf_counter
from typing import Any, Dict, List, Optional

from pygame.math import Vector2

from .boid import Boid
from .config import SimulationConfig
from .rng import DeterministicRng
from ..systems import metrics as metrics_system, steering
from ..systems.render import DrawingSurface, draw_world
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from ..utils.math2d import normalize_heading

logger = logging.getLogger(__name__)


class World:
    def __init__(self, config: SimulationConfig):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._agents: List[Boid] = []
        self._next_id = 0
        self._clock_tick = 0.0
        self._metrics: TickMetrics | None = None
        self._bootstrap_population()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def agents(self) -> List[Boid]:
        return self._agents

    @property
    def clock_tick(self) -> float:
        return self._clock_tick

    @property
    def rng(self) -> DeterministicRng:
        return self._rng

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._agents.clear()
        self._rng.reset()
        self._next_id = 0
        self._clock_tick = 0.0
        self._metrics = None
        self._bootstrap_population()
        logger.debug("world reset with %d boids (seed=%d)", len(self._agents), self._config.seed)

    def step(self, tick: int, clock_tick: Optional[float] = None) -> TickMetrics:
        """Advance every boid by one tick.

        ``clock_tick`` is the elapsed wall time reported by a real-time host;
        fixed-step hosts leave it unset and get ``config.time_step``.

        With the "sequential" update order each boid reads the live list, so a
        boid late in the list sees peers that have already moved this tick.
        "snapshot" hands every boid the same pre-tick copies instead.
        """
        start = perf_counter()
        config = self._config
        if clock_tick is None:
            dt = config.time_step
        else:
            dt = min(max(0.0, clock_tick), config.max_clock_tick)
        self._clock_tick = dt

        if config.update_order == "snapshot":
            peers: List[Boid] = [boid.copy() for boid in self._agents]
        else:
            peers = self._agents

        outcomes = [steering.update_boid(boid, peers, config, dt, self._rng) for boid in self._agents]

        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(tick, self._agents, outcomes, dt, duration_ms)
        return self._metrics

    def render(self, surface: DrawingSurface) -> None:
        draw_world(surface, self._agents, self._config)

    def snapshot(self, tick: int) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else self._idle_metrics(tick)
        config = self._config
        metadata = SnapshotMetadata(
            sim_dt=config.time_step,
            tick_rate=1.0 / config.time_step,
            seed=config.seed,
            config_version=config.config_version,
            update_order=config.update_order,
            independence_levels=config.flock.independence_levels,
        )
        return Snapshot(
            tick=tick,
            metrics=metrics,
            agents=[self._agent_snapshot(boid) for boid in self._agents],
            world=SnapshotWorld(width=config.width, height=config.height),
            metadata=metadata,
        )

    def add_boid(
        self,
        position: Vector2,
        heading: float,
        speed: float,
        size: float,
        visual_radius: float,
        independence: int,
    ) -> Boid:
        boid = Boid.create(
            self._next_id,
            position,
            heading,
            speed,
            size,
            visual_radius,
            independence,
            self._config.flock.colors,
        )
        self._agents.append(boid)
        self._next_id += 1
        return boid

    def _bootstrap_population(self) -> None:
        flock = self._config.flock
        rng = self._rng
        for _ in range(self._config.initial_population):
            independence = rng.next_int_inclusive(0, flock.independence_levels - 1)
            size = rng.next_range(flock.min_size, flock.max_size)
            heading = normalize_heading(rng.next_range(-math.pi, math.pi))
            speed = rng.next_range(flock.min_speed, flock.max_speed)
            position = Vector2(
                rng.next_range(size, self._config.width - size),
                rng.next_range(size, self._config.height - size),
            )
            visual_radius = rng.next_int_inclusive(flock.min_visual_radius, flock.max_visual_radius)
            self.add_boid(position, heading, speed, size, visual_radius, independence)
        logger.debug("bootstrapped %d boids", len(self._agents))

    def _idle_metrics(self, tick: int) -> TickMetrics:
        return metrics_system.create_metrics(tick, self._agents, [], self._clock_tick, 0.0)

    @staticmethod
    def _agent_snapshot(boid: Boid) -> Dict[str, Any]:
        return {
            "id": boid.id,
            "x": boid.position.x,
            "y": boid.position.y,
            "heading": boid.heading,
            "speed": boid.speed,
            "size": boid.size,
            "visual_radius": boid.visual_radius,
            "independence": boid.independence,
            "color": boid.color,
        }
