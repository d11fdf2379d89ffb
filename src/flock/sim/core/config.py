from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Tuple

import yaml

UPDATE_ORDERS = ("sequential", "snapshot")

_GREYSCALE = (
    "#FFFFFF",
    "#EEEEEE",
    "#DDDDDD",
    "#CCCCCC",
    "#BBBBBB",
    "#AAAAAA",
    "#999999",
    "#888888",
    "#777777",
    "#666666",
    "#555555",
    "#444444",
    "#333333",
    "#222222",
    "#111111",
    "#000000",
)


@dataclass(frozen=True)
class FlockConfig:
    # One colour per independence level, lightest (most conformist) first.
    colors: Tuple[str, ...] = _GREYSCALE
    minor_angle_degrees: float = 30.0
    min_size: float = 20.0
    max_size: float = 30.0
    min_speed: float = 200.0
    max_speed: float = 400.0
    min_visual_radius: int = 50
    max_visual_radius: int = 150
    max_radians_per_second: float = math.pi / 8
    collision_prevention_distance: float = 100.0
    collision_prevention_turn_factor: float = 16.0

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("flock.colors must contain at least one colour")
        _check_range("size", self.min_size, self.max_size, allow_zero=False)
        _check_range("speed", self.min_speed, self.max_speed)
        _check_range("visual_radius", self.min_visual_radius, self.max_visual_radius)
        if self.max_radians_per_second < 0:
            raise ValueError("flock.max_radians_per_second must be non-negative")
        if self.collision_prevention_distance < 0:
            raise ValueError("flock.collision_prevention_distance must be non-negative")

    @property
    def independence_levels(self) -> int:
        return len(self.colors)

    @property
    def minor_angle(self) -> float:
        return math.radians(self.minor_angle_degrees)


@dataclass(frozen=True)
class SimulationConfig:
    width: float = 1350.0
    height: float = 650.0
    initial_population: int = 250
    time_step: float = 1.0 / 60.0
    # Upper bound for a real-time clock tick (window dragged, process paused).
    max_clock_tick: float = 0.05
    seed: int = 42
    update_order: str = "sequential"
    debug: bool = False
    config_version: str = "v1"
    flock: FlockConfig = field(default_factory=FlockConfig)

    def __post_init__(self) -> None:
        if self.update_order not in UPDATE_ORDERS:
            raise ValueError(f"Unknown update order: {self.update_order!r} (expected one of {UPDATE_ORDERS})")
        if self.initial_population < 0:
            raise ValueError("initial_population must be non-negative")
        if self.time_step <= 0 or self.max_clock_tick <= 0:
            raise ValueError("time_step and max_clock_tick must be positive")
        if self.width < 2 * self.flock.max_size or self.height < 2 * self.flock.max_size:
            raise ValueError(
                f"world {self.width}x{self.height} is too small for boids of size {self.flock.max_size}"
            )
        # A bounce only fires once the edge has crossed a wall, so one tick of
        # travel must not carry the centre past it.
        max_travel = self.flock.max_speed * max(self.time_step, self.max_clock_tick)
        if max_travel > self.flock.min_size:
            raise ValueError(
                f"flock.max_speed * max_clock_tick ({max_travel:g}) exceeds flock.min_size ({self.flock.min_size:g})"
            )

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    broadcast_interval: int = 2
    fps: int = 60


def _check_range(name: str, low: float, high: float, allow_zero: bool = True) -> None:
    if low < 0 or (not allow_zero and low <= 0):
        raise ValueError(f"flock.min_{name} must be {'non-negative' if allow_zero else 'positive'}")
    if low > high:
        raise ValueError(f"flock.min_{name} ({low}) exceeds flock.max_{name} ({high})")


def _build(cls: type, section: str, values: dict[str, Any]) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown {section} config keys: {', '.join(unknown)}")
    return cls(**values)


def load_config(raw: dict) -> SimulationConfig:
    flock_raw = dict(raw.get("flock", {}) or {})
    if "colors" in flock_raw:
        flock_raw["colors"] = tuple(str(color) for color in flock_raw["colors"])
    flock = _build(FlockConfig, "flock", flock_raw)
    sim_values = {k: v for k, v in raw.items() if k != "flock"}
    return _build(SimulationConfig, "simulation", {"flock": flock, **sim_values})
