from __future__ import annotations

import math
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
from pytest import approx

from flock.sim.core.config import FlockConfig, SimulationConfig, load_config

ROOT = Path(__file__).resolve().parents[2]


def test_defaults_match_canvas_and_flock_constants():
    config = SimulationConfig()
    assert (config.width, config.height) == (1350.0, 650.0)
    assert config.initial_population == 250
    assert config.update_order == "sequential"
    assert config.flock.independence_levels == 16
    assert config.flock.max_radians_per_second == approx(math.pi / 8)
    assert config.flock.minor_angle == approx(math.radians(30))


def test_config_is_immutable():
    config = SimulationConfig()
    with pytest.raises(FrozenInstanceError):
        config.width = 10.0  # type: ignore[misc]


def test_from_yaml_reads_nested_flock_section(tmp_path):
    path = tmp_path / "flock.yaml"
    path.write_text(
        "\n".join(
            [
                "width: 800",
                "height: 600",
                "initial_population: 12",
                "update_order: snapshot",
                "flock:",
                "  colors: ['#FFFFFF', '#808080', '#000000']",
                "  min_speed: 50",
                "  max_speed: 60",
            ]
        )
    )

    config = SimulationConfig.from_yaml(path)

    assert config.width == 800
    assert config.initial_population == 12
    assert config.update_order == "snapshot"
    assert config.flock.colors == ("#FFFFFF", "#808080", "#000000")
    assert config.flock.independence_levels == 3
    assert config.flock.min_speed == 50
    assert config.flock.max_size == FlockConfig().max_size


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"bogus": 1}, "Unknown simulation config keys: bogus"),
        ({"flock": {"wings": 2}}, "Unknown flock config keys: wings"),
        ({"update_order": "random"}, "Unknown update order"),
        ({"flock": {"min_speed": 500, "max_speed": 100}}, "min_speed"),
        ({"flock": {"colors": []}}, "colors"),
        ({"width": 40}, "too small"),
        ({"time_step": 0}, "time_step"),
        ({"max_clock_tick": 0.1}, "exceeds flock.min_size"),
        ({"flock": {"max_speed": 2000}}, "exceeds flock.min_size"),
    ],
)
def test_invalid_config_is_rejected(raw, message):
    with pytest.raises(ValueError, match=message):
        load_config(raw)


@pytest.mark.config_change
def test_default_yaml_matches_dataclass_defaults():
    config = SimulationConfig.from_yaml(ROOT / "configs" / "default.yaml")
    defaults = SimulationConfig()
    assert config.width == defaults.width
    assert config.height == defaults.height
    assert config.initial_population == defaults.initial_population
    assert config.time_step == approx(defaults.time_step, rel=1e-4)
    assert config.flock.max_radians_per_second == approx(defaults.flock.max_radians_per_second)
    assert config.flock.collision_prevention_distance == defaults.flock.collision_prevention_distance
    assert config.flock.collision_prevention_turn_factor == defaults.flock.collision_prevention_turn_factor
