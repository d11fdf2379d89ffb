from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..sim.core.config import UPDATE_ORDERS, SimulationConfig
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)


_BASIC_HEADER = [
    "tick",
    "population",
    "avoidance_turns",
    "flock_turns",
    "wall_bounces",
    "polarization",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "population",
    "clock_tick",
    "avoidance_turns",
    "flock_turns",
    "cruising",
    "wall_bounces",
    "visibility_checks",
    "visible_pairs",
    "visible_per_agent",
    "polarization",
    "mean_heading",
    "avg_x",
    "avg_y",
    "tick_ms",
    "tick_ms_per_agent",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.avoidance_turns,
        metrics.flock_turns,
        metrics.wall_bounces,
        f"{metrics.polarization:.4f}",
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(world: World, metrics: TickMetrics, tick_ms: float) -> list[object]:
    population = metrics.population
    if population <= 0:
        cruising = 0
        visible_per_agent = 0.0
        avg_x = 0.0
        avg_y = 0.0
        tick_ms_per_agent = 0.0
    else:
        cruising = population - metrics.avoidance_turns - metrics.flock_turns
        visible_per_agent = metrics.visible_pairs / population
        avg_x = sum(boid.position.x for boid in world.agents) / population
        avg_y = sum(boid.position.y for boid in world.agents) / population
        tick_ms_per_agent = tick_ms / population

    return [
        metrics.tick,
        population,
        f"{metrics.clock_tick:.6f}",
        metrics.avoidance_turns,
        metrics.flock_turns,
        cruising,
        metrics.wall_bounces,
        metrics.visibility_checks,
        metrics.visible_pairs,
        f"{visible_per_agent:.4f}",
        f"{metrics.polarization:.4f}",
        f"{metrics.mean_heading:.4f}",
        f"{avg_x:.4f}",
        f"{avg_y:.4f}",
        f"{tick_ms:.3f}",
        f"{tick_ms_per_agent:.4f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p99": _percentile(sorted_values, 0.99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    summary_window: int = 600,
    config: Optional[SimulationConfig] = None,
    update_order: Optional[str] = None,
) -> World:
    config = config if config is not None else SimulationConfig()
    if seed is not None:
        config = replace(config, seed=seed)
    if update_order is not None:
        config = replace(config, update_order=update_order)

    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    world = World(config)
    logger.info(
        "headless run: steps=%d boids=%d seed=%d order=%s",
        steps,
        len(world.agents),
        config.seed,
        config.update_order,
    )

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    tick_ms_series: list[float] = []
    polarization_series: list[float] = []
    avoidance_series: list[float] = []
    visible_series: list[float] = []

    try:
        for tick in range(steps):
            metrics = world.step(tick)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms

            if summary_path:
                tick_ms_series.append(tick_ms)
                polarization_series.append(metrics.polarization)
                avoidance_series.append(float(metrics.avoidance_turns))
                visible_series.append(
                    0.0 if metrics.population <= 0 else metrics.visible_pairs / metrics.population
                )

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(world, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": config.seed,
            "population": len(world.agents),
            "update_order": config.update_order,
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "polarization": _summary_stats(polarization_series),
            "avoidance_turns": _summary_stats(avoidance_series),
            "visible_per_agent": _summary_stats(visible_series),
            "tail_window": {
                "window": window,
                "polarization": _summary_stats(polarization_series[tail_slice]),
                "visible_per_agent": _summary_stats(visible_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    if world.metrics is not None:
        logger.info("headless run finished: final polarization=%.4f", world.metrics.polarization)
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless flock simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--update-order", choices=list(UPDATE_ORDERS), default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write run summary stats.")
    parser.add_argument("--summary-window", type=int, default=600, help="Tail window size (ticks) for summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = SimulationConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        summary_window=args.summary_window,
        config=config,
        update_order=args.update_order,
    )


if __name__ == "__main__":
    main()
