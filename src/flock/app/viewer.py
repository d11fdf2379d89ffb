from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

import pygame
from pygame.math import Vector2

from ..sim.core.config import UPDATE_ORDERS, AppConfig, SimulationConfig
from ..sim.core.world import World

logger = logging.getLogger(__name__)

BACKGROUND = "#6FA8DC"
HUD_COLOR = "#F0F0F0"


class PygameSurface:
    def __init__(self, target: pygame.Surface):
        self.target = target

    def stroke_circle(self, center: Vector2, radius: float, color: str) -> None:
        pygame.draw.circle(self.target, pygame.Color(color), (center.x, center.y), radius, width=1)

    def fill_triangle(self, points: Sequence[Vector2], color: str) -> None:
        pygame.draw.polygon(self.target, pygame.Color(color), [(p.x, p.y) for p in points])


class Viewer:
    def __init__(self, app_config: AppConfig):
        self.app_config = app_config
        self.world = World(app_config.simulation)
        self.tick = 0
        self.paused = False
        self.running = False
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None

    def run(self, max_frames: Optional[int] = None) -> None:
        config = self.app_config.simulation
        pygame.init()
        try:
            self._screen = pygame.display.set_mode((int(config.width), int(config.height)))
            pygame.display.set_caption("Flock")
            self._clock = pygame.time.Clock()
            self._font = pygame.font.Font(None, 22)
            surface = PygameSurface(self._screen)
            self.running = True
            logger.info("viewer started with %d boids", len(self.world.agents))

            frames = 0
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_keydown(event.key)

                elapsed = self._clock.tick(self.app_config.fps) / 1000.0
                if not self.paused:
                    self.world.step(self.tick, clock_tick=elapsed)
                    self.tick += 1

                self._screen.fill(pygame.Color(BACKGROUND))
                self.world.render(surface)
                self._draw_hud()
                pygame.display.flip()

                frames += 1
                if max_frames is not None and frames >= max_frames:
                    self.running = False
        finally:
            logger.info("viewer stopped at tick %d", self.tick)
            pygame.quit()

    def _handle_keydown(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_r:
            self.world.reset()
            self.tick = 0

    def _draw_hud(self) -> None:
        if self._font is None or self._screen is None or self._clock is None:
            return
        metrics = self.world.metrics
        lines = [f"FPS: {int(self._clock.get_fps())}", f"Boids: {len(self.world.agents)}"]
        if metrics is not None:
            lines.append(f"Polarization: {metrics.polarization:.3f}")
            lines.append(f"Avoiding walls: {metrics.avoidance_turns}")
        if self.paused:
            lines.append("PAUSED")
        y_offset = 8
        for text in lines:
            rendered = self._font.render(text, True, pygame.Color(HUD_COLOR))
            self._screen.blit(rendered, (8, y_offset))
            y_offset += 20


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the flock in a pygame window")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--boids", type=int, default=None, help="Override the initial boid count")
    parser.add_argument("--update-order", choices=list(UPDATE_ORDERS), default=None)
    parser.add_argument("--debug", action="store_true", help="Outline each boid's bounding circle")
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.boids is not None:
        overrides["initial_population"] = args.boids
    if args.update_order is not None:
        overrides["update_order"] = args.update_order
    if args.debug:
        overrides["debug"] = True
    if overrides:
        config = replace(config, **overrides)

    Viewer(AppConfig(simulation=config, fps=args.fps)).run()


if __name__ == "__main__":
    main()
