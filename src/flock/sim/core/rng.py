from __future__ import annotations

import random


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_range(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + self._random.random() * (high - low)

    def next_int_inclusive(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def next_sign(self) -> float:
        return -1.0 if self._random.randint(0, 1) else 1.0
