"""
evolink — Randomness Source

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

One object owns the random stream. Every constructor and breeding call
takes it explicitly, so a run is reproducible from its seed.
"""

import numpy as np
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Uniform draws over a numpy Generator."""

    def __init__(self, seed: Optional[int] = None, generator: Optional[np.random.Generator] = None):
        self._rng = generator if generator is not None else np.random.default_rng(seed)

    def integer(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi)."""
        return int(self._rng.integers(lo, hi))

    def integer_inclusive(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi]."""
        return self.integer(lo, hi + 1)

    def uniform(self, lo: float, hi: float) -> float:
        return float(self._rng.uniform(lo, hi))

    def random(self) -> float:
        return float(self._rng.random())

    def boolean(self, rate: float = 0.5) -> bool:
        # rate 0 never fires, rate 1 always fires
        return self.random() < rate

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("choice from an empty sequence")
        return items[self.integer(0, len(items))]

    def spawn(self) -> "RandomSource":
        """Independent child stream, deterministic given this source's seed."""
        return RandomSource(generator=self._rng.spawn(1)[0])
