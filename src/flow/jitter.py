"""Reproducible vertical jitter for streamline points."""

from __future__ import annotations

import random
from collections.abc import Callable

from shared.constants import JITTER_AMPLITUDE, JITTER_SEED

JitterFn = Callable[[int], float]

# Separates per-seed streams of one base seed
_SEED_STRIDE = 1_000_003


def no_jitter(step: int) -> float:
    _ = step
    return 0.0


class SeededJitter:
    """
    Factory of independent jitter streams, one per traced seed.

    Each stream draws uniform offsets in ``[-amplitude / 2, amplitude / 2)``
    from its own ``random.Random``, so the output of a seed depends only on
    ``(seed, index)`` and not on which thread traced it or in what order.
    """

    def __init__(self, seed: int = JITTER_SEED, amplitude: float = JITTER_AMPLITUDE):
        self.seed = seed
        self.amplitude = amplitude

    def for_seed(self, index: int) -> JitterFn:
        if self.amplitude == 0:
            return no_jitter
        rng = random.Random(self.seed * _SEED_STRIDE + index)
        amplitude = self.amplitude

        def jitter(step: int) -> float:
            _ = step
            return (rng.random() - 0.5) * amplitude

        return jitter
