"""Flow module - obstacle-aware streamline tracing."""

from .jitter import JitterFn, SeededJitter, no_jitter
from .seeds import (
    COMPASS_DIRECTIONS,
    GenerationStats,
    Seed,
    StreamlineGenerator,
    direction_for,
    generate_seeds,
    layer_heights,
)
from .tracer import StreamlineTracer, Streamline, TerminationReason, tangent_for

__all__ = [
    'COMPASS_DIRECTIONS',
    'GenerationStats',
    'JitterFn',
    'Seed',
    'SeededJitter',
    'Streamline',
    'StreamlineGenerator',
    'StreamlineTracer',
    'TerminationReason',
    'direction_for',
    'generate_seeds',
    'layer_heights',
    'no_jitter',
    'tangent_for',
]
