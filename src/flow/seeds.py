"""Seed grid enumeration and batch streamline generation."""

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import groupby
from typing import TYPE_CHECKING

from flow.jitter import SeededJitter
from flow.tracer import StreamlineTracer
from shared.constants import (
    JITTER_AMPLITUDE,
    JITTER_SEED,
    SEED_GRID_RESOLUTION,
    SEED_HEIGHT_LAYERS,
    SEED_LAYER_BASE,
    SEED_LAYER_SPACING,
    STREAMLINE_BOUNDS_MARGIN,
    STREAMLINE_MAX_STEPS,
    STREAMLINE_MIN_POINTS,
    STREAMLINE_PARALLEL_WORKERS,
    STREAMLINE_STEP_SIZE,
    STREAMLINE_Y_MAX,
    STREAMLINE_Y_MIN,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domain.models import FlowSettings
    from flow.tracer import Streamline
    from geo.geometry import LocalBounds, Point2D
    from geo.obstacles import ObstacleIndex

logger = logging.getLogger(__name__)

_DIAG = math.sqrt(0.5)

# +x восток, +z север
COMPASS_DIRECTIONS: tuple[tuple[str, Point2D], ...] = (
    ('N', (0.0, 1.0)),
    ('NE', (_DIAG, _DIAG)),
    ('E', (1.0, 0.0)),
    ('SE', (_DIAG, -_DIAG)),
    ('S', (0.0, -1.0)),
    ('SW', (-_DIAG, -_DIAG)),
    ('W', (-1.0, 0.0)),
    ('NW', (-_DIAG, _DIAG)),
)

_DIRECTION_BY_LABEL = dict(COMPASS_DIRECTIONS)


@dataclass(frozen=True)
class Seed:
    """Start point of one trace; ``y`` is the height layer."""

    position: tuple[float, float, float]
    direction: Point2D
    compass: str


@dataclass(frozen=True)
class GenerationStats:
    candidates: int
    inside_obstacles: int
    traced: int
    kept: int


def direction_for(label: str) -> Point2D:
    """Unit vector of a compass label (N, NE, ... NW)."""
    try:
        return _DIRECTION_BY_LABEL[label.upper()]
    except KeyError:
        msg = f'Unknown compass label: {label!r}'
        raise ValueError(msg) from None


def layer_heights(
    height_layers: int = SEED_HEIGHT_LAYERS,
    layer_base: float = SEED_LAYER_BASE,
    layer_spacing: float = SEED_LAYER_SPACING,
) -> list[float]:
    return [layer_base + h * layer_spacing for h in range(height_layers)]


def generate_seeds(
    obstacles: ObstacleIndex,
    bounds: LocalBounds,
    *,
    grid_resolution: int = SEED_GRID_RESOLUTION,
    height_layers: int = SEED_HEIGHT_LAYERS,
    layer_base: float = SEED_LAYER_BASE,
    layer_spacing: float = SEED_LAYER_SPACING,
    directions: Sequence[tuple[str, Point2D]] = COMPASS_DIRECTIONS,
) -> list[Seed]:
    """
    Enumerate seeds over a regular grid of cell centers.

    Order is direction, then grid column, then grid row, then height layer.
    Cells whose center lies inside an obstacle produce no seed.

    Args:
        obstacles: Footprints used to drop seeds that start inside a building
        bounds: Rectangle covered by the grid
        grid_resolution: Cells per axis
        height_layers: Number of height layers per cell
        layer_base: Height of the lowest layer
        layer_spacing: Distance between layers
        directions: (label, unit vector) pairs

    Returns:
        Seeds in enumeration order

    """
    heights = layer_heights(height_layers, layer_base, layer_spacing)
    cells: list[Point2D] = []
    for gx in range(grid_resolution):
        for gz in range(grid_resolution):
            x = bounds.min_x + (gx + 0.5) / grid_resolution * bounds.width
            z = bounds.min_z + (gz + 0.5) / grid_resolution * bounds.height
            cells.append((x, z))
    free_cells = [c for c in cells if not obstacles.contains(c)]

    seeds: list[Seed] = []
    for label, direction in directions:
        for x, z in free_cells:
            for y in heights:
                seeds.append(Seed(position=(x, y, z), direction=direction, compass=label))
    return seeds


class StreamlineGenerator:
    """Traces the full seed grid of an area and keeps the useful streamlines."""

    def __init__(
        self,
        *,
        step_size: float = STREAMLINE_STEP_SIZE,
        max_steps: int = STREAMLINE_MAX_STEPS,
        margin: float = STREAMLINE_BOUNDS_MARGIN,
        min_points: int = STREAMLINE_MIN_POINTS,
        grid_resolution: int = SEED_GRID_RESOLUTION,
        height_layers: int = SEED_HEIGHT_LAYERS,
        layer_base: float = SEED_LAYER_BASE,
        layer_spacing: float = SEED_LAYER_SPACING,
        y_min: float = STREAMLINE_Y_MIN,
        y_max: float = STREAMLINE_Y_MAX,
        jitter: SeededJitter | None = None,
        workers: int = STREAMLINE_PARALLEL_WORKERS,
    ):
        self.step_size = step_size
        self.max_steps = max_steps
        self.margin = margin
        self.min_points = min_points
        self.grid_resolution = grid_resolution
        self.height_layers = height_layers
        self.layer_base = layer_base
        self.layer_spacing = layer_spacing
        self.y_min = y_min
        self.y_max = y_max
        self.jitter = jitter or SeededJitter(JITTER_SEED, JITTER_AMPLITUDE)
        self.workers = workers

    @classmethod
    def from_settings(cls, settings: FlowSettings) -> StreamlineGenerator:
        return cls(
            step_size=settings.step_size,
            max_steps=settings.max_steps,
            margin=settings.margin,
            min_points=settings.min_points,
            grid_resolution=settings.grid_resolution,
            height_layers=settings.height_layers,
            layer_base=settings.layer_base,
            layer_spacing=settings.layer_spacing,
            y_min=settings.y_min,
            y_max=settings.y_max,
            jitter=SeededJitter(settings.jitter_seed, settings.jitter_amplitude),
            workers=settings.workers,
        )

    def generate(
        self, obstacles: ObstacleIndex, bounds: LocalBounds | None = None
    ) -> list[Streamline]:
        streamlines, _ = self.generate_with_stats(obstacles, bounds)
        return streamlines

    def generate_with_stats(
        self, obstacles: ObstacleIndex, bounds: LocalBounds | None = None
    ) -> tuple[list[Streamline], GenerationStats]:
        """
        Trace every seed of the grid and filter short streamlines.

        Args:
            obstacles: Footprints of the area
            bounds: Domain rectangle for the tracer; defaults to the obstacle
                bounding box

        Returns:
            (streamlines in seed enumeration order, counters)

        """
        domain = bounds or obstacles.bounds
        if domain is None:
            return [], GenerationStats(0, 0, 0, 0)
        seed_area = obstacles.bounds or domain

        seeds = generate_seeds(
            obstacles,
            seed_area,
            grid_resolution=self.grid_resolution,
            height_layers=self.height_layers,
            layer_base=self.layer_base,
            layer_spacing=self.layer_spacing,
        )
        candidates = (
            len(COMPASS_DIRECTIONS) * self.grid_resolution**2 * self.height_layers
        )

        tracer = StreamlineTracer(
            obstacles,
            domain,
            step_size=self.step_size,
            max_steps=self.max_steps,
            margin=self.margin,
            y_min=self.y_min,
            y_max=self.y_max,
        )

        indexed = list(enumerate(seeds))
        batches = [list(group) for _, group in groupby(indexed, key=lambda p: p[1].compass)]

        def trace_batch(batch: list[tuple[int, Seed]]) -> list[Streamline]:
            return [tracer.trace(seed, self.jitter.for_seed(i)) for i, seed in batch]

        num_workers = min(self.workers, max(1, os.cpu_count() or 1), len(batches))
        if num_workers > 1:
            with ThreadPoolExecutor(max_workers=num_workers) as executor:
                traced = list(executor.map(trace_batch, batches))
        else:
            traced = [trace_batch(b) for b in batches]

        kept = [sl for batch in traced for sl in batch if len(sl) >= self.min_points]
        stats = GenerationStats(
            candidates=candidates,
            inside_obstacles=candidates - len(seeds),
            traced=len(seeds),
            kept=len(kept),
        )
        logger.debug(
            'Seeds: candidates=%d inside=%d traced=%d kept=%d',
            stats.candidates,
            stats.inside_obstacles,
            stats.traced,
            stats.kept,
        )
        return kept, stats
