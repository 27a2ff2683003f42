"""
Single streamline tracing around building footprints.

A trace advances in fixed steps. When a step would enter a footprint the
direction is bent along the nearest boundary (the outward normal rotated by
90 degrees) and one deflected step is tried instead; if that step is still
inside, the trace stops. Once a step along the seed direction is clear
again, the trace returns to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from flow.jitter import no_jitter
from shared.constants import (
    STREAMLINE_BOUNDS_MARGIN,
    STREAMLINE_MAX_STEPS,
    STREAMLINE_STEP_SIZE,
    STREAMLINE_Y_MAX,
    STREAMLINE_Y_MIN,
)

if TYPE_CHECKING:
    from flow.jitter import JitterFn
    from flow.seeds import Seed
    from geo.geometry import LocalBounds, Point2D
    from geo.obstacles import ObstacleIndex

Point3D = tuple[float, float, float]


class TerminationReason(str, Enum):
    SKIPPED = 'skipped'
    MAX_STEPS = 'max_steps'
    OUT_OF_BOUNDS = 'out_of_bounds'
    DEADLOCK = 'deadlock'


@dataclass(frozen=True)
class Streamline:
    """Ordered (x, y, z) points traced from one seed."""

    direction: str
    points: tuple[Point3D, ...]
    termination: TerminationReason = field(
        default=TerminationReason.MAX_STEPS, compare=False
    )

    def __len__(self) -> int:
        return len(self.points)


def tangent_for(normal: Point2D, heading: Point2D) -> Point2D:
    """
    Boundary tangent for an outward ``normal``.

    Of the two tangents the one not opposing ``heading`` is chosen; a heading
    perpendicular to both takes the normal rotated counter-clockwise.
    """
    nx, nz = normal
    tx, tz = -nz, nx
    if tx * heading[0] + tz * heading[1] < 0:
        return -tx, -tz
    return tx, tz


class StreamlineTracer:
    """Traces seeds against one obstacle set inside one domain rectangle."""

    def __init__(
        self,
        obstacles: ObstacleIndex,
        bounds: LocalBounds,
        *,
        step_size: float = STREAMLINE_STEP_SIZE,
        max_steps: int = STREAMLINE_MAX_STEPS,
        margin: float = STREAMLINE_BOUNDS_MARGIN,
        y_min: float = STREAMLINE_Y_MIN,
        y_max: float = STREAMLINE_Y_MAX,
    ):
        """
        Initialize tracer.

        Args:
            obstacles: Footprints to deflect around
            bounds: Domain rectangle; traces stop once beyond it by ``margin``
            step_size: Distance advanced per step
            max_steps: Maximum number of points per streamline
            margin: Allowed overshoot past ``bounds`` on every axis
            y_min: Lower clamp for the jittered height
            y_max: Upper clamp for the jittered height

        """
        if step_size <= 0:
            msg = f'step_size must be positive, got {step_size}'
            raise ValueError(msg)
        if max_steps < 1:
            msg = f'max_steps must be at least 1, got {max_steps}'
            raise ValueError(msg)
        if y_min > y_max:
            msg = f'y_min ({y_min}) is greater than y_max ({y_max})'
            raise ValueError(msg)
        self.obstacles = obstacles
        self.bounds = bounds
        self.step_size = step_size
        self.max_steps = max_steps
        self.margin = margin
        self.y_min = y_min
        self.y_max = y_max

    def _in_domain(self, x: float, z: float) -> bool:
        return self.bounds.contains(x, z, self.margin)

    def trace(self, seed: Seed, jitter: JitterFn | None = None) -> Streamline:
        """
        Trace one seed until max steps, leaving the domain, or a deadlock.

        Args:
            seed: Start position, unit direction and compass label
            jitter: Vertical offset per step; defaults to no jitter

        Returns:
            Streamline starting at the seed position. A seed outside the
            domain yields an empty streamline.

        """
        jitter = jitter or no_jitter
        x, y, z = seed.position
        if not self._in_domain(x, z):
            return Streamline(seed.compass, (), TerminationReason.SKIPPED)

        s = self.step_size
        free = seed.direction
        dx, dz = free
        contains = self.obstacles.contains
        points: list[Point3D] = [(x, y, z)]
        reason = TerminationReason.MAX_STEPS
        step = 0

        while len(points) < self.max_steps:
            if (dx, dz) != free and not contains((x + free[0] * s, z + free[1] * s)):
                dx, dz = free

            nx = x + dx * s
            nz = z + dz * s
            if contains((nx, nz)):
                normal = self.obstacles.nearest_boundary_normal((nx, nz))
                dx, dz = tangent_for(normal, (dx, dz))
                nx = x + dx * s
                nz = z + dz * s
                if contains((nx, nz)):
                    reason = TerminationReason.DEADLOCK
                    break

            if not self._in_domain(nx, nz):
                reason = TerminationReason.OUT_OF_BOUNDS
                break

            y = min(max(y + jitter(step), self.y_min), self.y_max)
            x, z = nx, nz
            points.append((x, y, z))
            step += 1

        return Streamline(seed.compass, tuple(points), reason)
