from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

Point2D = tuple[float, float]


@dataclass(frozen=True)
class LocalBounds:
    """Axis-aligned rectangle in the local (x, z) frame."""

    min_x: float
    max_x: float
    min_z: float
    max_z: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_z - self.min_z

    @property
    def center(self) -> Point2D:
        return (self.min_x + self.max_x) / 2, (self.min_z + self.max_z) / 2

    def contains(self, x: float, z: float, margin: float = 0.0) -> bool:
        """
        Check whether (x, z) lies within the rectangle grown by ``margin``.

        Points exactly on the grown boundary count as inside.
        """
        return (
            self.min_x - margin <= x <= self.max_x + margin
            and self.min_z - margin <= z <= self.max_z + margin
        )

    def union(self, other: LocalBounds) -> LocalBounds:
        return LocalBounds(
            min_x=min(self.min_x, other.min_x),
            max_x=max(self.max_x, other.max_x),
            min_z=min(self.min_z, other.min_z),
            max_z=max(self.max_z, other.max_z),
        )

    @classmethod
    def from_points(cls, points: Iterable[Point2D]) -> LocalBounds | None:
        """Bounding box of ``points`` or None for an empty iterable."""
        min_x = min_z = math.inf
        max_x = max_z = -math.inf
        for x, z in points:
            min_x = min(min_x, x)
            max_x = max(max_x, x)
            min_z = min(min_z, z)
            max_z = max(max_z, z)
        if min_x > max_x:
            return None
        return cls(min_x=min_x, max_x=max_x, min_z=min_z, max_z=max_z)


def closest_point_on_segment(
    p: Point2D, a: Point2D, b: Point2D
) -> tuple[Point2D, float]:
    """
    Closest point to ``p`` on segment ``a``-``b`` and the distance to it.

    The projection parameter is clamped to [0, 1], so the result is a point
    of the segment itself rather than of the infinite line.
    """
    px, pz = p
    ax, az = a
    dx = b[0] - ax
    dz = b[1] - az
    len_sq = dx * dx + dz * dz
    if len_sq == 0.0:
        return a, math.hypot(px - ax, pz - az)
    t = ((px - ax) * dx + (pz - az) * dz) / len_sq
    t = max(0.0, min(1.0, t))
    nx = ax + t * dx
    nz = az + t * dz
    return (nx, nz), math.hypot(px - nx, pz - nz)


def signed_area(ring: tuple[Point2D, ...]) -> float:
    """Shoelace area; positive for counter-clockwise rings (+x east, +z north)."""
    n = len(ring)
    acc = 0.0
    for i in range(n):
        x1, z1 = ring[i]
        x2, z2 = ring[(i + 1) % n]
        acc += x1 * z2 - x2 * z1
    return acc / 2.0

