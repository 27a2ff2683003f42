"""
Building footprints as 2D obstacles.

Containment uses even-odd ray casting with a half-open rule: an edge is
crossed when ``(z1 > z) != (z2 > z)`` and the crossing lies strictly to the
right of the point (``x < x_cross``). For an axis-aligned rectangle this puts
the left and bottom edges inside and the right and top edges outside. The
rule depends only on the input coordinates, so repeated runs agree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from geo.geometry import LocalBounds, closest_point_on_segment, signed_area
from shared.constants import MIN_EDGE_LENGTH, MIN_FOOTPRINT_POINTS

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from geo.geometry import Point2D

DEFAULT_NORMAL: Point2D = (0.0, 1.0)


@dataclass(frozen=True)
class Footprint:
    """Implicitly closed ring of local (x, z) points of one building."""

    points: tuple[Point2D, ...]
    bounds: LocalBounds = field(compare=False)
    orientation: float = field(compare=False)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> Footprint | None:
        """
        Build a footprint, or None if fewer than 3 distinct points remain.

        Consecutive duplicates and an explicit closing point are dropped.
        """
        ring: list[Point2D] = []
        for p in points:
            pt = (float(p[0]), float(p[1]))
            if not ring or ring[-1] != pt:
                ring.append(pt)
        while len(ring) > 1 and ring[0] == ring[-1]:
            ring.pop()
        if len(set(ring)) < MIN_FOOTPRINT_POINTS:
            return None
        pts = tuple(ring)
        bounds = LocalBounds.from_points(pts)
        if bounds is None:
            return None
        area = signed_area(pts)
        return cls(points=pts, bounds=bounds, orientation=1.0 if area >= 0 else -1.0)

    def contains(self, x: float, z: float) -> bool:
        if not self.bounds.contains(x, z):
            return False
        pts = self.points
        inside = False
        j = len(pts) - 1
        for i in range(len(pts)):
            xi, zi = pts[i]
            xj, zj = pts[j]
            if (zi > z) != (zj > z):
                x_cross = (xj - xi) * (z - zi) / (zj - zi) + xi
                if x < x_cross:
                    inside = not inside
            j = i
        return inside

    def edges(self) -> Iterator[tuple[Point2D, Point2D]]:
        pts = self.points
        n = len(pts)
        for i in range(n):
            yield pts[i], pts[(i + 1) % n]


class ObstacleIndex:
    """Read-only set of footprints answering containment and boundary queries."""

    def __init__(self, footprints: Iterable[Footprint] = ()) -> None:
        self._footprints: tuple[Footprint, ...] = tuple(footprints)
        self.skipped = 0
        self._bounds: LocalBounds | None = None
        for fp in self._footprints:
            self._bounds = fp.bounds if self._bounds is None else self._bounds.union(fp.bounds)

    @classmethod
    def from_rings(cls, rings: Iterable[Iterable[Sequence[float]]]) -> ObstacleIndex:
        """
        Build an index from raw point rings.

        Rings with fewer than 3 distinct points are skipped; their number is
        kept in ``skipped``.
        """
        footprints: list[Footprint] = []
        skipped = 0
        for ring in rings:
            fp = Footprint.from_points(ring)
            if fp is None:
                skipped += 1
                continue
            footprints.append(fp)
        index = cls(footprints)
        index.skipped = skipped
        return index

    @property
    def footprints(self) -> tuple[Footprint, ...]:
        return self._footprints

    @property
    def bounds(self) -> LocalBounds | None:
        """Bounding box of all footprints, None for an empty set."""
        return self._bounds

    @property
    def is_empty(self) -> bool:
        return not self._footprints

    def __len__(self) -> int:
        return len(self._footprints)

    def __iter__(self) -> Iterator[Footprint]:
        return iter(self._footprints)

    def contains(self, point: Point2D) -> bool:
        """True if ``point`` lies inside any footprint."""
        x, z = point
        return any(fp.contains(x, z) for fp in self._footprints)

    def nearest_boundary_normal(self, point: Point2D) -> Point2D:
        """
        Outward unit normal of the footprint edge nearest to ``point``.

        Distance is measured to the closest point of each segment. The first
        edge found wins exact ties. Edges shorter than ``MIN_EDGE_LENGTH``
        are ignored; if no edge qualifies ``DEFAULT_NORMAL`` is returned.
        """
        best_dist = math.inf
        best_normal = DEFAULT_NORMAL
        for fp in self._footprints:
            for a, b in fp.edges():
                dx = b[0] - a[0]
                dz = b[1] - a[1]
                length = math.hypot(dx, dz)
                if length < MIN_EDGE_LENGTH:
                    continue
                _, dist = closest_point_on_segment(point, a, b)
                if dist < best_dist:
                    best_dist = dist
                    # CCW ring: outward normal is the edge rotated clockwise
                    s = fp.orientation
                    best_normal = (s * dz / length, -s * dx / length)
        return best_normal
