"""
Wind speed and direction interpolation.

Speed is interpolated as a plain scalar. Direction is interpolated through
its unit vector (sin, cos), so readings of 350 and 10 degrees average to 0
degrees instead of 180.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from interpolation.idw import _grid_weights, grid_axes, relative_weights
from shared.constants import IDW_EPSILON, IDW_POWER

if TYPE_CHECKING:
    from collections.abc import Sequence

    from geo.geometry import LocalBounds, Point2D

# Результирующий вектор короче этого значения не задаёт направления
_MIN_RESULTANT = 1e-12


@dataclass(frozen=True)
class WindReading:
    x: float
    z: float
    speed: float
    direction_deg: float
    station_id: str | None = None


@dataclass(frozen=True)
class WindSample:
    speed: float
    direction_deg: float


@dataclass(frozen=True)
class WindGridResult:
    size: int
    bounds: LocalBounds
    speed: np.ndarray
    direction_deg: np.ndarray


def _vector_to_degrees(east: float, north: float) -> float:
    if math.hypot(east, north) < _MIN_RESULTANT:
        return 0.0
    return math.degrees(math.atan2(east, north)) % 360.0


def interpolate_wind(
    query: Point2D,
    readings: Sequence[WindReading],
    power: float = IDW_POWER,
    epsilon: float = IDW_EPSILON,
) -> WindSample | None:
    """
    Estimate wind at ``query``; None without readings.

    A query within ``epsilon`` of a station returns that station's reading.
    Opposite directions of equal weight cancel out and report 0 degrees.
    """
    if not readings:
        return None
    qx, qz = query
    distances = [math.hypot(qx - r.x, qz - r.z) for r in readings]
    for r, d in zip(readings, distances):
        if d < epsilon or d == 0.0:
            return WindSample(r.speed, r.direction_deg % 360.0)
    w_sum = speed_sum = east_sum = north_sum = 0.0
    for r, w in zip(readings, relative_weights(distances, power)):
        rad = math.radians(r.direction_deg)
        w_sum += w
        speed_sum += w * r.speed
        east_sum += w * math.sin(rad)
        north_sum += w * math.cos(rad)
    return WindSample(speed_sum / w_sum, _vector_to_degrees(east_sum, north_sum))


def interpolate_wind_grid(
    readings: Sequence[WindReading],
    size: int,
    bounds: LocalBounds,
    power: float = IDW_POWER,
    epsilon: float = IDW_EPSILON,
) -> WindGridResult | None:
    """Wind estimate on a ``size x size`` lattice (same layout as the scalar grid)."""
    xs, zs = grid_axes(size, bounds)
    if not readings:
        return None
    sx = np.array([r.x for r in readings], dtype=np.float64)
    sz = np.array([r.z for r in readings], dtype=np.float64)
    speed = np.array([r.speed for r in readings], dtype=np.float64)
    rad = np.radians(np.array([r.direction_deg for r in readings], dtype=np.float64))

    weights, has_match, first_match = _grid_weights(xs, zs, sx, sz, power, epsilon)
    w_sum = weights.sum(axis=2)
    speed_grid = (weights * speed).sum(axis=2) / w_sum
    east = (weights * np.sin(rad)).sum(axis=2)
    north = (weights * np.cos(rad)).sum(axis=2)
    direction = np.where(
        np.hypot(east, north) < _MIN_RESULTANT,
        0.0,
        np.degrees(np.arctan2(east, north)) % 360.0,
    )

    speed_grid = np.where(has_match, speed[first_match], speed_grid)
    direction = np.where(has_match, np.degrees(rad)[first_match] % 360.0, direction)
    return WindGridResult(
        size=size, bounds=bounds, speed=speed_grid, direction_deg=direction
    )
