"""
Inverse distance weighting over scattered stations.

An empty station set yields ``None`` from both the point and the grid form.
A query closer than ``epsilon`` to a station returns that station's value
unchanged (the first such station in input order).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from shared.constants import IDW_EPSILON, IDW_POWER, MIN_GRID_SIZE

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from geo.geometry import LocalBounds, Point2D


@dataclass(frozen=True)
class StationReading:
    """One station value at a local (x, z) position."""

    x: float
    z: float
    value: float
    station_id: str | None = None


@dataclass(frozen=True)
class GridResult:
    """``values[i, j]`` is the estimate at ``(x_i, z_j)``."""

    size: int
    bounds: LocalBounds
    values: np.ndarray

    def axes(self) -> tuple[np.ndarray, np.ndarray]:
        return grid_axes(self.size, self.bounds)


def grid_axes(size: int, bounds: LocalBounds) -> tuple[np.ndarray, np.ndarray]:
    """X and Z coordinates of a ``size x size`` lattice including both edges."""
    if size < MIN_GRID_SIZE:
        msg = f'Grid size must be at least {MIN_GRID_SIZE}, got {size}'
        raise ValueError(msg)
    step_x = (bounds.max_x - bounds.min_x) / (size - 1)
    step_z = (bounds.max_z - bounds.min_z) / (size - 1)
    idx = np.arange(size, dtype=np.float64)
    return bounds.min_x + idx * step_x, bounds.min_z + idx * step_z


def interpolate(
    query: Point2D,
    stations: Sequence[StationReading],
    power: float = IDW_POWER,
    epsilon: float = IDW_EPSILON,
) -> float | None:
    """
    Estimate the value at ``query``.

    Args:
        query: Local (x, z) point
        stations: Known readings
        power: Exponent of the inverse distance weights
        epsilon: Distance below which a station value is returned as is

    Returns:
        Weighted mean, the matched station value, or None without stations

    """
    if not stations:
        return None
    qx, qz = query
    distances = [math.hypot(qx - st.x, qz - st.z) for st in stations]
    for st, d in zip(stations, distances):
        if d < epsilon or d == 0.0:
            return st.value
    weights = relative_weights(distances, power)
    weighted_sum = sum(w * st.value for w, st in zip(weights, stations))
    return weighted_sum / sum(weights)


def relative_weights(distances: Sequence[float], power: float) -> list[float]:
    """
    Inverse distance weights scaled so the nearest station weighs 1.

    ``(d_min / d) ** power`` has the same ratios as ``1 / d ** power`` but
    stays in ``[0, 1]`` for any positive power. Distances must be non-zero.
    """
    d_min = min(distances)
    return [(d_min / d) ** power for d in distances]


def _grid_weights(
    xs: np.ndarray,
    zs: np.ndarray,
    sx: np.ndarray,
    sz: np.ndarray,
    power: float,
    epsilon: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Inverse distance weights for every (cell, station) pair, scaled per cell
    by the nearest distance as in ``relative_weights``.

    Returns:
        (weights with shape (size, size, n), exact-match mask per cell,
        index of the first matching station per cell)

    """
    dx = xs[:, None, None] - sx[None, None, :]
    dz = zs[None, :, None] - sz[None, None, :]
    dist = np.hypot(dx, dz)
    near = (dist < epsilon) | (dist == 0.0)
    has_match = near.any(axis=2)
    first_match = near.argmax(axis=2)
    safe = np.where(near, 1.0, dist)
    weights = (safe.min(axis=2, keepdims=True) / safe) ** power
    return weights, has_match, first_match


def interpolate_grid(
    stations: Sequence[StationReading],
    size: int,
    bounds: LocalBounds,
    power: float = IDW_POWER,
    epsilon: float = IDW_EPSILON,
) -> GridResult | None:
    """
    Point-form estimate at every node of a ``size x size`` lattice.

    Raises:
        ValueError: If size is smaller than 2

    """
    xs, zs = grid_axes(size, bounds)
    if not stations:
        return None
    sx = np.array([s.x for s in stations], dtype=np.float64)
    sz = np.array([s.z for s in stations], dtype=np.float64)
    sv = np.array([s.value for s in stations], dtype=np.float64)

    weights, has_match, first_match = _grid_weights(xs, zs, sx, sz, power, epsilon)
    values = (weights * sv).sum(axis=2) / weights.sum(axis=2)
    values = np.where(has_match, sv[first_match], values)
    return GridResult(size=size, bounds=bounds, values=values)


class IdwInterpolator:
    """IDW estimator bound to a fixed set of stations."""

    def __init__(
        self,
        stations: Iterable[StationReading],
        power: float = IDW_POWER,
        epsilon: float = IDW_EPSILON,
    ):
        self.stations: tuple[StationReading, ...] = tuple(stations)
        self.power = power
        self.epsilon = epsilon

    def __len__(self) -> int:
        return len(self.stations)

    def at(self, query: Point2D) -> float | None:
        return interpolate(query, self.stations, self.power, self.epsilon)

    def grid(self, size: int, bounds: LocalBounds) -> GridResult | None:
        return interpolate_grid(self.stations, size, bounds, self.power, self.epsilon)
