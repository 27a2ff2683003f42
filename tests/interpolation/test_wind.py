"""Tests for interpolation.wind."""

import numpy as np
import pytest

from geo.geometry import LocalBounds
from interpolation.wind import WindReading, interpolate_wind, interpolate_wind_grid


def _angle_gap(a, b):
    d = abs(a - b) % 360
    return min(d, 360 - d)


class TestInterpolateWind:
    """Tests for wind point interpolation."""

    def test_empty(self):
        assert interpolate_wind((0, 0), []) is None

    def test_direction_wraps_around_north(self):
        readings = [WindReading(-10, 0, 4.0, 350.0), WindReading(10, 0, 6.0, 10.0)]
        sample = interpolate_wind((0, 0), readings)
        assert sample.speed == pytest.approx(5.0)
        assert _angle_gap(sample.direction_deg, 0.0) < 1e-6

    def test_opposite_directions_cancel(self):
        readings = [WindReading(-10, 0, 2.0, 90.0), WindReading(10, 0, 2.0, 270.0)]
        sample = interpolate_wind((0, 0), readings)
        assert sample.direction_deg == 0.0
        assert sample.speed == pytest.approx(2.0)

    def test_exact_station(self):
        readings = [WindReading(0, 0, 3.0, 400.0), WindReading(50, 0, 1.0, 90.0)]
        sample = interpolate_wind((0, 0), readings)
        assert sample.speed == 3.0
        assert sample.direction_deg == pytest.approx(40.0)

    def test_direction_in_range(self):
        readings = [WindReading(0, 0, 3.0, 200.0), WindReading(50, 0, 1.0, 250.0)]
        sample = interpolate_wind((20, 30), readings)
        assert 200.0 < sample.direction_deg < 250.0


class TestWindGrid:
    """Tests for the wind grid form."""

    BOUNDS = LocalBounds(-50, 50, -50, 50)

    def test_empty(self):
        assert interpolate_wind_grid([], 4, self.BOUNDS) is None

    def test_size_below_two_raises(self):
        with pytest.raises(ValueError):
            interpolate_wind_grid([WindReading(0, 0, 1.0, 0.0)], 1, self.BOUNDS)

    def test_matches_point_form(self):
        readings = [
            WindReading(-30, 10, 4.0, 350.0),
            WindReading(25, -5, 6.0, 20.0),
            WindReading(0, 40, 2.0, 300.0),
        ]
        grid = interpolate_wind_grid(readings, 6, self.BOUNDS)
        xs, zs = grid.speed.shape
        assert (xs, zs) == (6, 6)
        step = 100 / 5
        for i in range(6):
            for j in range(6):
                q = (-50 + i * step, -50 + j * step)
                sample = interpolate_wind(q, readings)
                assert grid.speed[i, j] == pytest.approx(sample.speed)
                assert _angle_gap(grid.direction_deg[i, j], sample.direction_deg) < 1e-6

    def test_large_power_stays_finite(self):
        readings = [WindReading(-50, -50, 2.0, 90.0), WindReading(50, -50, 5.0, 180.0)]
        grid = interpolate_wind_grid(readings, 3, self.BOUNDS, power=100)
        assert np.isfinite(grid.speed).all()
        assert np.isfinite(grid.direction_deg).all()
        # Узел (50, 50) ближе ко второй станции
        sample = interpolate_wind((50, 50), readings, power=100)
        assert sample.speed == pytest.approx(5.0)
        assert sample.direction_deg == pytest.approx(180.0)
        assert grid.speed[2, 2] == pytest.approx(sample.speed)
        assert grid.direction_deg[2, 2] == pytest.approx(sample.direction_deg)
