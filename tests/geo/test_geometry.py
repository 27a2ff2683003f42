"""Tests for geo.geometry helpers."""

import pytest

from geo.geometry import LocalBounds, closest_point_on_segment, signed_area


class TestLocalBounds:
    """Tests for LocalBounds."""

    def test_size_and_center(self):
        b = LocalBounds(min_x=-10, max_x=30, min_z=0, max_z=20)
        assert b.width == 40
        assert b.height == 20
        assert b.center == (10, 10)

    def test_contains_is_inclusive(self):
        b = LocalBounds(0, 10, 0, 10)
        assert b.contains(0, 0)
        assert b.contains(10, 10)
        assert not b.contains(10.001, 5)

    def test_contains_with_margin(self):
        b = LocalBounds(0, 10, 0, 10)
        assert b.contains(-5, 15, margin=5)
        assert not b.contains(-5.1, 5, margin=5)

    def test_from_points(self):
        b = LocalBounds.from_points([(1, 2), (-3, 5), (4, -1)])
        assert b == LocalBounds(-3, 4, -1, 5)

    def test_from_points_empty(self):
        assert LocalBounds.from_points([]) is None

    def test_union(self):
        a = LocalBounds(0, 1, 0, 1)
        b = LocalBounds(-1, 0.5, 0.5, 3)
        assert a.union(b) == LocalBounds(-1, 1, 0, 3)


class TestSegmentHelpers:
    """Tests for closest_point_on_segment and signed_area."""

    def test_projection_inside_segment(self):
        point, dist = closest_point_on_segment((5, 3), (0, 0), (10, 0))
        assert point == (5, 0)
        assert dist == pytest.approx(3)

    def test_projection_clamped_to_endpoint(self):
        point, dist = closest_point_on_segment((-4, 3), (0, 0), (10, 0))
        assert point == (0, 0)
        assert dist == pytest.approx(5)

    def test_degenerate_segment(self):
        point, dist = closest_point_on_segment((3, 4), (0, 0), (0, 0))
        assert point == (0, 0)
        assert dist == pytest.approx(5)

    def test_signed_area_orientation(self, square_ring):
        assert signed_area(tuple(square_ring)) == pytest.approx(2500)
        assert signed_area(tuple(reversed(square_ring))) == pytest.approx(-2500)

