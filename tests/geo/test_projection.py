"""Tests for geo.projection."""

import pytest

from geo.geometry import LocalBounds
from geo.projection import AreaFrame, check_alignment, measure_distortion

RECT = ((1.30, 103.80), (1.31, 103.82))


@pytest.fixture
def frame():
    return AreaFrame.from_rendered_bounds(RECT)


class TestAreaFrame:
    """Tests for AreaFrame construction and projection."""

    def test_origin_is_rectangle_midpoint(self, frame):
        assert frame.origin == pytest.approx((1.305, 103.81))

    def test_origin_projects_to_zero(self, frame):
        assert frame.project(*frame.origin) == pytest.approx((0.0, 0.0))

    def test_axes_orientation(self, frame):
        x, z = frame.project(1.306, 103.811)
        assert x == pytest.approx(111.0)
        assert z == pytest.approx(111.0)
        _, z_south = frame.project(1.304, 103.81)
        assert z_south < 0

    def test_local_bounds_symmetric(self, frame):
        b = frame.bounds
        assert b.min_x == pytest.approx(-b.max_x)
        assert b.min_z == pytest.approx(-b.max_z)
        assert b.width == pytest.approx(0.02 * 111_000)
        assert b.height == pytest.approx(0.01 * 111_000)

    def test_unproject_inverts_project(self, frame):
        lat, lng = frame.unproject(*frame.project(1.3012, 103.8177))
        assert lat == pytest.approx(1.3012)
        assert lng == pytest.approx(103.8177)

    def test_custom_scale(self):
        frame = AreaFrame.from_rendered_bounds(RECT, scale=100_000)
        assert frame.project(1.306, 103.81)[1] == pytest.approx(100.0)

    @pytest.mark.parametrize(
        'rect',
        [
            ((1.31, 103.80), (1.30, 103.82)),
            ((1.30, 103.80), (1.30, 103.82)),
            ((1.30, 103.82), (1.31, 103.82)),
        ],
    )
    def test_degenerate_rectangle_raises(self, rect):
        with pytest.raises(ValueError, match='Degenerate'):
            AreaFrame.from_rendered_bounds(rect)

    def test_non_positive_scale_raises(self):
        with pytest.raises(ValueError, match='Scale'):
            AreaFrame.from_rendered_bounds(RECT, scale=0)


class TestAlignment:
    """Tests for check_alignment."""

    def test_centred_geometry_is_aligned(self, frame):
        report = check_alignment(frame, LocalBounds(-500, 500, -300, 300))
        assert report.aligned
        assert report.offset_x == pytest.approx(0)
        assert report.outside_ratio == pytest.approx(0)

    def test_geometry_under_other_origin(self, frame):
        report = check_alignment(frame, LocalBounds(4000, 5000, -300, 300))
        assert not report.aligned
        assert report.offset_x == pytest.approx(4500)
        assert report.outside_ratio == pytest.approx(1.0)


class TestDistortion:
    """Tests for measure_distortion."""

    def test_small_near_equator(self, frame):
        distortion = measure_distortion(frame)
        assert distortion.max_error < 0.01
        assert distortion.planar_width_m == pytest.approx(2220)

    def test_large_at_high_latitude(self):
        frame = AreaFrame.from_rendered_bounds(((59.99, 10.0), (60.01, 10.02)))
        distortion = measure_distortion(frame)
        # A degree of longitude at 60N is about half a degree at the equator
        assert distortion.width_error > 0.5
        assert distortion.height_error < 0.01
