"""Local planar frame shared by every artifact of one area."""

from __future__ import annotations

from dataclasses import dataclass

from pyproj import Geod

from geo.geometry import LocalBounds
from shared.constants import ALIGNMENT_OFFSET_TOLERANCE, METERS_PER_DEGREE


GeoRect = tuple[tuple[float, float], tuple[float, float]]

_GEOD = Geod(ellps='WGS84')


@dataclass(frozen=True)
class AreaFrame:
    """
    Origin, scale and extent of the local (x, z) frame of one area.

    Convention: ``x = (lng - origin_lng) * scale`` grows to the east and
    ``z = (lat - origin_lat) * scale`` grows to the north. The origin is the
    midpoint of the rectangle that was actually rendered for the area; build
    frames with :meth:`from_rendered_bounds` so every artifact of the area
    shares it.
    """

    origin_lat: float
    origin_lng: float
    scale: float
    rendered_bounds: GeoRect
    bounds: LocalBounds

    @classmethod
    def from_rendered_bounds(
        cls, rendered_bounds: GeoRect, scale: float = METERS_PER_DEGREE
    ) -> AreaFrame:
        """
        Build the frame from the authoritative rendered rectangle.

        Args:
            rendered_bounds: ``((min_lat, min_lng), (max_lat, max_lng))``
            scale: Meters per degree

        Returns:
            AreaFrame with origin at the rectangle midpoint

        Raises:
            ValueError: If the rectangle has no area or scale is not positive

        """
        (min_lat, min_lng), (max_lat, max_lng) = rendered_bounds
        if max_lat <= min_lat or max_lng <= min_lng:
            msg = f'Degenerate area rectangle: {rendered_bounds!r}'
            raise ValueError(msg)
        if scale <= 0:
            msg = f'Scale must be positive, got {scale}'
            raise ValueError(msg)
        origin_lat = (min_lat + max_lat) / 2
        origin_lng = (min_lng + max_lng) / 2
        rect = (
            (float(min_lat), float(min_lng)),
            (float(max_lat), float(max_lng)),
        )
        local = LocalBounds(
            min_x=(min_lng - origin_lng) * scale,
            max_x=(max_lng - origin_lng) * scale,
            min_z=(min_lat - origin_lat) * scale,
            max_z=(max_lat - origin_lat) * scale,
        )
        return cls(
            origin_lat=origin_lat,
            origin_lng=origin_lng,
            scale=float(scale),
            rendered_bounds=rect,
            bounds=local,
        )

    @property
    def origin(self) -> tuple[float, float]:
        return self.origin_lat, self.origin_lng

    def project(self, lat: float, lng: float) -> tuple[float, float]:
        """Geographic (lat, lng) to local (x, z)."""
        x = (lng - self.origin_lng) * self.scale
        z = (lat - self.origin_lat) * self.scale
        return x, z

    def unproject(self, x: float, z: float) -> tuple[float, float]:
        """Local (x, z) back to geographic (lat, lng)."""
        return self.origin_lat + z / self.scale, self.origin_lng + x / self.scale


@dataclass(frozen=True)
class AlignmentReport:
    """Comparison of projected geometry extent against the frame extent."""

    offset_x: float
    offset_z: float
    scale_x: float
    scale_z: float
    outside_ratio: float
    aligned: bool


def check_alignment(
    frame: AreaFrame,
    geometry_bounds: LocalBounds,
    tolerance: float = ALIGNMENT_OFFSET_TOLERANCE,
) -> AlignmentReport:
    """
    Compare the extent of projected geometry with the frame rectangle.

    Geometry projected under a different origin shows up as a center offset
    far larger than the frame size would explain.

    Args:
        frame: Frame the geometry claims to be projected under
        geometry_bounds: Bounding box of the projected geometry
        tolerance: Allowed center offset as a fraction of the frame size

    Returns:
        AlignmentReport; ``aligned`` is False when either axis offset exceeds
        ``tolerance`` times the frame extent on that axis

    """
    fb = frame.bounds
    fcx, fcz = fb.center
    gcx, gcz = geometry_bounds.center
    offset_x = gcx - fcx
    offset_z = gcz - fcz
    scale_x = fb.width / geometry_bounds.width if geometry_bounds.width else 0.0
    scale_z = fb.height / geometry_bounds.height if geometry_bounds.height else 0.0

    overlap_w = max(
        0.0, min(fb.max_x, geometry_bounds.max_x) - max(fb.min_x, geometry_bounds.min_x)
    )
    overlap_h = max(
        0.0, min(fb.max_z, geometry_bounds.max_z) - max(fb.min_z, geometry_bounds.min_z)
    )
    geom_area = geometry_bounds.width * geometry_bounds.height
    if geom_area > 0:
        outside_ratio = 1.0 - (overlap_w * overlap_h) / geom_area
    else:
        outside_ratio = 0.0 if fb.contains(gcx, gcz) else 1.0

    aligned = (
        abs(offset_x) <= tolerance * fb.width and abs(offset_z) <= tolerance * fb.height
    )
    return AlignmentReport(
        offset_x=offset_x,
        offset_z=offset_z,
        scale_x=scale_x,
        scale_z=scale_z,
        outside_ratio=outside_ratio,
        aligned=aligned,
    )


@dataclass(frozen=True)
class FrameDistortion:
    """Planar vs geodesic extent of the rendered rectangle (meters)."""

    planar_width_m: float
    planar_height_m: float
    geodesic_width_m: float
    geodesic_height_m: float

    @property
    def width_error(self) -> float:
        return _relative_error(self.planar_width_m, self.geodesic_width_m)

    @property
    def height_error(self) -> float:
        return _relative_error(self.planar_height_m, self.geodesic_height_m)

    @property
    def max_error(self) -> float:
        return max(self.width_error, self.height_error)


def _relative_error(planar: float, geodesic: float) -> float:
    if geodesic == 0:
        return 0.0
    return abs(planar - geodesic) / geodesic


def measure_distortion(frame: AreaFrame) -> FrameDistortion:
    """
    Measure how far the flat meters-per-degree frame drifts from WGS84.

    The width is measured along the origin parallel, the height along the
    origin meridian.
    """
    (min_lat, min_lng), (max_lat, max_lng) = frame.rendered_bounds
    _, _, geodesic_width = _GEOD.inv(min_lng, frame.origin_lat, max_lng, frame.origin_lat)
    _, _, geodesic_height = _GEOD.inv(frame.origin_lng, min_lat, frame.origin_lng, max_lat)
    return FrameDistortion(
        planar_width_m=frame.bounds.width,
        planar_height_m=frame.bounds.height,
        geodesic_width_m=float(geodesic_width),
        geodesic_height_m=float(geodesic_height),
    )
