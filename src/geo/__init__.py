"""Geo module - local frame projection and obstacle geometry."""

from .geometry import LocalBounds, closest_point_on_segment, signed_area
from .obstacles import Footprint, ObstacleIndex
from .projection import (
    AlignmentReport,
    AreaFrame,
    FrameDistortion,
    check_alignment,
    measure_distortion,
)

__all__ = [
    'AlignmentReport',
    'AreaFrame',
    'Footprint',
    'FrameDistortion',
    'LocalBounds',
    'ObstacleIndex',
    'check_alignment',
    'closest_point_on_segment',
    'measure_distortion',
    'signed_area',
]
