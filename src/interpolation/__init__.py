"""Interpolation module - inverse distance weighting of station readings."""

from .idw import (
    GridResult,
    IdwInterpolator,
    StationReading,
    grid_axes,
    interpolate,
    interpolate_grid,
)
from .wind import (
    WindGridResult,
    WindReading,
    WindSample,
    interpolate_wind,
    interpolate_wind_grid,
)

__all__ = [
    'GridResult',
    'IdwInterpolator',
    'StationReading',
    'WindGridResult',
    'WindReading',
    'WindSample',
    'grid_axes',
    'interpolate',
    'interpolate_grid',
    'interpolate_wind',
    'interpolate_wind_grid',
]
