from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.documents import GridDocument, WindGridDocument, join_wind
from domain.models import FlowSettings
from interpolation.idw import IdwInterpolator
from interpolation.wind import WindSample, interpolate_wind, interpolate_wind_grid

if TYPE_CHECKING:
    from domain.documents import StationDocument
    from geo.projection import AreaFrame

logger = logging.getLogger(__name__)


class InterpolationService:
    """Sensor fields over the local frame of an area."""

    def __init__(self, settings: FlowSettings | None = None) -> None:
        self.settings = settings or FlowSettings()

    def _interpolator(
        self, document: StationDocument, frame: AreaFrame
    ) -> IdwInterpolator:
        readings = document.readings(frame)
        dropped = len(document.stations) - len(readings)
        if dropped:
            logger.warning(
                '%s: %d stations without a reading skipped', document.variable, dropped
            )
        return IdwInterpolator(
            readings, self.settings.idw_power, self.settings.idw_epsilon
        )

    def point(
        self, document: StationDocument, frame: AreaFrame, lat: float, lng: float
    ) -> float | None:
        """Estimate at a geographic point; None when no station has a reading."""
        return self._interpolator(document, frame).at(frame.project(lat, lng))

    def grid(
        self, document: StationDocument, frame: AreaFrame, size: int | None = None
    ) -> GridDocument | None:
        """Estimate over the frame rectangle; None when no station has a reading."""
        interpolator = self._interpolator(document, frame)
        result = interpolator.grid(size or self.settings.grid_size, frame.bounds)
        if result is None:
            logger.info('%s: no readings, grid not built', document.variable)
            return None
        logger.info(
            '%s: %dx%d grid from %d stations',
            document.variable,
            result.size,
            result.size,
            len(interpolator),
        )
        return GridDocument.from_grid(
            result, variable=document.variable, precision=self.settings.precision
        )

    def wind_point(
        self,
        speed: StationDocument,
        direction: StationDocument,
        frame: AreaFrame,
        lat: float,
        lng: float,
    ) -> WindSample | None:
        return interpolate_wind(
            frame.project(lat, lng),
            join_wind(speed, direction, frame),
            self.settings.idw_power,
            self.settings.idw_epsilon,
        )

    def wind_grid(
        self,
        speed: StationDocument,
        direction: StationDocument,
        frame: AreaFrame,
        size: int | None = None,
    ) -> WindGridDocument | None:
        result = interpolate_wind_grid(
            join_wind(speed, direction, frame),
            size or self.settings.grid_size,
            frame.bounds,
            self.settings.idw_power,
            self.settings.idw_epsilon,
        )
        if result is None:
            return None
        return WindGridDocument.from_grid(result, precision=self.settings.precision)
