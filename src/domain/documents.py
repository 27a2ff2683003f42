"""
Documents exchanged with the surrounding layers.

Buildings and stations come in, streamlines and grids go out. Every model
reads and writes camelCase keys on the wire and accepts snake_case names in
Python.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from geo.geometry import LocalBounds
from geo.obstacles import ObstacleIndex
from geo.projection import AreaFrame
from interpolation.idw import StationReading
from interpolation.wind import WindReading
from shared.constants import CENTER_TOLERANCE_DEG, METERS_PER_DEGREE, OUTPUT_PRECISION

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flow.tracer import Streamline
    from interpolation.idw import GridResult
    from interpolation.wind import WindGridResult

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


class MalformedDocumentError(ValueError):
    """Document is missing required parts or contradicts the frame contract."""


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


# --- Входные документы


class AreaMetadata(_Document):
    """Authoritative rendered rectangle ``[[min_lat, min_lng], [max_lat, max_lng]]``."""

    bounds: tuple[tuple[float, float], tuple[float, float]]
    center: tuple[float, float] | None = None


class BuildingRecord(_Document):
    footprint: list[tuple[float, float]]
    height: float | None = None


class BuildingDocument(_Document):
    """Footprints already projected under the area frame plus the frame itself."""

    area_id: str = Field(
        validation_alias=AliasChoices('areaId', 'area_id', 'id'),
        serialization_alias='areaId',
    )
    buildings: list[BuildingRecord] = Field(default_factory=list)
    metadata: AreaMetadata | None = None

    def frame(self, scale: float = METERS_PER_DEGREE) -> AreaFrame:
        """
        Area frame from the document metadata.

        Raises:
            MalformedDocumentError: If the bounds are missing or degenerate, or
                a declared center is not the midpoint of the bounds

        """
        if self.metadata is None:
            msg = f'Area {self.area_id!r}: metadata.bounds is required'
            raise MalformedDocumentError(msg)
        try:
            frame = AreaFrame.from_rendered_bounds(self.metadata.bounds, scale)
        except ValueError as e:
            msg = f'Area {self.area_id!r}: {e}'
            raise MalformedDocumentError(msg) from e
        if self.metadata.center is not None:
            lat, lng = self.metadata.center
            if (
                abs(lat - frame.origin_lat) > CENTER_TOLERANCE_DEG
                or abs(lng - frame.origin_lng) > CENTER_TOLERANCE_DEG
            ):
                msg = (
                    f'Area {self.area_id!r}: declared center ({lat}, {lng}) is not '
                    f'the midpoint of the rendered bounds '
                    f'({frame.origin_lat}, {frame.origin_lng})'
                )
                raise MalformedDocumentError(msg)
        return frame

    def obstacles(self) -> ObstacleIndex:
        """Obstacle index of all footprints; degenerate ones are skipped."""
        return ObstacleIndex.from_rings(b.footprint for b in self.buildings)


class GeoPosition(_Document):
    lat: float
    lng: float


class LocalPosition(_Document):
    x: float
    z: float


class StationEntry(_Document):
    station_id: str
    position: GeoPosition | LocalPosition
    value: float | None = None

    @field_validator('position', mode='before')
    @classmethod
    def validate_position_kind(cls, v: Any) -> Any:
        if isinstance(v, dict):
            geo = 'lat' in v or 'lng' in v
            local = 'x' in v or 'z' in v
            if geo == local:
                msg = 'position must have either lat/lng or x/z'
                raise ValueError(msg)
        return v

    def local_position(self, frame: AreaFrame) -> tuple[float, float]:
        if isinstance(self.position, GeoPosition):
            return frame.project(self.position.lat, self.position.lng)
        return self.position.x, self.position.z


class StationDocument(_Document):
    """Readings of one variable at one instant."""

    variable: str
    timestamp: str | None = None
    stations: list[StationEntry] = Field(default_factory=list)

    def readings(self, frame: AreaFrame) -> list[StationReading]:
        """Station readings in the local frame; entries without a value are dropped."""
        result: list[StationReading] = []
        for entry in self.stations:
            if entry.value is None:
                continue
            x, z = entry.local_position(frame)
            result.append(
                StationReading(x=x, z=z, value=entry.value, station_id=entry.station_id)
            )
        return result

    @classmethod
    def from_station_feed(
        cls,
        variable: str,
        stations: Iterable[dict[str, Any]],
        readings: Iterable[dict[str, Any]],
        timestamp: str | None = None,
        value_key: str = 'value',
    ) -> StationDocument:
        """
        Join a station list with a reading list by station id.

        Stations look like ``{'id': ..., 'location': {'latitude': ...,
        'longitude': ...}}`` (``station_id`` is accepted too); readings look
        like ``{'station_id': ..., value_key: ...}``. Readings whose station
        is unknown are dropped.
        """
        locations: dict[str, tuple[float, float]] = {}
        for st in stations:
            sid = st.get('station_id') or st.get('id')
            loc = st.get('location') or {}
            if sid is None or 'latitude' not in loc or 'longitude' not in loc:
                continue
            locations[str(sid)] = (float(loc['latitude']), float(loc['longitude']))

        entries: list[StationEntry] = []
        for reading in readings:
            sid = str(reading.get('station_id'))
            if sid not in locations:
                logger.debug('Reading for unknown station %s dropped', sid)
                continue
            lat, lng = locations[sid]
            entries.append(
                StationEntry(
                    station_id=sid,
                    position=GeoPosition(lat=lat, lng=lng),
                    value=reading.get(value_key),
                )
            )
        return cls(variable=variable, timestamp=timestamp, stations=entries)


def join_wind(
    speed: StationDocument, direction: StationDocument, frame: AreaFrame
) -> list[WindReading]:
    """Pair speed and direction readings of the same station."""
    directions = {r.station_id: r.value for r in direction.readings(frame)}
    result: list[WindReading] = []
    for r in speed.readings(frame):
        if r.station_id not in directions:
            continue
        result.append(
            WindReading(
                x=r.x,
                z=r.z,
                speed=r.value,
                direction_deg=directions[r.station_id],
                station_id=r.station_id,
            )
        )
    return result


# --- Выходные документы


class StreamlineRecord(_Document):
    direction: str
    points: list[tuple[float, float, float]]


class StreamlineDocument(_Document):
    area_id: str
    streamline_count: int
    streamlines: list[StreamlineRecord] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_count(self) -> StreamlineDocument:
        if self.streamline_count != len(self.streamlines):
            msg = (
                f'streamlineCount={self.streamline_count} does not match '
                f'{len(self.streamlines)} streamlines'
            )
            raise ValueError(msg)
        return self

    @classmethod
    def from_streamlines(
        cls,
        area_id: str,
        streamlines: Iterable[Streamline],
        precision: int = OUTPUT_PRECISION,
    ) -> StreamlineDocument:
        records = [
            StreamlineRecord(
                direction=sl.direction,
                points=[
                    (round(x, precision), round(y, precision), round(z, precision))
                    for x, y, z in sl.points
                ],
            )
            for sl in streamlines
        ]
        return cls(area_id=area_id, streamline_count=len(records), streamlines=records)


class BoundsModel(_Document):
    min_x: float
    max_x: float
    min_z: float
    max_z: float

    @classmethod
    def from_bounds(cls, bounds: LocalBounds) -> BoundsModel:
        return cls(
            min_x=bounds.min_x,
            max_x=bounds.max_x,
            min_z=bounds.min_z,
            max_z=bounds.max_z,
        )

    def to_bounds(self) -> LocalBounds:
        return LocalBounds(
            min_x=self.min_x, max_x=self.max_x, min_z=self.min_z, max_z=self.max_z
        )


def _rounded(values: Any, precision: int | None) -> list[list[float]]:
    rows = values.tolist()
    if precision is None:
        return rows
    return [[round(v, precision) for v in row] for row in rows]


class GridDocument(_Document):
    """``values[i][j]`` is the estimate at x index i, z index j."""

    size: int
    bounds: BoundsModel
    values: list[list[float]]
    variable: str | None = None

    @classmethod
    def from_grid(
        cls,
        grid: GridResult,
        variable: str | None = None,
        precision: int | None = None,
    ) -> GridDocument:
        return cls(
            size=grid.size,
            bounds=BoundsModel.from_bounds(grid.bounds),
            values=_rounded(grid.values, precision),
            variable=variable,
        )


class WindGridDocument(_Document):
    size: int
    bounds: BoundsModel
    speed: list[list[float]]
    direction: list[list[float]]

    @classmethod
    def from_grid(
        cls, grid: WindGridResult, precision: int | None = None
    ) -> WindGridDocument:
        return cls(
            size=grid.size,
            bounds=BoundsModel.from_bounds(grid.bounds),
            speed=_rounded(grid.speed, precision),
            direction=_rounded(grid.direction_deg, precision),
        )


# --- Чтение и запись


def parse_document(data: dict[str, Any], model: type[ModelT]) -> ModelT:
    """
    Validate an in-memory document.

    Raises:
        MalformedDocumentError: If the document does not match the schema

    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        msg = f'Invalid {model.__name__}: {e}'
        raise MalformedDocumentError(msg) from e


def load_document(path: str | Path, model: type[ModelT]) -> ModelT:
    """
    Read and validate a JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedDocumentError: If the content does not match the schema

    """
    p = Path(path)
    if not p.exists():
        msg = f'Документ не найден: {p}'
        raise FileNotFoundError(msg)
    try:
        return model.model_validate_json(p.read_text(encoding='utf-8'))
    except ValidationError as e:
        msg = f'Invalid {model.__name__} in {p}: {e}'
        raise MalformedDocumentError(msg) from e


def save_document(path: str | Path, document: BaseModel) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(document.model_dump_json(by_alias=True, indent=2), encoding='utf-8')
    return p
