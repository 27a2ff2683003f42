"""Pytest configuration and shared fixtures for airflow precompute tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from domain.documents import BuildingDocument, StationDocument  # noqa: E402
from domain.models import FlowSettings  # noqa: E402


@pytest.fixture
def square_ring():
    """Counter-clockwise 50 x 50 footprint centred on the origin."""
    return [(-25.0, -25.0), (25.0, -25.0), (25.0, 25.0), (-25.0, 25.0)]


RENDERED_BOUNDS = [[1.30, 103.80], [1.31, 103.81]]


def _block(x0, z0, size=40):
    return [[x0, z0], [x0 + size, z0], [x0 + size, z0 + size], [x0, z0 + size]]


@pytest.fixture
def fast_settings():
    return FlowSettings(grid_resolution=4, workers=1)


@pytest.fixture
def building_data():
    """Two blocks placed symmetrically around the frame origin."""
    return {
        'areaId': 'clementi',
        'buildings': [
            {'footprint': _block(-200, -20), 'height': 25},
            {'footprint': _block(160, -20), 'height': 40},
        ],
        'metadata': {'bounds': RENDERED_BOUNDS, 'center': [1.305, 103.805]},
    }


@pytest.fixture
def building_document(building_data):
    return BuildingDocument.model_validate(building_data)


@pytest.fixture
def station_document():
    return StationDocument.model_validate(
        {
            'variable': 'temperature',
            'timestamp': '2026-10-16T14:00:00+08:00',
            'stations': [
                {'stationId': 'S1', 'position': {'x': -300, 'z': 0}, 'value': 28.0},
                {'stationId': 'S2', 'position': {'x': 300, 'z': 0}, 'value': 32.0},
                {'stationId': 'S3', 'position': {'lat': 1.309, 'lng': 103.805}, 'value': 30.0},
                {'stationId': 'S4', 'position': {'x': 0, 'z': -400}, 'value': None},
            ],
        }
    )
