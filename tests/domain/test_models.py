"""Tests for domain.models.FlowSettings."""

import pytest

from domain.models import FlowSettings


class TestFlowSettingsDefaults:
    """Defaults match the reference run."""

    def test_tracer_defaults(self):
        s = FlowSettings()
        assert s.step_size == 12.0
        assert s.max_steps == 200
        assert s.margin == 50.0
        assert s.min_points == 15

    def test_seed_and_jitter_defaults(self):
        s = FlowSettings()
        assert (s.grid_resolution, s.height_layers) == (10, 3)
        assert (s.layer_base, s.layer_spacing) == (20.0, 35.0)
        assert (s.y_min, s.y_max) == (10.0, 120.0)
        assert s.jitter_amplitude == 1.5

    def test_interpolation_defaults(self):
        s = FlowSettings()
        assert s.idw_power == 2.0
        assert s.idw_epsilon == 1.0
        assert s.grid_size == 20

    def test_unknown_keys_ignored(self):
        s = FlowSettings.model_validate({'step_size': 8, 'legacy_option': True})
        assert s.step_size == 8.0
        assert not hasattr(s, 'legacy_option')


class TestFlowSettingsValidators:
    """Tests for FlowSettings validators."""

    @pytest.mark.parametrize('field', ['step_size', 'idw_power'])
    @pytest.mark.parametrize('value', [0, -1.5])
    def test_positive_fields(self, field, value):
        with pytest.raises(ValueError):
            FlowSettings(**{field: value})

    @pytest.mark.parametrize('field', ['max_steps', 'grid_resolution', 'height_layers', 'workers'])
    def test_count_fields(self, field):
        with pytest.raises(ValueError):
            FlowSettings(**{field: 0})
        assert getattr(FlowSettings(**{field: 1}), field) == 1

    @pytest.mark.parametrize(
        'field', ['margin', 'jitter_amplitude', 'idw_epsilon', 'min_points', 'precision']
    )
    def test_non_negative_fields(self, field):
        with pytest.raises(ValueError):
            FlowSettings(**{field: -1})
        assert getattr(FlowSettings(**{field: 0}), field) == 0

    def test_grid_size_minimum(self):
        with pytest.raises(ValueError):
            FlowSettings(grid_size=1)
        assert FlowSettings(grid_size=2).grid_size == 2

    def test_height_range(self):
        with pytest.raises(ValueError, match='y_min'):
            FlowSettings(y_min=130, y_max=120)
        s = FlowSettings(y_min=50, y_max=50)
        assert s.y_min == s.y_max
