"""Tests for domain.profiles."""

import pytest

from domain.models import FlowSettings
from domain.profiles import (
    delete_profile,
    list_profiles,
    load_profile,
    profile_path,
    save_profile,
)


@pytest.fixture
def profiles_dir(tmp_path):
    return tmp_path / 'profiles'


class TestProfiles:
    """Save, load, list and delete profiles in a custom directory."""

    def test_save_and_load(self, profiles_dir):
        settings = FlowSettings(step_size=8, grid_resolution=6, idw_power=3)
        path = save_profile('fine', settings, profiles_dir)
        assert path == profiles_dir / 'fine.toml'
        assert '[seeds]' in path.read_text(encoding='utf-8')
        assert load_profile('fine', profiles_dir) == settings

    def test_load_by_path(self, profiles_dir):
        path = save_profile('by_path', FlowSettings(max_steps=50), profiles_dir)
        assert load_profile(str(path)).max_steps == 50

    def test_flat_profile_accepted(self, profiles_dir):
        profiles_dir.mkdir()
        (profiles_dir / 'flat.toml').write_text('step_size = 4.0\nworkers = 2\n', encoding='utf-8')
        settings = load_profile('flat', profiles_dir)
        assert settings.step_size == 4.0
        assert settings.workers == 2

    def test_invalid_profile_rejected(self, profiles_dir):
        profiles_dir.mkdir()
        (profiles_dir / 'bad.toml').write_text('[tracer]\nstep_size = -1\n', encoding='utf-8')
        with pytest.raises(ValueError):
            load_profile('bad', profiles_dir)

    def test_missing_profile(self, profiles_dir):
        with pytest.raises(FileNotFoundError):
            load_profile('absent', profiles_dir)
        assert not profiles_dir.exists()

    def test_missing_profile_with_suffix(self, profiles_dir):
        with pytest.raises(FileNotFoundError) as exc_info:
            load_profile('missing.toml', profiles_dir)
        assert str(profiles_dir / 'missing.toml') in str(exc_info.value)
        assert 'missing.toml.toml' not in str(exc_info.value)
        assert not profiles_dir.exists()

    def test_name_with_suffix_resolves_in_profiles_dir(self, profiles_dir):
        save_profile('coarse', FlowSettings(grid_resolution=4), profiles_dir)
        assert load_profile('coarse.toml', profiles_dir).grid_resolution == 4

    def test_list_and_delete(self, profiles_dir):
        save_profile('b', FlowSettings(), profiles_dir)
        save_profile('a', FlowSettings(), profiles_dir)
        assert list_profiles(profiles_dir) == ['a', 'b']

        delete_profile('a', profiles_dir)
        assert list_profiles(profiles_dir) == ['b']
        delete_profile('a', profiles_dir)

    def test_profile_path(self, profiles_dir):
        assert profile_path('x', profiles_dir) == profiles_dir / 'x.toml'
        assert profiles_dir.is_dir()

    def test_shipped_default_profile(self):
        assert load_profile('default') == FlowSettings()
