"""
Sectioned TOML layout of FlowSettings.

FlowSettings stays flat; on disk its fields are grouped into sections with
shorter key names (``[jitter] seed`` for ``jitter_seed``). Profiles without
sections load as before.
"""

from __future__ import annotations

from typing import Any

# section -> {поле FlowSettings: ключ в TOML}
SECTION_MAP: dict[str, dict[str, str]] = {
    'tracer': {
        'step_size': 'step_size',
        'max_steps': 'max_steps',
        'margin': 'margin',
        'min_points': 'min_points',
    },
    'seeds': {
        'grid_resolution': 'grid_resolution',
        'height_layers': 'height_layers',
        'layer_base': 'layer_base',
        'layer_spacing': 'layer_spacing',
        'workers': 'workers',
    },
    'jitter': {
        'y_min': 'y_min',
        'y_max': 'y_max',
        'jitter_amplitude': 'amplitude',
        'jitter_seed': 'seed',
    },
    'interpolation': {
        'idw_power': 'power',
        'idw_epsilon': 'epsilon',
        'grid_size': 'grid_size',
    },
    'output': {
        'precision': 'precision',
    },
}

# Ключи без известной секции
COMMON_SECTION = 'common'

_FIELD_LOCATION: dict[str, tuple[str, str]] = {
    flat: (section, key)
    for section, fields in SECTION_MAP.items()
    for flat, key in fields.items()
}

_KEY_TO_FIELD: dict[str, dict[str, str]] = {
    section: {key: flat for flat, key in fields.items()}
    for section, fields in SECTION_MAP.items()
}


def flat_to_sectioned(flat: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Group flat settings into TOML sections; unmapped keys go to ``common``."""
    sectioned: dict[str, dict[str, Any]] = {}
    for name, value in flat.items():
        section, key = _FIELD_LOCATION.get(name, (COMMON_SECTION, name))
        sectioned.setdefault(section, {})[key] = value
    return sectioned


def sectioned_to_flat(data: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten a parsed profile for FlowSettings validation.

    Keys of known sections are renamed back to field names; other tables are
    merged as is and top-level scalars are kept (flat profiles).
    """
    flat: dict[str, Any] = {}
    for name, value in data.items():
        if not isinstance(value, dict):
            flat[name] = value
            continue
        rename = _KEY_TO_FIELD.get(name, {})
        flat.update({rename.get(k, k): v for k, v in value.items()})
    return flat
