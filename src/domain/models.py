from pydantic import BaseModel, field_validator, model_validator

from shared.constants import (
    IDW_EPSILON,
    IDW_GRID_SIZE,
    IDW_POWER,
    JITTER_AMPLITUDE,
    JITTER_SEED,
    MIN_GRID_SIZE,
    OUTPUT_PRECISION,
    SEED_GRID_RESOLUTION,
    SEED_HEIGHT_LAYERS,
    SEED_LAYER_BASE,
    SEED_LAYER_SPACING,
    STREAMLINE_BOUNDS_MARGIN,
    STREAMLINE_MAX_STEPS,
    STREAMLINE_MIN_POINTS,
    STREAMLINE_PARALLEL_WORKERS,
    STREAMLINE_STEP_SIZE,
    STREAMLINE_Y_MAX,
    STREAMLINE_Y_MIN,
)


class FlowSettings(BaseModel):
    """Все настраиваемые параметры прогона, собранные в одну модель."""

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Трассировка
    step_size: float = STREAMLINE_STEP_SIZE
    max_steps: int = STREAMLINE_MAX_STEPS
    margin: float = STREAMLINE_BOUNDS_MARGIN
    min_points: int = STREAMLINE_MIN_POINTS

    # Сетка затравок
    grid_resolution: int = SEED_GRID_RESOLUTION
    height_layers: int = SEED_HEIGHT_LAYERS
    layer_base: float = SEED_LAYER_BASE
    layer_spacing: float = SEED_LAYER_SPACING
    workers: int = STREAMLINE_PARALLEL_WORKERS

    # Вертикальное дрожание
    y_min: float = STREAMLINE_Y_MIN
    y_max: float = STREAMLINE_Y_MAX
    jitter_amplitude: float = JITTER_AMPLITUDE
    jitter_seed: int = JITTER_SEED

    # Интерполяция
    idw_power: float = IDW_POWER
    idw_epsilon: float = IDW_EPSILON
    grid_size: int = IDW_GRID_SIZE

    # Вывод
    precision: int = OUTPUT_PRECISION

    @field_validator('step_size', 'idw_power')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        v = float(v)
        if v <= 0:
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('max_steps', 'grid_resolution', 'height_layers', 'workers')
    @classmethod
    def validate_count(cls, v: int) -> int:
        v = int(v)
        if v < 1:
            msg = 'Значение должно быть не меньше 1'
            raise ValueError(msg)
        return v

    @field_validator('margin', 'jitter_amplitude', 'idw_epsilon', 'min_points', 'precision')
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            msg = 'Значение не может быть отрицательным'
            raise ValueError(msg)
        return v

    @field_validator('grid_size')
    @classmethod
    def validate_grid_size(cls, v: int) -> int:
        v = int(v)
        if v < MIN_GRID_SIZE:
            msg = f'grid_size должен быть не меньше {MIN_GRID_SIZE}'
            raise ValueError(msg)
        return v

    @model_validator(mode='after')
    def validate_height_range(self) -> 'FlowSettings':
        if self.y_min > self.y_max:
            msg = 'y_min не может превышать y_max'
            raise ValueError(msg)
        return self
