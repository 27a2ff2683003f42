import logging
import os
from pathlib import Path

import tomlkit

from domain.models import FlowSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat
from shared.constants import PROFILES_DIR

logger = logging.getLogger(__name__)

APP_DIR_NAME = 'AirflowPrecompute'


def _user_profiles_dir() -> Path:
    """
    Directory with run profiles.

    1) If <project_root>/configs/profiles exists, use it (run-from-repo setups).
    2) Otherwise, fall back to the user data directory:
       %APPDATA%/AirflowPrecompute/configs/profiles, or
       ~/.local/share/AirflowPrecompute/configs/profiles when APPDATA is not set.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / PROFILES_DIR
    if local_profiles.exists():
        return local_profiles

    base = os.getenv('APPDATA')
    root = Path(base) if base else Path.home() / '.local' / 'share'
    return root / APP_DIR_NAME / PROFILES_DIR


def ensure_profiles_dir(base_dir: Path | None = None) -> Path:
    profiles_dir = base_dir or _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles(base_dir: Path | None = None) -> list[str]:
    """Имена профилей запуска (без .toml), по алфавиту."""
    folder = ensure_profiles_dir(base_dir)
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str, base_dir: Path | None = None) -> Path:
    """Файл профиля запуска; каталог создаётся при необходимости."""
    return ensure_profiles_dir(base_dir) / f'{name}.toml'


def load_profile(name_or_path: str, base_dir: Path | None = None) -> FlowSettings:
    """
    Загрузка и валидация профиля TOML -> FlowSettings.

    Поддерживает как имя профиля (без .toml) из каталога profiles,
    так и абсолютный/относительный путь до TOML файла. Принимаются
    как секционные, так и плоские профили.
    """
    p = Path(name_or_path)
    is_toml = p.suffix.lower() == '.toml'
    if is_toml and p.exists():
        path = p
    else:
        # Имя профиля: без суффикса и без создания каталога при чтении
        name = p.with_suffix('') if is_toml else p
        path = (base_dir or _user_profiles_dir()) / f'{name}.toml'
    if not path.exists():
        msg = f'Профиль не найден: {path}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
    settings = FlowSettings.model_validate(sectioned_to_flat(data))
    logger.info('Profile loaded: %s', path)
    logger.debug('Profile settings: %s', settings.model_dump())
    return settings


def save_profile(
    name: str, settings: FlowSettings, base_dir: Path | None = None
) -> Path:
    """Сохранение профиля в секционный TOML (без атомарности и бэкапов)."""
    path = profile_path(name, base_dir)
    text = tomlkit.dumps(flat_to_sectioned(settings.model_dump()))
    path.write_text(text, encoding='utf-8')
    return path


def delete_profile(name: str, base_dir: Path | None = None) -> None:
    """Удалить профиль; отсутствующий профиль не считается ошибкой."""
    path = profile_path(name, base_dir)
    if path.exists():
        path.unlink()
