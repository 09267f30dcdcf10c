from __future__ import annotations

import json
import os
from pathlib import Path

from pooltracker.db.database import get_app_data_dir, get_default_database_path
from pooltracker.domain.schedule import get_variant

SETTINGS_FILENAME = "settings.json"
DEFAULT_VARIANT = "three-player"
DEFAULT_SHARE_ORIGIN = "http://localhost:3000"


def _get_app_settings_path() -> Path:
    return get_app_data_dir() / SETTINGS_FILENAME


def _read_settings() -> dict[str, object]:
    path = _get_app_settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _write_settings(data: dict[str, object]) -> None:
    path = _get_app_settings_path()
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def get_database_path() -> Path:
    env_path = os.environ.get("POOLTRACKER_DB_PATH")
    if env_path:
        return Path(env_path)
    return get_default_database_path()


def get_variant_name() -> str:
    env_variant = os.environ.get("POOLTRACKER_VARIANT")
    if env_variant:
        return env_variant
    return str(_read_settings().get("variant") or DEFAULT_VARIANT)


def set_variant_name(name: str) -> None:
    get_variant(name)
    settings = _read_settings()
    settings["variant"] = name
    _write_settings(settings)


def get_share_origin() -> str:
    env_origin = os.environ.get("POOLTRACKER_SHARE_ORIGIN")
    if env_origin:
        return env_origin
    return str(_read_settings().get("share_origin") or DEFAULT_SHARE_ORIGIN)


def set_share_origin(origin: str) -> None:
    settings = _read_settings()
    settings["share_origin"] = origin.rstrip("/")
    _write_settings(settings)
