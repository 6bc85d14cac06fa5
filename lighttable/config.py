from __future__ import annotations

import json
import os
import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/lighttable/config.json").expanduser()

CONFIG_ENV_OVERRIDES = {
    "db_path": "LIGHTTABLE_DB_PATH",
    "storage_key": "LIGHTTABLE_STORAGE_KEY",
    "default_tables": "LIGHTTABLE_DEFAULT_TABLES",
    "log_level": "LIGHTTABLE_LOG_LEVEL",
}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("LIGHTTABLE_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def write_config_file(data: dict[str, Any], path: Path | None = None) -> Path:
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
    return config_path


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class LighttableConfig:
    db_path: str = "~/.lighttable.sqlite"
    storage_key: str = "lighttable"
    # Group count assumed by the CLI when --tables is not given.
    default_tables: int = 1
    log_level: str = "WARNING"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _warn_invalid(key: str, value: object) -> None:
    warnings.warn(f"Invalid value for {key}: {value!r}", RuntimeWarning, stacklevel=3)


def _parse_table_count(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        count = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        _warn_invalid("default_tables", value)
        return default
    if count < 0:
        _warn_invalid("default_tables", value)
        return default
    return count


def _parse_log_level(value: object, default: str) -> str:
    if value is None:
        return default
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        _warn_invalid("log_level", value)
        return default
    return level


def _parse_storage_key(value: object, default: str) -> str:
    if value is None:
        return default
    # Named groups live under "<storage_key>:<group>", so the key itself
    # must be a non-empty string.
    if not isinstance(value, str) or not value.strip():
        _warn_invalid("storage_key", value)
        return default
    return value.strip()


def _apply_value(cfg: LighttableConfig, key: str, value: object) -> None:
    if key == "default_tables":
        cfg.default_tables = _parse_table_count(value, cfg.default_tables)
    elif key == "log_level":
        cfg.log_level = _parse_log_level(value, cfg.log_level)
    elif key == "storage_key":
        cfg.storage_key = _parse_storage_key(value, cfg.storage_key)
    elif key == "db_path" and value is not None:
        cfg.db_path = str(value)


def load_config(path: Path | None = None) -> LighttableConfig:
    cfg = LighttableConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError:
            data = {}
        if isinstance(data, dict):
            for key, value in data.items():
                _apply_value(cfg, key, value)
    for key, value in get_env_overrides().items():
        _apply_value(cfg, key, value)
    return cfg
