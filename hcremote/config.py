"""Configuration helpers for HC Remote."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from .commands import DEFAULT_SPEED, clamp_speed
from .models import DEFAULT_DELIMITER
from .settings import CONFIG_FILE
from .transport.base import DEFAULT_CONNECTOR_TYPE
from .transport.serial_transport import HC06_BAUDRATE

logger = logging.getLogger(__name__)


def _ensure_parent(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Directory creation failures will surface during write.
        pass


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class AppConfig:
    baudrate: int = HC06_BAUDRATE
    delimiter: str = DEFAULT_DELIMITER
    connector_type: str = DEFAULT_CONNECTOR_TYPE
    default_speed: int = DEFAULT_SPEED
    speed_step: int = 10
    include_all_ports: bool = False
    write_timeout: float = 0.5
    always_on_top: bool = False


def load_config(path: str | Path = CONFIG_FILE) -> AppConfig:
    """Load configuration data from *path* or return defaults on failure."""

    defaults = AppConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return defaults

    try:
        raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.error("Config file %s contains invalid JSON: %s", cfg_path, exc)
        return defaults
    except OSError as exc:
        logger.error("Could not read config file %s: %s", cfg_path, exc)
        return defaults

    if not isinstance(raw, dict):
        logger.error("Config file %s did not contain an object", cfg_path)
        return defaults

    data = asdict(defaults)
    data["baudrate"] = max(1, _coerce_int(raw.get("baudrate"), defaults.baudrate))
    delimiter = raw.get("delimiter", defaults.delimiter)
    data["delimiter"] = str(delimiter) if delimiter else defaults.delimiter
    data["connector_type"] = str(raw.get("connector_type", defaults.connector_type))
    data["default_speed"] = clamp_speed(
        _coerce_int(raw.get("default_speed"), defaults.default_speed)
    )
    data["speed_step"] = max(1, _coerce_int(raw.get("speed_step"), defaults.speed_step))
    data["include_all_ports"] = bool(raw.get("include_all_ports", defaults.include_all_ports))
    data["write_timeout"] = max(
        0.0, _coerce_float(raw.get("write_timeout"), defaults.write_timeout)
    )
    data["always_on_top"] = bool(raw.get("always_on_top", defaults.always_on_top))

    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path = CONFIG_FILE) -> None:
    """Persist *config* to *path*, logging errors without raising."""

    cfg_path = Path(path)
    _ensure_parent(cfg_path)
    try:
        cfg_path.write_text(json.dumps(asdict(config), indent=4), encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write config file %s: %s", cfg_path, exc)
