"""Logging setup and shared constants for HC Remote."""

from __future__ import annotations

import logging
from typing import Optional, Union

CONFIG_FILE = "config.json"
LOG_LEVEL = logging.INFO
# Reader and connect workers log from their own threads.
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(threadName)s] %(name)s - %(message)s"


def resolve_level(value: Union[int, str]) -> int:
    """Turn ``"debug"``, ``"WARNING"`` or a numeric level into a logging level."""

    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def configure_logging(
    *,
    level: Union[int, str] = LOG_LEVEL,
    fmt: str = LOG_FORMAT,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Initialize the root logger used across HC Remote.

    Records always go to stderr; *log_file* adds a second handler so a
    session with the vehicle can be inspected afterwards. An already
    configured root logger is left alone unless *force* is set.
    """

    if logging.getLogger().handlers and not force:
        return
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=resolve_level(level), format=fmt, handlers=handlers, force=force
    )
