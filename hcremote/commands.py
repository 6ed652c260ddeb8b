"""Mapping from remote-control intents to wire commands."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

from .models import Command

SPEED_MIN = 0
SPEED_MAX = 100
DEFAULT_SPEED = 50
SPEED_PREFIX = "SPEED:"

QUICK_COMMANDS = {
    "led": "led",
    "motor": "motor",
    "bip": "bip bip",
    "hi": "hi",
}


class Direction(str, Enum):
    FORWARD = "FORWARD"
    BACKWARD = "BACKWARD"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    STOP = "STOP"


class Action(str, Enum):
    HORN = "HORN"
    LIGHT = "LIGHT"
    TURBO = "TURBO"


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown {enum_cls.__name__.lower()}: {value!r}") from None


def clamp_speed(level: Union[int, float]) -> int:
    if not math.isfinite(level):
        raise ValueError(f"Speed must be a finite number, got {level!r}")
    return max(SPEED_MIN, min(SPEED_MAX, int(round(level))))


def encode_direction(direction: Union[Direction, str]) -> Command:
    return Command(_coerce(Direction, direction).value)


def encode_speed(level: Union[int, float]) -> Command:
    return Command(f"{SPEED_PREFIX}{clamp_speed(level)}")


def encode_action(kind: Union[Action, str]) -> Command:
    return Command(_coerce(Action, kind).value)


def encode_free_text(text: Optional[str]) -> Optional[Command]:
    """Return a command for user-entered *text*, or ``None`` when blank."""

    trimmed = (text or "").strip()
    if not trimmed:
        return None
    return Command(trimmed)


def encode_quick(name: str) -> Command:
    try:
        return Command(QUICK_COMMANDS[name])
    except KeyError:
        raise ValueError(f"Unknown quick command: {name!r}") from None


def press(direction: Union[Direction, str]) -> Command:
    """Command sent when a direction control is pressed."""

    return encode_direction(direction)


def release() -> Command:
    """Command sent when any direction control is released."""

    return encode_direction(Direction.STOP)
