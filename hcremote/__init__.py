"""HC Remote: drive an HC-06 Bluetooth serial vehicle from the desktop."""

from __future__ import annotations

__all__ = ["main"]


def main() -> None:
    """Launch the HC Remote GUI application."""

    from .app import main as _app_main

    _app_main()
