"""Exception hierarchy raised by the session layer."""

from __future__ import annotations

from typing import Optional


class HCRemoteError(Exception):
    """Base class for every failure surfaced to the presentation layer."""

    title = "Error"

    def __init__(self, message: str, *, reason: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.reason = reason

    @property
    def message(self) -> str:
        return str(self)


class EnumerationError(HCRemoteError):
    title = "Can't find paired devices"


class ConnectionFailedError(HCRemoteError):
    title = "Connection failed"


class BusyError(HCRemoteError):
    title = "Busy"


class NotConnectedError(HCRemoteError):
    title = "Not connected"

    def __init__(self, message: str = "Please connect to a device first.") -> None:
        super().__init__(message)


class WriteError(HCRemoteError):
    title = "Send failed"


class DisconnectError(HCRemoteError):
    title = "Disconnect failed"
