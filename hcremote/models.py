"""Value types shared by the session layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .linebuffer import InboundLineBuffer

DEFAULT_DELIMITER = "\n"
UNKNOWN_DEVICE_LABEL = "Unknown Device"


@dataclass(frozen=True)
class Device:
    """A paired serial endpoint as reported by the transport."""

    address: str
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or UNKNOWN_DEVICE_LABEL


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


@dataclass(frozen=True)
class Command:
    """A single outbound message, without its line terminator."""

    payload: str

    def wire(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        if delimiter and self.payload.endswith(delimiter):
            return self.payload
        return f"{self.payload}{delimiter}"


@dataclass
class Session:
    """The live connection owned by :class:`~hcremote.session.SessionManager`."""

    device: Device
    handle: Any
    buffer: "InboundLineBuffer"
    subscription: Any = None
    state: ConnectionState = ConnectionState.CONNECTED
