"""Transport bindings for the HC-06 session layer."""

from .base import ChunkCallback, TransportBinding, TransportOptions
from .loopback import LoopbackTransport
from .serial_transport import HC06_BAUDRATE, SerialTransport, is_bluetooth_port

__all__ = [
    "ChunkCallback",
    "HC06_BAUDRATE",
    "LoopbackTransport",
    "SerialTransport",
    "TransportBinding",
    "TransportOptions",
    "is_bluetooth_port",
]
