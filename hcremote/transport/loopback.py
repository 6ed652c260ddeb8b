"""In-memory transport that echoes writes back as inbound data."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from ..models import Device
from .base import ChunkCallback, TransportOptions

_LOGGER = logging.getLogger(__name__)

DEMO_DEVICES = (Device(address="00:00:00:00:00:00", name="HC-06 (loopback)"),)


@dataclass
class LoopbackHandle:
    device: Device
    options: TransportOptions
    written: list[str] = field(default_factory=list)
    subscribers: dict = field(default_factory=dict)
    closed: bool = False


@dataclass(frozen=True)
class LoopbackSubscription:
    handle: LoopbackHandle
    token: int


class LoopbackTransport:
    """Simulate a paired module without any Bluetooth hardware.

    Every line written is echoed back to subscribers prefixed with
    ``echo_prefix`` so the inbound path can be exercised end to end.
    """

    def __init__(
        self,
        devices: Optional[Iterable[Device]] = None,
        *,
        echo: bool = True,
        echo_prefix: str = "ACK ",
    ) -> None:
        self.devices = list(DEMO_DEVICES if devices is None else devices)
        self.echo = echo
        self.echo_prefix = echo_prefix
        self.handles: list[LoopbackHandle] = []
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def list_bonded(self) -> list[Device]:
        return list(self.devices)

    def open(self, device: Device, options: TransportOptions) -> LoopbackHandle:
        if device.address not in {known.address for known in self.devices}:
            raise OSError(f"Device {device.address} is not paired")
        handle = LoopbackHandle(device=device, options=options)
        self.handles.append(handle)
        _LOGGER.debug("Loopback session opened for %s", device.address)
        return handle

    def write(self, handle: LoopbackHandle, text: str) -> None:
        if handle.closed:
            raise OSError("Loopback handle is closed")
        handle.written.append(text)
        if self.echo:
            self.inject(handle, f"{self.echo_prefix}{text}")

    def subscribe(self, handle: LoopbackHandle, on_chunk: ChunkCallback) -> LoopbackSubscription:
        token = next(self._tokens)
        with self._lock:
            handle.subscribers[token] = on_chunk
        return LoopbackSubscription(handle=handle, token=token)

    def unsubscribe(self, subscription: LoopbackSubscription) -> None:
        with self._lock:
            subscription.handle.subscribers.pop(subscription.token, None)

    def close(self, handle: LoopbackHandle) -> None:
        handle.closed = True
        with self._lock:
            handle.subscribers.clear()

    def inject(self, handle: LoopbackHandle, chunk: Union[str, bytes]) -> None:
        """Deliver *chunk* to the handle's subscribers as if it came from the device."""

        with self._lock:
            callbacks = list(handle.subscribers.values())
        for callback in callbacks:
            try:
                callback(chunk)
            except Exception:
                _LOGGER.debug("Loopback chunk callback failed", exc_info=True)
