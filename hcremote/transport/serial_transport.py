"""pyserial transport for Bluetooth SPP modules such as the HC-06."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

import serial
import serial.tools.list_ports

from ..models import Device
from .base import DEFAULT_CONNECTOR_TYPE, ChunkCallback, TransportOptions

HC06_BAUDRATE = 9600
_READ_TIMEOUT = 0.2
_LOGGER = logging.getLogger(__name__)
_PLACEHOLDER_TEXT = {"", "n/a"}


def is_bluetooth_port(info) -> bool:
    """Return ``True`` when *info* looks like an RFCOMM serial port."""

    device = (getattr(info, "device", "") or "").lower()
    hwid = (getattr(info, "hwid", "") or "").lower()
    description = (getattr(info, "description", "") or "").lower()
    if "rfcomm" in device or "bthenum" in hwid:
        return True
    if "bluetooth" in description:
        return True
    # macOS publishes paired SPP modules as /dev/cu.<device-name>
    return device.startswith("/dev/cu.hc-0")


def _port_name(info) -> Optional[str]:
    for attr in ("product", "description"):
        value = (getattr(info, attr, "") or "").strip()
        if value.lower() not in _PLACEHOLDER_TEXT and value != info.device:
            return value
    device = getattr(info, "device", "") or ""
    if device.startswith("/dev/cu."):
        return device[len("/dev/cu."):]
    return None


@dataclass
class SerialHandle:
    """An open serial port plus its reader thread and subscribers."""

    device: Device
    serial: serial.Serial
    stop_event: threading.Event = field(default_factory=threading.Event)
    reader: Optional[threading.Thread] = None
    subscribers: dict = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)
    write_lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def is_open(self) -> bool:
        return bool(self.serial and self.serial.is_open)


@dataclass(frozen=True)
class SerialSubscription:
    handle: SerialHandle
    token: int


class SerialTransport:
    """Expose paired Bluetooth serial ports through the transport contract."""

    def __init__(
        self,
        *,
        baudrate: int = HC06_BAUDRATE,
        timeout: float = _READ_TIMEOUT,
        write_timeout: float = 0.5,
        include_all_ports: bool = False,
    ) -> None:
        self.baudrate = baudrate
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.include_all_ports = include_all_ports
        self._tokens = itertools.count(1)

    def list_bonded(self) -> list[Device]:
        devices = []
        for info in serial.tools.list_ports.comports():
            port = getattr(info, "device", None)
            if not port:
                continue
            if not self.include_all_ports and not is_bluetooth_port(info):
                _LOGGER.debug("Skipping non-Bluetooth port %s", port)
                continue
            devices.append(Device(address=port, name=_port_name(info)))
        return devices

    def open(self, device: Device, options: TransportOptions) -> SerialHandle:
        if options.connector_type != DEFAULT_CONNECTOR_TYPE:
            raise ValueError(f"Unsupported connector type: {options.connector_type}")
        ser = serial.Serial(
            device.address,
            self.baudrate,
            timeout=self.timeout,
            write_timeout=self.write_timeout,
        )
        handle = SerialHandle(device=device, serial=ser)
        try:
            ser.reset_input_buffer()
        except Exception:
            _LOGGER.debug("Failed to flush input on %s", device.address, exc_info=True)
        handle.reader = threading.Thread(
            target=self._reader_loop,
            args=(handle,),
            name=f"SerialTransport[{device.address}]",
            daemon=True,
        )
        handle.reader.start()
        return handle

    def write(self, handle: SerialHandle, text: str) -> None:
        if not handle.is_open:
            raise serial.SerialException(f"Port {handle.device.address} is not open")
        with handle.write_lock:
            handle.serial.write(text.encode("utf-8"))
            handle.serial.flush()

    def subscribe(self, handle: SerialHandle, on_chunk: ChunkCallback) -> SerialSubscription:
        token = next(self._tokens)
        with handle.lock:
            handle.subscribers[token] = on_chunk
        return SerialSubscription(handle=handle, token=token)

    def unsubscribe(self, subscription: SerialSubscription) -> None:
        with subscription.handle.lock:
            subscription.handle.subscribers.pop(subscription.token, None)

    def close(self, handle: SerialHandle) -> None:
        handle.stop_event.set()
        reader = handle.reader
        if reader and reader.is_alive() and reader is not threading.current_thread():
            reader.join(timeout=1.0)
        handle.reader = None
        with handle.lock:
            handle.subscribers.clear()
        handle.serial.close()

    def _reader_loop(self, handle: SerialHandle) -> None:
        while not handle.stop_event.is_set():
            ser = handle.serial
            try:
                raw = ser.read(ser.in_waiting or 1)
            except Exception as exc:
                if not handle.stop_event.is_set():
                    _LOGGER.warning("Reading from %s failed: %s", handle.device.address, exc)
                break
            if not raw:
                continue
            self._dispatch_chunk(handle, raw)

    def _dispatch_chunk(self, handle: SerialHandle, chunk: bytes) -> None:
        with handle.lock:
            callbacks = list(handle.subscribers.values())
        for callback in callbacks:
            try:
                callback(chunk)
            except Exception:
                _LOGGER.debug("Serial chunk callback failed", exc_info=True)
