"""Lifecycle of the single connection to a paired device."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Union

from .commands import DEFAULT_SPEED, clamp_speed, encode_speed
from .errors import (
    BusyError,
    ConnectionFailedError,
    DisconnectError,
    NotConnectedError,
    WriteError,
)
from .linebuffer import InboundLineBuffer
from .models import Command, ConnectionState, Device, Session
from .transport import TransportBinding, TransportOptions

StateCallback = Callable[[ConnectionState], None]
LineCallback = Callable[[str], None]

logger = logging.getLogger(__name__)


class _ConnectAttempt:
    __slots__ = ("device",)

    def __init__(self, device: Device) -> None:
        self.device = device


class SessionManager:
    """Own at most one :class:`Session` and drive its state machine.

    ``connect`` and ``disconnect`` are serialized through the intermediate
    ``CONNECTING``/``DISCONNECTING`` states. ``send`` checks the state and
    writes while holding the same lock the disconnect transition takes, so a
    write never overlaps teardown. State listeners are called after that lock
    has been released.
    """

    def __init__(
        self,
        transport: TransportBinding,
        *,
        options: Optional[TransportOptions] = None,
        default_speed: int = DEFAULT_SPEED,
    ) -> None:
        self._transport = transport
        self.options = options or TransportOptions()
        self.default_speed = clamp_speed(default_speed)
        self._lock = threading.RLock()
        self._state = ConnectionState.DISCONNECTED
        self._session: Optional[Session] = None
        self._attempt: Optional[_ConnectAttempt] = None
        self._speed = self.default_speed
        self._state_listeners: list[StateCallback] = []
        self._state_events: list[ConnectionState] = []
        self._line_listeners: list[LineCallback] = []
        self._listeners_lock = threading.Lock()

    # -- read access -----------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def device(self) -> Optional[Device]:
        session = self._session
        if session is not None:
            return session.device
        attempt = self._attempt
        return attempt.device if attempt is not None else None

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def received_lines(self) -> tuple[str, ...]:
        session = self._session
        return session.buffer.lines if session is not None else ()

    # -- observers -------------------------------------------------------

    def add_state_listener(self, callback: StateCallback) -> None:
        with self._listeners_lock:
            self._state_listeners.append(callback)

    def remove_state_listener(self, callback: StateCallback) -> None:
        with self._listeners_lock:
            try:
                self._state_listeners.remove(callback)
            except ValueError:
                pass

    def add_line_listener(self, callback: LineCallback) -> None:
        with self._listeners_lock:
            self._line_listeners.append(callback)

    def remove_line_listener(self, callback: LineCallback) -> None:
        with self._listeners_lock:
            try:
                self._line_listeners.remove(callback)
            except ValueError:
                pass

    # -- structural operations ---------------------------------------------

    def connect(self, device: Device) -> Session:
        try:
            return self._connect(device)
        finally:
            self._notify_state_listeners()

    def _connect(self, device: Device) -> Session:
        with self._lock:
            self._ensure_idle("connect")
            replacing = self._state is ConnectionState.CONNECTED
        if replacing:
            logger.info("Closing current session before connecting to %s", device.address)
            try:
                self.disconnect()
            except DisconnectError as exc:
                logger.warning("Previous session closed with an error: %s", exc)

        with self._lock:
            self._ensure_idle("connect")
            if self._state is not ConnectionState.DISCONNECTED:
                raise BusyError("Another connection was opened meanwhile.")
            attempt = _ConnectAttempt(device)
            self._attempt = attempt
            self._set_state(ConnectionState.CONNECTING)
        self._notify_state_listeners()

        logger.info("Connecting to %s (%s)", device.label, device.address)
        try:
            handle = self._transport.open(device, self.options)
        except Exception as exc:
            with self._lock:
                if self._attempt is attempt:
                    self._attempt = None
                    self._set_state(ConnectionState.DISCONNECTED)
            logger.error("Connection to %s failed: %s", device.address, exc)
            raise ConnectionFailedError(
                f"Could not connect to {device.label}: {exc}", reason=exc
            ) from exc

        with self._lock:
            if self._attempt is attempt:
                session = self._install_session(device, handle)
                self._attempt = None
                self._speed = self.default_speed
                self._set_state(ConnectionState.CONNECTED)
                logger.info("Connected to %s", device.address)
                return session

        # disconnect() cancelled the attempt while the transport was opening.
        try:
            self._transport.close(handle)
        except Exception:
            logger.debug("Closing cancelled connection failed", exc_info=True)
        raise ConnectionFailedError(f"Connection to {device.label} was cancelled.")

    def disconnect(self) -> None:
        try:
            self._disconnect()
        finally:
            self._notify_state_listeners()

    def _disconnect(self) -> None:
        with self._lock:
            if self._state is ConnectionState.DISCONNECTED:
                return
            if self._state is ConnectionState.DISCONNECTING:
                raise BusyError("A disconnect is already in progress.")
            if self._state is ConnectionState.CONNECTING:
                attempt = self._attempt
                self._attempt = None
                self._set_state(ConnectionState.DISCONNECTING)
                self._set_state(ConnectionState.DISCONNECTED)
                if attempt is not None:
                    logger.info("Cancelled connection attempt to %s", attempt.device.address)
                return
            session = self._session
            self._set_state(ConnectionState.DISCONNECTING)
        self._notify_state_listeners()

        assert session is not None
        session.state = ConnectionState.DISCONNECTING
        error: Optional[Exception] = None
        try:
            self._teardown_subscription(session)
            try:
                self._transport.close(session.handle)
            except Exception as exc:
                logger.error("Closing %s failed: %s", session.device.address, exc)
                error = exc
        finally:
            with self._lock:
                session.state = ConnectionState.DISCONNECTED
                session.subscription = None
                self._session = None
                self._set_state(ConnectionState.DISCONNECTED)
        logger.info("Disconnected from %s", session.device.address)
        if error is not None:
            raise DisconnectError(
                f"Closing {session.device.label} failed: {error}", reason=error
            ) from error

    def close(self) -> None:
        """Tear down any session without raising on transport close errors."""

        try:
            self.disconnect()
        except DisconnectError as exc:
            logger.warning("Session cleanup finished with an error: %s", exc)
        except BusyError:
            logger.debug("Session cleanup skipped; teardown already in progress")

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, *_exc_info: Any) -> None:
        self.close()

    # -- data ----------------------------------------------------------------

    def send(self, command: Union[Command, str]) -> None:
        if isinstance(command, str):
            command = Command(command)
        with self._lock:
            session = self._session
            if self._state is not ConnectionState.CONNECTED or session is None:
                raise NotConnectedError()
            wire = command.wire(self.options.delimiter)
            try:
                self._transport.write(session.handle, wire)
            except Exception as exc:
                logger.error("Sending %r failed: %s", command.payload, exc)
                raise WriteError(f"Send failed: {exc}", reason=exc) from exc
        logger.info("Sent %s", command.payload)

    def set_speed(self, level: Union[int, float]) -> int:
        command = encode_speed(level)
        with self._lock:
            self.send(command)
            self._speed = clamp_speed(level)
            return self._speed

    # -- internals -------------------------------------------------------------

    def _ensure_idle(self, operation: str) -> None:
        if self._state in (ConnectionState.CONNECTING, ConnectionState.DISCONNECTING):
            raise BusyError(
                f"Cannot {operation} while {self._state.value}; wait for it to finish."
            )

    def _install_session(self, device: Device, handle: Any) -> Session:
        buffer = InboundLineBuffer(self.options.delimiter, on_line=self._dispatch_line)
        session = Session(device=device, handle=handle, buffer=buffer)
        try:
            session.subscription = self._transport.subscribe(handle, buffer.feed)
        except Exception as exc:
            self._attempt = None
            self._set_state(ConnectionState.DISCONNECTED)
            buffer.close()
            try:
                self._transport.close(handle)
            except Exception:
                logger.debug("Closing after failed subscribe failed", exc_info=True)
            raise ConnectionFailedError(
                f"Could not listen to {device.label}: {exc}", reason=exc
            ) from exc
        self._session = session
        return session

    def _teardown_subscription(self, session: Session) -> None:
        session.buffer.close()
        subscription = session.subscription
        if subscription is None:
            return
        try:
            self._transport.unsubscribe(subscription)
        except Exception:
            logger.warning("Removing inbound subscription failed", exc_info=True)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        self._state_events.append(state)

    def _notify_state_listeners(self) -> None:
        # Must be called with self._lock released.
        with self._lock:
            events, self._state_events = self._state_events, []
        if not events:
            return
        with self._listeners_lock:
            listeners = list(self._state_listeners)
        for state in events:
            for callback in listeners:
                try:
                    callback(state)
                except Exception:
                    logger.debug("State listener failed", exc_info=True)

    def _dispatch_line(self, line: str) -> None:
        with self._listeners_lock:
            listeners = list(self._line_listeners)
        for callback in listeners:
            try:
                callback(line)
            except Exception:
                logger.debug("Line listener failed", exc_info=True)
