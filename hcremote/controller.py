"""Presentation-facing facade over the session layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from . import commands
from .commands import Action, Direction
from .context import AppContext
from .errors import HCRemoteError
from .models import Command, ConnectionState, Device

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A single user-visible message produced from a failed operation."""

    title: str
    message: str


NotifyCallback = Callable[[Notification], None]


class RemoteController:
    """Expose the state and actions the UI needs, reporting failures once.

    Every action returns ``True`` on success. Failures from the session layer
    are logged and handed to *notify* as a :class:`Notification`; they never
    escape into the UI event loop.
    """

    def __init__(
        self,
        context: AppContext,
        *,
        notify: Optional[NotifyCallback] = None,
        speed_step: int = 10,
    ) -> None:
        self.context = context
        self.notify = notify
        self.speed_step = speed_step

    @property
    def connection_state(self) -> ConnectionState:
        return self.context.sessions.state

    @property
    def connected_device(self) -> Optional[Device]:
        return self.context.sessions.device

    @property
    def devices(self) -> list[Device]:
        return self.context.registry.devices

    @property
    def current_speed(self) -> int:
        return self.context.sessions.speed

    @property
    def received_lines(self) -> tuple[str, ...]:
        return self.context.sessions.received_lines

    def request_permissions(self) -> bool:
        return self.context.permissions.request()

    def list_paired(self) -> list[Device]:
        try:
            return self.context.registry.list_paired()
        except HCRemoteError as exc:
            self._report(exc)
            return []

    def connect(self, device: Device) -> bool:
        try:
            self.context.sessions.connect(device)
        except HCRemoteError as exc:
            self._report(exc)
            return False
        return True

    def disconnect(self) -> bool:
        try:
            self.context.sessions.disconnect()
        except HCRemoteError as exc:
            self._report(exc)
            return False
        return True

    def send(self, command: Union[Command, str]) -> bool:
        try:
            self.context.sessions.send(command)
        except HCRemoteError as exc:
            self._report(exc)
            return False
        return True

    def press(self, direction: Union[Direction, str]) -> bool:
        return self.send(commands.press(direction))

    def release(self) -> bool:
        return self.send(commands.release())

    def stop(self) -> bool:
        return self.send(commands.encode_direction(Direction.STOP))

    def action(self, kind: Union[Action, str]) -> bool:
        return self.send(commands.encode_action(kind))

    def send_text(self, text: str) -> bool:
        command = commands.encode_free_text(text)
        if command is None:
            return False
        return self.send(command)

    def send_quick(self, name: str) -> bool:
        return self.send(commands.encode_quick(name))

    def change_speed(self, level: int) -> bool:
        try:
            self.context.sessions.set_speed(level)
        except HCRemoteError as exc:
            self._report(exc)
            return False
        return True

    def step_speed(self, steps: int) -> bool:
        return self.change_speed(self.current_speed + steps * self.speed_step)

    def shutdown(self) -> None:
        self.context.sessions.close()

    def _report(self, exc: HCRemoteError) -> None:
        logger.warning("%s: %s", exc.title, exc.message)
        if self.notify is None:
            return
        try:
            self.notify(Notification(exc.title, exc.message))
        except Exception:
            logger.debug("Notification callback failed", exc_info=True)
