"""Cache of the devices most recently reported as paired."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import EnumerationError
from .models import Device
from .permissions import PermissionGate
from .transport import TransportBinding

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Enumerate paired devices on demand and keep the last snapshot."""

    def __init__(
        self,
        transport: TransportBinding,
        *,
        permissions: Optional[PermissionGate] = None,
    ) -> None:
        self._transport = transport
        self._permissions = permissions
        self._devices: list[Device] = []

    @property
    def devices(self) -> list[Device]:
        return list(self._devices)

    def list_paired(self) -> list[Device]:
        if self._permissions is not None:
            self._permissions.ensure()
        try:
            devices = list(self._transport.list_bonded())
        except Exception as exc:
            logger.error("Listing paired devices failed: %s", exc)
            raise EnumerationError(
                f"Can't list paired devices: {exc}", reason=exc
            ) from exc
        self._devices = devices
        logger.info("Found %d paired device(s)", len(devices))
        return list(devices)

    def find(self, address: str) -> Optional[Device]:
        for device in self._devices:
            if device.address == address:
                return device
        return None
