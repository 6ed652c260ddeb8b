"""Application context container for shared services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import AppConfig
from .permissions import PermissionGate
from .registry import DeviceRegistry
from .session import SessionManager
from .transport import SerialTransport, TransportBinding, TransportOptions


@dataclass
class AppContext:
    transport: TransportBinding
    permissions: PermissionGate
    registry: DeviceRegistry
    sessions: SessionManager


def build_context(
    config: AppConfig,
    *,
    transport: Optional[TransportBinding] = None,
    permissions: Optional[PermissionGate] = None,
) -> AppContext:
    """Wire the session layer services for *config*."""

    if transport is None:
        transport = SerialTransport(
            baudrate=config.baudrate,
            write_timeout=config.write_timeout,
            include_all_ports=config.include_all_ports,
        )
    permissions = permissions or PermissionGate()
    options = TransportOptions(
        connector_type=config.connector_type, delimiter=config.delimiter
    )
    return AppContext(
        transport=transport,
        permissions=permissions,
        registry=DeviceRegistry(transport, permissions=permissions),
        sessions=SessionManager(
            transport, options=options, default_speed=config.default_speed
        ),
    )
