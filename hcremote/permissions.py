"""OS-level access checks performed before the first device enumeration."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Optional

from .errors import EnumerationError

logger = logging.getLogger(__name__)

SERIAL_GROUPS = ("dialout", "uucp")

PermissionRequest = Callable[[], bool]


def request_serial_access() -> bool:
    """Return ``True`` when the current user may open serial devices.

    On Linux, serial and RFCOMM nodes are owned by the ``dialout`` (or
    ``uucp``) group. Other platforms grant access at pairing time.
    """

    if not sys.platform.startswith("linux"):
        return True
    if os.geteuid() == 0:
        return True
    try:
        import grp
    except ImportError:
        return True
    member_of = set(os.getgroups())
    known_group = False
    for name in SERIAL_GROUPS:
        try:
            gid = grp.getgrnam(name).gr_gid
        except KeyError:
            continue
        known_group = True
        if gid in member_of:
            return True
    return not known_group


class PermissionGate:
    """Run the permission request once and remember the outcome."""

    def __init__(self, request: Optional[PermissionRequest] = None) -> None:
        self._request = request or request_serial_access
        self._granted: Optional[bool] = None

    @property
    def granted(self) -> Optional[bool]:
        return self._granted

    def request(self) -> bool:
        if self._granted is None:
            try:
                self._granted = bool(self._request())
            except Exception as exc:
                logger.error("Permission request failed: %s", exc)
                self._granted = False
            if self._granted:
                logger.info("Serial device access granted")
            else:
                logger.warning("Serial device access denied")
        return self._granted

    def ensure(self) -> None:
        if not self.request():
            raise EnumerationError(
                "Bluetooth serial access was not granted; "
                "check that your user may open serial devices."
            )
