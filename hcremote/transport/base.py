"""Contract between the session layer and a concrete serial transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence, Union

from ..models import DEFAULT_DELIMITER, Device

ChunkCallback = Callable[[Union[str, bytes]], None]

DEFAULT_CONNECTOR_TYPE = "rfcomm"


@dataclass(frozen=True)
class TransportOptions:
    connector_type: str = DEFAULT_CONNECTOR_TYPE
    delimiter: str = DEFAULT_DELIMITER


class TransportBinding(Protocol):
    """Operations the session layer needs from one physical serial endpoint."""

    def list_bonded(self) -> Sequence[Device]:
        ...

    def open(self, device: Device, options: TransportOptions) -> Any:
        ...

    def write(self, handle: Any, text: str) -> None:
        ...

    def subscribe(self, handle: Any, on_chunk: ChunkCallback) -> Any:
        ...

    def unsubscribe(self, subscription: Any) -> None:
        ...

    def close(self, handle: Any) -> None:
        ...
