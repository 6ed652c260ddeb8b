"""Delimiter framing for inbound transport data."""

from __future__ import annotations

import codecs
import logging
import threading
from typing import Callable, Iterator, Optional, Union

from .models import DEFAULT_DELIMITER

LineCallback = Callable[[str], None]
Chunk = Union[str, bytes, bytearray]

logger = logging.getLogger(__name__)


class InboundLineBuffer:
    """Accumulate raw chunks into delimiter-terminated lines.

    One buffer belongs to exactly one session. Lines are kept in arrival order
    in an append-only log; once :meth:`close` has been called any pending
    fragment is dropped and further chunks are ignored.
    """

    def __init__(
        self,
        delimiter: str = DEFAULT_DELIMITER,
        *,
        on_line: Optional[LineCallback] = None,
        encoding: str = "utf-8",
    ) -> None:
        if not delimiter:
            raise ValueError("Line delimiter must not be empty")
        self.delimiter = delimiter
        self.encoding = encoding
        self._on_line = on_line
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="ignore")
        self._pending = ""
        self._lines: list[str] = []
        self._closed = False
        self._cond = threading.Condition()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> str:
        return self._pending

    @property
    def lines(self) -> tuple[str, ...]:
        with self._cond:
            return tuple(self._lines)

    def feed(self, chunk: Chunk) -> list[str]:
        """Append *chunk* and return the lines it completed.

        Bytes go through an incremental decoder, so a multi-byte character
        split across two reads is reassembled. Callbacks run after the
        internal lock is released.
        """

        with self._cond:
            if self._closed:
                return []
            if isinstance(chunk, (bytes, bytearray)):
                text = self._decoder.decode(bytes(chunk))
            else:
                text = chunk
            self._pending += text
            parts = self._pending.split(self.delimiter)
            self._pending = parts.pop()
            completed = [line for line in map(self._normalize, parts) if line]
            if completed:
                self._lines.extend(completed)
                self._cond.notify_all()
        for line in completed:
            if self._closed:
                break
            self._dispatch(line)
        return completed

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            if self._pending:
                logger.debug("Discarding partial inbound fragment %r", self._pending)
            self._pending = ""
            self._decoder.reset()
            self._closed = True
            self._cond.notify_all()

    def iter_lines(self, timeout: Optional[float] = None) -> Iterator[str]:
        """Yield lines arriving after this call until the buffer is closed.

        When *timeout* is given the iterator also stops if no line arrives
        within that many seconds.
        """

        with self._cond:
            start = len(self._lines)
        return self._follow(start, timeout)

    def _follow(self, index: int, timeout: Optional[float]) -> Iterator[str]:
        while True:
            with self._cond:
                self._cond.wait_for(
                    lambda: index < len(self._lines) or self._closed, timeout
                )
                if index >= len(self._lines):
                    return
                line = self._lines[index]
            index += 1
            yield line

    def __iter__(self) -> Iterator[str]:
        return self.iter_lines()

    def _normalize(self, line: str) -> str:
        if self.delimiter == "\n" and line.endswith("\r"):
            line = line[:-1]
        return line

    def _dispatch(self, line: str) -> None:
        if self._on_line is None:
            return
        try:
            self._on_line(line)
        except Exception:
            logger.debug("Inbound line callback failed", exc_info=True)
