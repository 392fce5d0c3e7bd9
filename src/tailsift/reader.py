"""
StreamReader for ingesting a live byte stream into the LineStore.

This module runs the ingestion side of the viewer: a single background
thread reads raw bytes, cuts them into lines and appends each one to the
store as soon as it is complete.

Decoding rules:
- Lines are split on b"\\n"; a single b"\\r" before the newline is dropped
- Each line is decoded as UTF-8 with errors="replace", so malformed
  bytes turn into U+FFFD instead of stopping the loop
- A trailing line without a newline is delivered at end-of-stream

The thread is a daemon so a reader blocked on a quiet pipe never holds
the process open. stop() is checked between reads.
"""

import logging
import threading
from typing import BinaryIO

from tailsift.store import LineStore

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


def _decode_line(raw: bytes) -> str:
    """Decode one raw line, dropping a trailing carriage return."""
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace")


class StreamReader:
    """
    Background reader that appends decoded lines to a LineStore.

    Example:
        reader = StreamReader(stream, store)
        reader.start()
        # ... later ...
        reader.stop()
    """

    def __init__(
        self,
        stream: BinaryIO,
        store: LineStore,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """
        Initialize the reader.

        Args:
            stream: Binary stream to read; read(n) may return fewer bytes
            store: Destination for decoded lines
            chunk_size: Maximum bytes requested per read call
        """
        self._stream = stream
        self._store = store
        self._chunk_size = chunk_size
        self._stop = threading.Event()
        self._finished = threading.Event()
        self._thread: threading.Thread | None = None
        self.lines_read = 0

    @property
    def finished(self) -> threading.Event:
        """Return event set once the read loop has exited."""
        return self._finished

    @property
    def is_running(self) -> bool:
        """Return True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the background thread.

        Raises:
            RuntimeError: If the reader was already started
        """
        if self._thread is not None:
            raise RuntimeError("StreamReader already started")
        self._thread = threading.Thread(
            target=self.run,
            name="tailsift-reader",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the read loop to exit after the current read returns."""
        self._stop.set()

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the read loop to exit.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            True if the loop has exited
        """
        if self._thread is not None:
            self._thread.join(timeout)
        return self._finished.is_set()

    def run(self) -> None:
        """
        Read until end-of-stream or stop().

        Runs on the calling thread; start() runs it on a daemon thread.
        End-of-stream is not an error: the loop just returns.
        """
        logger.debug("Stream reader started")
        # Unterminated last line. Each chunk is scanned for newlines once,
        # so a line spanning many chunks is assembled in linear time.
        pending = bytearray()
        try:
            while not self._stop.is_set():
                try:
                    chunk = self._stream.read(self._chunk_size)
                except OSError as e:
                    logger.warning(f"Stream read failed, stopping reader: {e}")
                    break
                if not chunk:
                    if pending:
                        self._emit(bytes(pending))
                        pending.clear()
                    logger.debug(
                        f"Stream reader reached end of stream after {self.lines_read} lines"
                    )
                    break

                first, *rest = chunk.split(b"\n")
                pending += first
                if not rest:
                    continue
                self._emit(bytes(pending))
                *complete, tail = rest
                for raw in complete:
                    self._emit(raw)
                pending = bytearray(tail)
        finally:
            self._finished.set()

    def _emit(self, raw: bytes) -> None:
        self._store.append(_decode_line(raw))
        self.lines_read += 1
