"""
KeyboardTask for async keyboard input in the viewer.

Standard input carries the data stream, so keys are read from the
controlling terminal's file descriptor instead.

- Uses loop.run_in_executor() to wrap the blocking read
- Sets cbreak mode once at startup and restores it on exit
- Uses select() with a timeout so the executor thread always returns
  quickly and stop() takes effect promptly
- Reads raw bytes with os.read() and decodes incrementally, so
  multi-byte UTF-8 keys arrive as one character
- Reads whole CSI/SS3 escape sequences so keys like Delete or
  Ctrl+Right never leak their tail bytes as printable keys
- Stops when the terminal reports end-of-file (hangup)
"""

import asyncio
import codecs
import logging
import os
import select
import termios
import tty
from typing import Callable

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"
CSI = "\x1b["
SS3 = "\x1bO"

# Seconds to wait for the rest of an escape sequence
SEQUENCE_TIMEOUT = 0.05


def _ready(fd: int, timeout: float) -> bool:
    return bool(select.select([fd], [], [], timeout)[0])


def _read_char(fd: int, decoder: codecs.IncrementalDecoder) -> str:
    """
    Read bytes until the decoder yields a character.

    Raises:
        EOFError: If the descriptor is at end-of-file
    """
    while True:
        data = os.read(fd, 1)
        if not data:
            raise EOFError("keyboard input closed")
        char = decoder.decode(data)
        if char:
            return char


def _read_escape_sequence(fd: int, decoder: codecs.IncrementalDecoder) -> str:
    """
    Read the remainder of a sequence whose ESC was already consumed.

    CSI (ESC [) takes parameter and intermediate bytes (0x20-0x3F) up to
    a final byte (0x40-0x7E); SS3 (ESC O) takes exactly one more byte.
    A lone ESC is the Escape key.
    """
    seq = ESCAPE
    if not _ready(fd, SEQUENCE_TIMEOUT):
        return seq
    seq += _read_char(fd, decoder)

    if seq == CSI:
        while _ready(fd, SEQUENCE_TIMEOUT):
            char = _read_char(fd, decoder)
            seq += char
            if not "\x20" <= char <= "\x3f":
                break
    elif seq == SS3 and _ready(fd, SEQUENCE_TIMEOUT):
        seq += _read_char(fd, decoder)
    return seq


def _readkey_with_timeout(
    fd: int,
    timeout: float,
    decoder: codecs.IncrementalDecoder | None = None,
) -> str | None:
    """
    Read a keypress with timeout.

    Does NOT change terminal modes - caller must ensure cbreak mode is set.

    Args:
        fd: File descriptor to read from
        timeout: Maximum seconds to wait for input
        decoder: Incremental UTF-8 decoder (created if None)

    Returns:
        Key pressed (escape sequences joined), or None if timeout

    Raises:
        EOFError: If the terminal hung up
    """
    if decoder is None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    if not _ready(fd, timeout):
        return None

    char = _read_char(fd, decoder)
    if char == ESCAPE:
        return _read_escape_sequence(fd, decoder)
    return char


class KeyboardTask:
    """
    Async keyboard reader for integration with the viewer's TaskGroup.

    Example:
        keyboard = KeyboardTask(fd=tty_fd, on_key=handle_key)
        tg.create_task(keyboard.run())
        # Later:
        keyboard.stop()
    """

    def __init__(
        self,
        fd: int,
        on_key: Callable[[str], None],
        poll_timeout: float = 0.3,
        on_eof: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize keyboard task.

        Args:
            fd: Terminal file descriptor to read keys from
            on_key: Callback invoked on the event loop with each keypress
            poll_timeout: Seconds each executor read waits before rechecking
            on_eof: Callback invoked once if the terminal hangs up
        """
        self._fd = fd
        self._on_key = on_key
        self._poll_timeout = poll_timeout
        self._on_eof = on_eof
        self._shutdown = asyncio.Event()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._old_settings: list | None = None

    async def run(self) -> None:
        """
        Main task loop. Run inside TaskGroup.

        Sets cbreak mode if the descriptor is a terminal; restores the
        previous settings on exit.
        """
        loop = asyncio.get_running_loop()

        if os.isatty(self._fd):
            self._old_settings = termios.tcgetattr(self._fd)
        try:
            if self._old_settings is not None:
                tty.setcbreak(self._fd)

            while not self._shutdown.is_set():
                try:
                    key = await loop.run_in_executor(
                        None,
                        _readkey_with_timeout,
                        self._fd,
                        self._poll_timeout,
                        self._decoder,
                    )
                except EOFError:
                    logger.debug("Keyboard input reached end-of-file, stopping")
                    self.stop()
                    if self._on_eof is not None:
                        self._on_eof()
                    break
                if key is not None:
                    self._on_key(key)
        finally:
            if self._old_settings is not None:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)

    def stop(self) -> None:
        """Signal task to stop."""
        self._shutdown.set()
