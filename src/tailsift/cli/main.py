"""tailsift CLI - interactive include/exclude filter over a live stream."""

import asyncio
import logging
import os
import sys
import termios
from pathlib import Path
from typing import BinaryIO

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tailsift.config import Settings, settings
from tailsift.exceptions import (
    SourceUnavailableError,
    TailsiftError,
    TerminalUnavailableError,
)
from tailsift.reader import StreamReader
from tailsift.render import RenderOptions
from tailsift.store import LineStore
from tailsift.tui.controller import ViewerController
from tailsift.tui.prompt import FilterInput

logger = logging.getLogger(__name__)

TERMINAL_DEVICE = "/dev/tty"

app = typer.Typer(
    name="tailsift",
    help="Tail a live stream and filter it interactively (exclude with !term)",
    add_completion=False,
)


def configure_logging(level: str, log_file: Path | None = None) -> None:
    """
    Configure the root logger once for the process.

    Args:
        level: Logging level name (e.g., "DEBUG", "WARNING")
        log_file: Write to this file instead of stderr when set
    """
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


def open_source(source: str) -> BinaryIO:
    """
    Open the input stream unbuffered.

    Reads go straight to the descriptor so each read returns whatever
    bytes are available instead of waiting to fill a buffer.

    Args:
        source: File path, or "-" for standard input

    Returns:
        Raw binary stream

    Raises:
        SourceUnavailableError: If the path cannot be opened
    """
    if source == "-":
        return open(sys.stdin.fileno(), "rb", buffering=0, closefd=False)
    try:
        return open(source, "rb", buffering=0)
    except OSError as e:
        raise SourceUnavailableError(source, e.strerror or str(e)) from e


def open_terminal(device: str = TERMINAL_DEVICE) -> int:
    """
    Open the controlling terminal for keyboard input.

    Args:
        device: Terminal device path

    Returns:
        File descriptor usable with termios

    Raises:
        TerminalUnavailableError: If the device cannot be opened or is
            not a terminal
    """
    try:
        fd = os.open(device, os.O_RDONLY)
    except OSError as e:
        raise TerminalUnavailableError(device, e.strerror or str(e)) from e
    try:
        termios.tcgetattr(fd)
    except termios.error as e:
        os.close(fd)
        raise TerminalUnavailableError(device, "not a terminal") from e
    return fd


def build_settings(**overrides: object) -> Settings:
    """
    Apply CLI overrides on top of the environment settings.

    Args:
        **overrides: Settings fields; None values are ignored

    Returns:
        Settings with overrides applied

    Raises:
        pydantic.ValidationError: If an override is out of range
    """
    update = {name: value for name, value in overrides.items() if value is not None}
    # Rebuild rather than model_copy so overrides go through validation
    return Settings(**{**settings.model_dump(), **update})


@app.command()
def view(
    source: str = typer.Argument(
        "-", help="File to read (default: standard input)"
    ),
    filter_text: str = typer.Option(
        "", "--filter", "-f", help="Initial filter text"
    ),
    reserve: int = typer.Option(
        settings.reserved_rows, "--reserve", "-r", help="Rows held back from the match area"
    ),
    pad: bool = typer.Option(
        settings.pad_short_frames,
        "--pad/--no-pad",
        help="Pad short frames with blank rows at the top",
    ),
    capacity: int = typer.Option(
        settings.capacity_hint, "--capacity", help="Lines to pre-reserve in the store"
    ),
    tick: float = typer.Option(
        settings.tick_interval, "--tick", help="Seconds between periodic re-renders"
    ),
    log_file: Path = typer.Option(
        None, "--log-file", envvar="TAILSIFT_LOG_FILE", help="Write logs to this file"
    ),
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"
    ),
) -> None:
    """
    View the input stream, keeping only lines that match the filter.

    Type space-separated words to include; prefix a word with ! to
    exclude it. Enter, Escape or Ctrl+C quits.
    """
    try:
        config = build_settings(
            reserved_rows=reserve,
            pad_short_frames=pad,
            capacity_hint=capacity,
            tick_interval=tick,
            log_file=log_file,
            log_level=log_level,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise typer.BadParameter(problems) from e
    configure_logging(config.log_level, config.log_file)
    err_console = Console(stderr=True)

    try:
        stream = open_source(source)
        keyboard_fd = open_terminal()
    except TailsiftError as e:
        logger.error(str(e))
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    store = LineStore(capacity_hint=config.capacity_hint)
    reader = StreamReader(stream, store, chunk_size=config.read_chunk_size)
    controller = ViewerController(
        store,
        reader,
        keyboard_fd=keyboard_fd,
        filter_input=FilterInput(value=filter_text, char_limit=config.char_limit),
        options=RenderOptions(
            reserved_rows=config.reserved_rows,
            pad_short_frames=config.pad_short_frames,
        ),
        tick_interval=config.tick_interval,
    )

    try:
        asyncio.run(controller.run())
    finally:
        os.close(keyboard_fd)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
