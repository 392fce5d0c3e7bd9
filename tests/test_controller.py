"""
Tests for ViewerController event dispatch and rendering.

The keyboard is driven through a pipe and the display through a Rich
Console writing to a StringIO, so no real terminal is needed.
"""

import asyncio
import io
import os

import pytest
from rich.console import Console

from tailsift.reader import StreamReader
from tailsift.render import RenderOptions, Viewport
from tailsift.store import LineStore
from tailsift.tui.controller import STATUS_STYLE, ViewerController
from tailsift.tui.prompt import FilterInput


@pytest.fixture
def pipe():
    """Create a pipe; yields (read_fd, write_fd) and closes both afterwards."""
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def make_controller(read_fd: int, data: bytes = b"", **kwargs) -> ViewerController:
    """Create a controller over an in-memory stream and a fixed-size console."""
    store = LineStore(capacity_hint=16)
    reader = StreamReader(io.BytesIO(data), store)
    console = Console(file=io.StringIO(), width=40, height=8, color_system=None)
    return ViewerController(
        store,
        reader,
        keyboard_fd=read_fd,
        console=console,
        tick_interval=0.05,
        **kwargs,
    )


class TestKeyHandling:
    """Tests for _handle_key dispatch."""

    @pytest.mark.parametrize("key", ["\r", "\n", "\x03", "\x1b"])
    def test_quit_keys_set_shutdown(self, pipe, key):
        """Enter, Ctrl-C and Escape stop the viewer."""
        controller = make_controller(pipe[0])

        controller._handle_key(key)

        assert controller.shutdown.is_set()

    def test_other_keys_edit_filter(self, pipe):
        """Printable keys go to the filter input."""
        controller = make_controller(pipe[0])

        for key in "err":
            controller._handle_key(key)
        controller._handle_key("\x7f")

        assert controller.filter_input.value == "er"
        assert not controller.shutdown.is_set()


class TestRender:
    """Tests for render() and frame conversion."""

    def test_render_uses_filter_and_viewport(self, pipe):
        """render() applies the current filter to the store."""
        controller = make_controller(
            pipe[0],
            filter_input=FilterInput(value="error !warn"),
            options=RenderOptions(pad_short_frames=False),
        )
        for line in ("alpha error", "beta", "gamma error warn"):
            controller.store.append(line)
        controller.viewport = Viewport(width=40, height=8)

        frame = controller.render()

        assert frame.matches == ["alpha error"]
        assert frame.rows[-2] == "> error !warn"

    def test_to_text_keeps_log_brackets_literal(self, pipe):
        """Markup-like text in log lines is shown verbatim."""
        controller = make_controller(pipe[0])
        controller.store.append("[bold]not markup[/bold]")
        controller.viewport = Viewport(width=40, height=6)

        frame = controller.render()
        text = controller._to_text(frame)

        assert text.plain == frame.text
        assert "[bold]not markup[/bold]" in text.plain

    def test_to_text_styles_status_row(self, pipe):
        """The last row carries the status style."""
        controller = make_controller(pipe[0])
        controller.viewport = Viewport(width=40, height=4)

        text = controller._to_text(controller.render())

        status_start = text.plain.rindex("\n") + 1
        assert any(
            span.start == status_start and span.style == STATUS_STYLE
            for span in text.spans
        )

    def test_refresh_without_live_is_noop(self, pipe):
        """Events before the display starts do not fail."""
        controller = make_controller(pipe[0])
        controller._refresh()
        controller._handle_resize()
        assert controller.viewport == Viewport(width=40, height=8)


class TestRun:
    """Tests for the full run() lifecycle."""

    @pytest.mark.asyncio
    async def test_run_until_enter(self, pipe):
        """Typed keys edit the filter and Enter ends the session."""
        read_fd, write_fd = pipe
        controller = make_controller(read_fd, data=b"one\ntwo\n")
        os.write(write_fd, b"tw\r")

        await controller.run()

        assert controller.shutdown.is_set()
        assert controller.filter_input.value == "tw"
        assert controller._reader.join(timeout=2)
        assert len(controller.store) == 2

    @pytest.mark.asyncio
    async def test_terminal_hangup_ends_session(self):
        """A keyboard descriptor at end-of-file shuts the viewer down."""
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"tw")
        os.close(write_fd)
        controller = make_controller(read_fd, data=b"one\ntwo\n")

        try:
            await asyncio.wait_for(controller.run(), timeout=5)
        finally:
            os.close(read_fd)

        assert controller.shutdown.is_set()
        assert controller.filter_input.value == "tw"
