"""
ViewerController for managing the viewer lifecycle.

This module provides the controller that:
- Owns the StreamReader thread (start at launch, stop at shutdown)
- Runs the KeyboardTask and tick loop in one asyncio TaskGroup
- Re-renders on every keypress, resize (SIGWINCH) and tick
- Displays each frame through Rich Live on the alternate screen
- Handles SIGINT/SIGTERM, the quit keys (Enter, Ctrl-C, Escape) and
  terminal hangup

Every event callback runs on the event loop thread, so render passes
never overlap. Signal handlers are registered before entering Live so
Ctrl+C works even during startup.
"""

import asyncio
import functools
import logging
import signal

from rich.console import Console
from rich.live import Live
from rich.text import Text

from tailsift.render import Frame, RenderOptions, Viewport, render_frame
from tailsift.reader import StreamReader
from tailsift.store import LineStore
from tailsift.tui.keyboard import KeyboardTask
from tailsift.tui.prompt import FilterInput

logger = logging.getLogger(__name__)

# Enter (CR or LF), Ctrl-C, Escape
QUIT_KEYS = ("\r", "\n", "\x03", "\x1b")

STATUS_STYLE = "#0C8C6C"


class ViewerController:
    """
    Controls the viewer lifecycle and dispatches UI events to renders.

    Example:
        controller = ViewerController(store, reader, keyboard_fd=tty_fd)
        await controller.run()  # Runs until Enter, Escape or Ctrl+C
    """

    def __init__(
        self,
        store: LineStore,
        reader: StreamReader,
        keyboard_fd: int,
        console: Console | None = None,
        filter_input: FilterInput | None = None,
        options: RenderOptions | None = None,
        tick_interval: float = 0.25,
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: Line store shared with the reader
            reader: Stream reader feeding the store (not yet started)
            keyboard_fd: Terminal file descriptor for key input
            console: Rich Console to use (creates default if None)
            filter_input: Filter input widget (creates default if None)
            options: Render knobs (defaults if None)
            tick_interval: Seconds between tick re-renders
        """
        self.console = console if console is not None else Console()
        self.store = store
        self.filter_input = filter_input if filter_input is not None else FilterInput()
        self.options = options if options is not None else RenderOptions()
        self.viewport = Viewport()
        self._reader = reader
        self._keyboard_fd = keyboard_fd
        self._tick_interval = tick_interval
        self._shutdown = asyncio.Event()
        self._keyboard: KeyboardTask | None = None
        self._live: Live | None = None

    @property
    def shutdown(self) -> asyncio.Event:
        """Return shutdown event for external coordination."""
        return self._shutdown

    async def run(self) -> None:
        """
        Run the viewer until a quit key or shutdown signal.

        Order:
        1. Register signal handlers BEFORE Live context
        2. Start the reader thread
        3. Enter Live context on the alternate screen
        4. Run keyboard task and tick loop in a TaskGroup
        5. Stop the reader and remove signal handlers
        """
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, functools.partial(self._handle_signal, sig))
        loop.add_signal_handler(signal.SIGWINCH, self._handle_resize)

        self._keyboard = KeyboardTask(
            fd=self._keyboard_fd,
            on_key=self._handle_key,
            on_eof=self.stop,
        )
        self._reader.start()
        self._update_viewport()
        logger.debug(f"Viewer started at {self.viewport.width}x{self.viewport.height}")

        try:
            with Live(
                self._to_text(self.render()),
                console=self.console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            ) as live:
                self._live = live
                async with asyncio.TaskGroup() as tg:
                    tg.create_task(self._keyboard.run())
                    tg.create_task(self._tick_loop())
        finally:
            self._live = None
            self._reader.stop()
            for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGWINCH):
                loop.remove_signal_handler(sig)
            logger.debug(f"Viewer stopped with {len(self.store)} lines stored")

    def render(self) -> Frame:
        """Run one render pass with the current filter and viewport."""
        return render_frame(
            self.store,
            self.filter_input.value,
            self.viewport,
            input_row=self.filter_input.view(),
            options=self.options,
        )

    async def _tick_loop(self) -> None:
        """
        Re-render periodically so new lines appear without keypresses.

        Uses wait_for with timeout for interruptible loop.
        """
        while not self._shutdown.is_set():
            self._refresh()
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=self._tick_interval)
            except asyncio.TimeoutError:
                pass  # Normal tick interval

    def _handle_key(self, key: str) -> None:
        """
        Handle a keypress: quit keys stop the viewer, others edit the filter.

        Args:
            key: Key pressed (raw character or escape sequence)
        """
        if key in QUIT_KEYS:
            self.stop()
            return
        self.filter_input.handle_key(key)
        self._refresh()

    def _handle_resize(self) -> None:
        """Re-read the terminal size and re-render."""
        self._update_viewport()
        self._refresh()

    def _handle_signal(self, sig: signal.Signals) -> None:
        """
        Handle shutdown signal by stopping all tasks.

        Args:
            sig: Signal received (SIGINT or SIGTERM)
        """
        logger.debug(f"Received {sig.name}, shutting down")
        self.stop()

    def stop(self) -> None:
        """Signal the tick loop and keyboard task to exit."""
        self._shutdown.set()
        if self._keyboard is not None:
            self._keyboard.stop()

    def _update_viewport(self) -> None:
        size = self.console.size
        self.viewport = Viewport(width=size.width, height=size.height)

    def _refresh(self) -> None:
        """Render a frame and push it to the Live display."""
        if self._live is None:
            return
        self._live.update(self._to_text(self.render()), refresh=True)

    def _to_text(self, frame: Frame) -> Text:
        """
        Convert a frame to Rich Text.

        Log lines are appended as plain text so brackets in them are never
        parsed as markup. The placeholder is dimmed and the status row
        colored.

        Args:
            frame: Frame from render()

        Returns:
            Text with wrapping disabled
        """
        text = Text(no_wrap=True, overflow="crop", end="")
        for row in frame.rows[:-2]:
            text.append(row)
            text.append("\n")

        if self.filter_input.value:
            text.append(frame.rows[-2])
        else:
            text.append(self.filter_input.prompt)
            text.append(self.filter_input.placeholder, style="dim")
        text.append("\n")
        text.append(frame.rows[-1], style=STATUS_STYLE)
        return text
