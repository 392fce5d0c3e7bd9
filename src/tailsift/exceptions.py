"""
Exception classes for viewer startup failures.

The viewer only has two failure categories: it cannot start (these
exceptions, fatal at the CLI) or it has nothing to show (an empty or
padded frame, never an exception).

- TailsiftError: Base class
- TerminalUnavailableError: Controlling terminal cannot be opened or
  switched to cbreak mode
- SourceUnavailableError: Input file cannot be opened
"""


class TailsiftError(Exception):
    """Base class for tailsift errors."""


class TerminalUnavailableError(TailsiftError):
    """
    Raised when the keyboard terminal cannot be initialized.

    Attributes:
        device: Terminal device path that failed
        reason: Underlying error message
    """

    def __init__(self, device: str, reason: str) -> None:
        self.device = device
        self.reason = reason
        super().__init__(
            f"Cannot use terminal {device} for keyboard input: {reason}"
        )


class SourceUnavailableError(TailsiftError):
    """
    Raised when the input source cannot be opened.

    Attributes:
        source: Path that failed to open
        reason: Underlying error message
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read input {source}: {reason}")
