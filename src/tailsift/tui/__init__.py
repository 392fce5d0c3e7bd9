"""
TUI module for the interactive filter view.

This module provides the terminal-facing pieces of the viewer:
- ViewerController: Lifecycle owner, event dispatch and Rich Live display
- KeyboardTask: Async key reader on the controlling terminal
- FilterInput: Single-line filter text input
"""

from tailsift.tui.controller import ViewerController
from tailsift.tui.keyboard import KeyboardTask
from tailsift.tui.prompt import FilterInput

__all__ = [
    "FilterInput",
    "KeyboardTask",
    "ViewerController",
]
