"""
tailsift

Interactive terminal viewer that tails a live input stream and filters
the visible lines by include/exclude terms as you type.

- LineStore: Append-only, lock-guarded store of every line received
- StreamReader: Background thread decoding the input into the store
- parse_query / Query: Filter text parsing
- matches: Substring match engine
- render_frame: Per-event backward scan producing the displayed frame
"""

__version__ = "0.1.0"

from tailsift.match import matches
from tailsift.query import Query, parse_query
from tailsift.reader import StreamReader
from tailsift.render import Frame, RenderOptions, Viewport, render_frame
from tailsift.store import LineStore, StoreView

__all__ = [
    "__version__",
    "Frame",
    "LineStore",
    "Query",
    "RenderOptions",
    "StoreView",
    "StreamReader",
    "Viewport",
    "matches",
    "parse_query",
    "render_frame",
]
