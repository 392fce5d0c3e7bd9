"""
Render pipeline: turn the store tail and filter text into one frame.

Called once per UI event (keypress, resize, tick). The pass:
1. Parses the filter text into a Query
2. Holds the store snapshot while walking newest-to-oldest, collecting
   matching lines until the match budget is full or index 0 is passed
3. Optionally pads the top with blank rows so the frame fills the screen
4. Restores chronological order and appends the input and status rows

The snapshot lock is held for the whole walk, so the reader's next append
waits. The walk stops early once the budget is full; a selective filter
over a long non-matching tail can still force a full scan.

Frame layout (height H):
+--------------------------------------------+
|  (blank padding rows)                      |
|  oldest shown match                        |
|  ...                                       |
|  newest shown match                        |
|  > filter input                            |
|  Including: [..], Excluding: [..], Total.. |
+--------------------------------------------+
"""

from dataclasses import dataclass, field

from tailsift.match import matches
from tailsift.query import Query, parse_query
from tailsift.store import LineStore

# Rows below the match area that are always present: input and status.
FIXED_ROWS = 2

STATUS_HINT = "(exclude with !term)"


@dataclass(frozen=True)
class Viewport:
    """
    Terminal dimensions in character cells.

    Attributes:
        width: Columns available
        height: Rows available
    """

    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class RenderOptions:
    """
    Knobs for the match area.

    Attributes:
        reserved_rows: Rows subtracted from the viewport height to get the
            match budget
        pad_short_frames: Pad the top with blank rows until the match
            area is height - FIXED_ROWS rows tall
    """

    reserved_rows: int = 3
    pad_short_frames: bool = True

    def __post_init__(self) -> None:
        # Fewer reserved rows would let matches push the input and status
        # rows past the bottom of the viewport.
        if self.reserved_rows < FIXED_ROWS:
            raise ValueError(
                f"reserved_rows must be at least {FIXED_ROWS}, got {self.reserved_rows}"
            )


@dataclass
class Frame:
    """
    Result of one render pass.

    Attributes:
        query: Query parsed from the filter text
        matches: Matching lines shown, oldest first, already truncated
        rows: Every row of the frame including padding, input and status
        total_lines: Store length observed by the scan
    """

    query: Query
    matches: list[str] = field(default_factory=list)
    rows: list[str] = field(default_factory=list)
    total_lines: int = 0

    @property
    def text(self) -> str:
        """Return the frame as a newline-joined block."""
        return "\n".join(self.rows)


def truncate(line: str, width: int) -> str:
    """
    Cut a line to fit a viewport width.

    Keeps at most width - 1 characters (one column stays free), then
    strips a single trailing newline. Widths below 1 yield "".

    Args:
        line: Line to shorten
        width: Viewport width

    Returns:
        Truncated line
    """
    limit = max(width - 1, 0)
    return line[:limit].removesuffix("\n")


def format_status(query: Query, total_lines: int) -> str:
    """
    Build the status row.

    Args:
        query: Active query
        total_lines: Lines ever received, not the filtered count

    Returns:
        Status text
    """
    return (
        f"Including: [{', '.join(query.positive_terms)}], "
        f"Excluding: [{', '.join(query.negative_terms)}], "
        f"Total Lines: {total_lines} {STATUS_HINT}"
    )


def select_window(
    store: LineStore,
    query: Query,
    limit: int,
    width: int,
) -> tuple[list[str], int]:
    """
    Collect the newest matching lines under the store lock.

    Args:
        store: Line store to scan
        query: Filter to apply
        limit: Maximum number of matches to collect
        width: Viewport width used for truncation

    Returns:
        Tuple of (matches newest first, store length at scan time)
    """
    found: list[str] = []
    with store.snapshot() as view:
        total = len(view)
        if limit > 0:
            for line in reversed(view):
                if not matches(line, query):
                    continue
                found.append(truncate(line, width))
                if len(found) >= limit:
                    break
    return found, total


def render_frame(
    store: LineStore,
    filter_text: str,
    viewport: Viewport,
    input_row: str = "",
    options: RenderOptions | None = None,
) -> Frame:
    """
    Run one render pass.

    Args:
        store: Line store to scan
        filter_text: Current contents of the filter input
        viewport: Current terminal dimensions
        input_row: Rendered filter input, shown below the matches
        options: Reserve and padding knobs (defaults if None)

    Returns:
        Frame holding the selected matches and all display rows
    """
    if options is None:
        options = RenderOptions()

    query = parse_query(filter_text)
    limit = viewport.height - options.reserved_rows
    found, total = select_window(store, query, limit, viewport.width)

    rows = list(found)
    if options.pad_short_frames:
        target = viewport.height - FIXED_ROWS
        while len(rows) < target:
            rows.append("")
    rows.reverse()
    found.reverse()

    rows.append(input_row)
    rows.append(format_status(query, total))

    return Frame(query=query, matches=found, rows=rows, total_lines=total)
