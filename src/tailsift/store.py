"""
LineStore for holding every line received from the input stream.

This module implements the append-only log shared between the stream
reader thread (sole writer) and the render pass (sole reader). Compare
with a ring buffer: nothing is ever evicted, so line indices stay stable
for the lifetime of the process.

Locking:
- One threading.Lock serializes append() against every read traversal
- Reads only happen through snapshot(), which holds the lock for the
  whole traversal, so a reader can never see a half-appended line
- Backing slots are pre-allocated from a capacity hint so high line-rate
  input does not pay for repeated list growth
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class StoreView:
    """
    Read-only indexed view over the store, valid inside snapshot() only.

    Supports len(), integer indexing (negative indices count from the
    newest line) and reversed() iteration newest-first.
    """

    __slots__ = ("_slots", "_length")

    def __init__(self, slots: list[str | None], length: int) -> None:
        self._slots = slots
        self._length = length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int) -> str:
        if index < 0:
            index += self._length
        if index < 0 or index >= self._length:
            raise IndexError("store index out of range")
        return self._slots[index]

    def __iter__(self) -> Iterator[str]:
        for i in range(self._length):
            yield self._slots[i]

    def __reversed__(self) -> Iterator[str]:
        for i in range(self._length - 1, -1, -1):
            yield self._slots[i]


class LineStore:
    """
    Thread-safe, append-only, growable sequence of text lines.

    Example:
        store = LineStore(capacity_hint=1_000)
        store.append("first")
        with store.snapshot() as view:
            newest = view[-1]
    """

    def __init__(self, capacity_hint: int = 0) -> None:
        """
        Initialize an empty store.

        Args:
            capacity_hint: Number of slots to reserve up front. Appends
                beyond the hint still succeed; the list just grows.
        """
        self._lock = threading.Lock()
        self._slots: list[str | None] = [None] * max(capacity_hint, 0)
        self._length = 0

    def append(self, line: str) -> None:
        """
        Add a line at the end of the store.

        Args:
            line: Decoded line of text
        """
        with self._lock:
            if self._length < len(self._slots):
                self._slots[self._length] = line
            else:
                self._slots.append(line)
            self._length += 1

    @contextmanager
    def snapshot(self) -> Iterator[StoreView]:
        """
        Hold the store lock for a read traversal.

        The yielded view covers exactly the lines appended before the
        lock was taken. Appends made by the reader wait until the block
        exits; none are lost.

        Yields:
            StoreView over the current contents
        """
        with self._lock:
            yield StoreView(self._slots, self._length)

    @property
    def capacity(self) -> int:
        """Return the number of allocated slots."""
        with self._lock:
            return len(self._slots)

    def __len__(self) -> int:
        """Return number of lines stored."""
        with self._lock:
            return self._length
