"""Tests for the append-only LineStore."""

import threading

import pytest

from tailsift.store import LineStore


class TestLineStoreAppend:
    """Tests for append and length."""

    def test_new_store_is_empty(self):
        """A fresh store holds no lines."""
        store = LineStore(capacity_hint=10)
        assert len(store) == 0

    def test_append_preserves_arrival_order(self):
        """Index 0 is the first line ever appended."""
        store = LineStore()
        for line in ("first", "second", "third"):
            store.append(line)

        with store.snapshot() as view:
            assert len(view) == 3
            assert view[0] == "first"
            assert view[2] == "third"

    def test_capacity_hint_preallocates_slots(self):
        """Slots are reserved up front and reused by appends."""
        store = LineStore(capacity_hint=4)
        assert store.capacity == 4

        store.append("a")
        store.append("b")
        assert store.capacity == 4
        assert len(store) == 2

    def test_append_beyond_capacity_grows(self):
        """Appends past the hint still succeed."""
        store = LineStore(capacity_hint=2)
        for i in range(5):
            store.append(f"line {i}")

        assert len(store) == 5
        assert store.capacity >= 5
        with store.snapshot() as view:
            assert list(view) == [f"line {i}" for i in range(5)]

    def test_negative_capacity_hint_is_clamped(self):
        """A negative hint behaves like no reservation."""
        store = LineStore(capacity_hint=-5)
        store.append("x")
        assert len(store) == 1


class TestStoreView:
    """Tests for snapshot views."""

    def test_view_hides_reserved_slots(self):
        """Unused reserved slots are not visible through the view."""
        store = LineStore(capacity_hint=100)
        store.append("only")

        with store.snapshot() as view:
            assert len(view) == 1
            assert list(view) == ["only"]
            with pytest.raises(IndexError):
                view[1]

    def test_negative_index_counts_from_newest(self):
        """view[-1] is the most recently appended line."""
        store = LineStore()
        store.append("old")
        store.append("new")

        with store.snapshot() as view:
            assert view[-1] == "new"
            assert view[-2] == "old"
            with pytest.raises(IndexError):
                view[-3]

    def test_reversed_iterates_newest_first(self):
        """reversed(view) walks from the newest line back to index 0."""
        store = LineStore()
        for line in ("a", "b", "c"):
            store.append(line)

        with store.snapshot() as view:
            assert list(reversed(view)) == ["c", "b", "a"]

    def test_snapshot_blocks_appends_until_released(self):
        """An append waits for the snapshot to be released, then lands."""
        store = LineStore()
        store.append("before")
        appended = threading.Event()

        def writer():
            store.append("during")
            appended.set()

        with store.snapshot() as view:
            thread = threading.Thread(target=writer)
            thread.start()
            assert not appended.wait(timeout=0.1)
            assert len(view) == 1

        thread.join(timeout=2)
        assert appended.is_set()
        assert len(store) == 2


class TestConcurrentAppends:
    """Tests for appends racing with snapshots."""

    def test_snapshots_see_growing_complete_prefix(self):
        """Each snapshot sees a prefix that never shrinks and has no gaps."""
        store = LineStore(capacity_hint=16)
        total = 5000

        def writer():
            for i in range(total):
                store.append(f"line {i}")

        thread = threading.Thread(target=writer)
        thread.start()

        last = 0
        while thread.is_alive() or last < total:
            with store.snapshot() as view:
                length = len(view)
                assert length >= last
                if length:
                    assert view[length - 1] == f"line {length - 1}"
                last = length
            if last == total:
                break

        thread.join(timeout=5)
        assert len(store) == total
