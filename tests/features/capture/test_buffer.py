"""
Tests for the in-memory line buffer.
"""

import threading

from rageshake.features.capture import LineBuffer


class TestLineBuffer:
    """Test cases for LineBuffer."""

    def test_drain_empty(self):
        """Test draining a buffer that never recorded anything."""
        buffer = LineBuffer()
        assert buffer.drain() == ""
        assert len(buffer) == 0

    def test_drain_returns_lines_in_order(self):
        """Test that drain concatenates lines in call order."""
        buffer = LineBuffer()
        buffer.record("first\n")
        buffer.record("second\n")
        buffer.record("third\n")

        assert len(buffer) == len("first\nsecond\nthird\n")
        assert buffer.drain() == "first\nsecond\nthird\n"

    def test_second_drain_is_empty(self):
        """Test that lines are never returned twice."""
        buffer = LineBuffer()
        buffer.record("only once\n")

        assert buffer.drain() == "only once\n"
        assert buffer.drain() == ""

        buffer.record("later\n")
        assert buffer.drain() == "later\n"

    def test_concurrent_records_keep_whole_lines(self):
        """Test that concurrent writers never interleave inside a line."""
        buffer = LineBuffer()

        def writer(name: str) -> None:
            for i in range(500):
                buffer.record(f"{name}-{i}\n")

        threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        lines = buffer.drain().splitlines()
        assert len(lines) == 2000
        assert set(lines) == {f"t{n}-{i}" for n in range(4) for i in range(500)}
        # Per-writer order is preserved
        t0 = [line for line in lines if line.startswith("t0-")]
        assert t0 == [f"t0-{i}" for i in range(500)]
