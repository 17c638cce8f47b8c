"""In-memory accumulator for log lines not yet flushed to the store."""

import threading
from typing import List


class LineBuffer:
    """Thread-safe buffer of formatted log lines.

    Lines are kept as a list and only joined on ``drain()``, so recording stays
    O(1) amortized no matter how much has accumulated.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._size = 0
        self._lock = threading.Lock()

    def record(self, line: str) -> None:
        """Append one formatted line (including its trailing newline)."""
        with self._lock:
            self._lines.append(line)
            self._size += len(line)

    def drain(self) -> str:
        """Return everything recorded since the last drain and reset.

        Returns:
            The accumulated text, or an empty string if nothing was recorded.
        """
        with self._lock:
            lines, self._lines = self._lines, []
            self._size = 0
        return "".join(lines)

    def __len__(self) -> int:
        with self._lock:
            return self._size
