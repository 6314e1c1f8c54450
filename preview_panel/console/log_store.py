"""
Log Store - Buffered console entries for the preview panel.

Responsibilities:
- Append entries in arrival order
- Evict the oldest entries once the capacity is reached
- Clear on request (user action or a console.clear() from the sandbox)
"""

from collections import deque
from typing import Any, Deque, Iterable, List, Optional

from preview_panel.schemas import LogEntry


class LogStore:
    """
    Rolling in-memory buffer of console entries.

    Insertion order is display order. Entries are never reordered; between
    clears the store only grows, apart from capacity eviction at the head.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be a positive integer or None")
        self._capacity = capacity
        self._buffer: Deque[LogEntry] = deque(maxlen=capacity)
        self._evicted = 0

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    @property
    def evicted(self) -> int:
        """Entries dropped from the head since the last clear."""
        return self._evicted

    def append(self, method: str, data: Iterable[Any] = ()) -> LogEntry:
        """Push a new entry to the end of the buffer."""
        entry = LogEntry(method=method, data=tuple(data))
        if self._capacity is not None and len(self._buffer) == self._capacity:
            self._evicted += 1
        self._buffer.append(entry)
        return entry

    def clear(self) -> None:
        self._buffer.clear()
        self._evicted = 0

    def snapshot(self) -> List[LogEntry]:
        """Return current entries in display order."""
        return list(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self):
        return iter(self.snapshot())
