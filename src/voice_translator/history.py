"""Bounded newest-first record of completed exchanges."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from voice_translator.models import HistoryEntry

HISTORY_CAPACITY = 5


class HistoryBuffer:
    """Bounded in-memory history; inserting at capacity evicts the oldest entry."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._entries: deque[HistoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: HistoryEntry) -> None:
        self._entries.appendleft(entry)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))
