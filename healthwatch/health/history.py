"""In-memory history of check results, bounded per endpoint."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from .models import CheckResult

DEFAULT_HISTORY_LIMIT = 100


class HistoryStore:
    """Per-endpoint ring buffers of CheckResults, oldest first.

    The set of endpoint names is fixed at construction. Appending to an
    unknown name is ignored and reading one yields an empty list. Each
    endpoint has its own lock, so writers on different endpoints never
    contend.
    """

    def __init__(self, endpoint_names: Iterable[str], max_entries: int = DEFAULT_HISTORY_LIMIT) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self._history: dict[str, deque[CheckResult]] = {}
        self._locks: dict[str, threading.Lock] = {}
        for name in endpoint_names:
            self._history[name] = deque(maxlen=max_entries)
            self._locks[name] = threading.Lock()

    def __contains__(self, endpoint_name: object) -> bool:
        return endpoint_name in self._history

    def append(self, endpoint_name: str, result: CheckResult) -> None:
        """Record a result; the oldest entry is evicted once the ring is full."""
        lock = self._locks.get(endpoint_name)
        if lock is None:
            return
        with lock:
            self._history[endpoint_name].append(result)

    def get(self, endpoint_name: str, limit: int) -> list[CheckResult]:
        """Most recent ``limit`` results, oldest to newest.

        ``limit <= 0`` or a limit above the stored size returns everything.
        """
        lock = self._locks.get(endpoint_name)
        if lock is None:
            return []
        with lock:
            entries = list(self._history[endpoint_name])
        if 0 < limit < len(entries):
            return entries[-limit:]
        return entries

    def all(self, endpoint_name: str) -> list[CheckResult]:
        return self.get(endpoint_name, 0)

    def size(self, endpoint_name: str) -> int:
        lock = self._locks.get(endpoint_name)
        if lock is None:
            return 0
        with lock:
            return len(self._history[endpoint_name])
