"""Expiring cache of query results in which one caller computes each result.

Concurrent requests for the same key share a QueryItem. The first caller
becomes the leader and computes the result. The others wait until the leader
stores the result or gives up.
"""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

QUERY_IS_PENDING = 1
DATA_IS_AVAILABLE = 2

_MISSING = object()


class QueryItem:
    """A slot for one query result, computed by a single leader."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: Any = _MISSING
        self.flags = 0
        self._finished = threading.Event()

    def fetch_or_lock(self) -> tuple[Any, bool]:
        """Return (data, True) when a result is ready.

        When nobody is computing the result yet, return (None, False). The
        caller is then the leader and must call store_and_unlock or
        store_abort. Otherwise wait for the leader to finish and return
        (data, True). The data is None if the leader aborted.
        """
        with self._lock:
            if self._data is not _MISSING:
                return self._data, True
            if self.flags == 0:
                self.flags = QUERY_IS_PENDING
                return None, False
            finished = self._finished
        finished.wait()
        with self._lock:
            return (None if self._data is _MISSING else self._data), True

    def store_abort(self) -> None:
        """Release waiters without a result and let the next caller lead."""
        with self._lock:
            old = self._finished
            self._finished = threading.Event()
            self.flags = 0
        old.set()

    def store_and_unlock(self, data: Any) -> None:
        """Store the result and release all waiters."""
        with self._lock:
            self._data = data
            self.flags = DATA_IS_AVAILABLE
            finished = self._finished
        finished.set()


@dataclass
class _Entry:
    item: QueryItem
    size: int
    valid_until: float


class QueryCache:
    """Query items keyed by string, each valid for a given number of seconds.

    When the total size of the entries exceeds max_size, random entries are
    evicted until it fits. A max_size of zero means no limit.
    """

    def __init__(
        self, max_size: int = 0, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self._total_size = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def total_size(self) -> int:
        """Sum of the sizes of the entries held."""
        with self._lock:
            return self._total_size

    def get_query_item(self, key: str, size: int, expire: int) -> QueryItem:
        """Return the live item for key, or store and return a fresh one."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is not None and not entry.valid_until < now:
                return entry.item
            item = QueryItem()
            self._set(key, item, size, now + expire)
            return item

    def _set(self, key: str, item: QueryItem, size: int, valid_until: float) -> None:
        old = self._entries.get(key)
        if old is not None:
            self._total_size -= old.size
        self._total_size += size
        self._entries[key] = _Entry(item, size, valid_until)
        while self.max_size > 0 and self._total_size > self.max_size and self._entries:
            victim = random.choice(list(self._entries))
            self._total_size -= self._entries.pop(victim).size

    def clean(self) -> int:
        """Remove expired entries and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.valid_until < now]
            for key in expired:
                self._total_size -= self._entries.pop(key).size
            return len(expired)

    def run_cleaner(self, interval: float, exit_event: threading.Event) -> None:
        """Call clean every interval seconds until exit_event is set."""
        while not exit_event.wait(interval):
            self.clean()


def _default_item() -> Optional[QueryItem]:
    return None