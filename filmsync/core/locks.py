# filmsync/core/locks.py
import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator


class KeyedLock:
    """
    In-process mutual exclusion per key.

    Entries are reference counted and dropped once nobody holds or waits
    for them, so the map only ever contains keys currently in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, list] = {}  # key -> [Lock, users]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


@lru_cache
def get_backfill_locks() -> KeyedLock:
    """Process-wide lock registry guarding movie backfills."""
    return KeyedLock()
