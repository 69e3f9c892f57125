"""Expiring memo for catalog lookups made by one provider instance."""

from __future__ import annotations

import time
from collections import OrderedDict
from threading import Lock
from typing import Callable, Hashable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

CacheKey = Tuple[Hashable, ...]


class CatalogCache:
    """LRU memo of lookup results keyed by ``(kind, *ids)``.

    Results are frozen into tuples on the way in and handed out as fresh
    lists, so callers may mutate what they get back. A loader that raises
    leaves nothing behind; the next fetch calls it again.
    """

    def __init__(self, maxsize: int = 256, ttl: float = 300.0,
                 clock: Callable[[], float] = time.monotonic) -> None:
        if maxsize <= 0 or ttl <= 0:
            raise ValueError("maxsize and ttl must be positive")
        self.maxsize = maxsize
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, Tuple[tuple, float]]" = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def fetch(self, key: CacheKey, loader: Callable[[], Iterable[T]]) -> List[T]:
        """Return the live entry for ``key`` or load, store and return it."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[1] > self._clock():
                self._entries.move_to_end(key)
                self.hits += 1
                return list(entry[0])
            self._entries.pop(key, None)
            self.misses += 1

        # loaded outside the lock; concurrent misses on one key both hit the provider
        items = tuple(loader())
        with self._lock:
            self._entries[key] = (items, self._clock() + self.ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
        return list(items)

    def invalidate(self, kind: Optional[str] = None) -> None:
        """Drop every entry, or only those whose key starts with ``kind``."""
        with self._lock:
            if kind is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if k[0] == kind]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheKey", "CatalogCache"]
