"""
In-memory caches: a FIFO-bounded map for built locators and sessions, and an
LRU cache with TTL for decoded provider responses.
"""
import time
import threading
from collections import OrderedDict
from typing import Any, Dict, Iterator, Optional


class FIFOCache:
    """
    Bounded map that evicts the oldest inserted key when full.
    Reads never change eviction order.
    """

    def __init__(self, max_size: int = 100):
        self.max_size = max(1, max_size)
        self._store: "OrderedDict[str, Any]" = OrderedDict()
        self.cache_hits = 0
        self.cache_misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def get(self, key: str) -> Optional[Any]:
        if key not in self._store:
            self.cache_misses += 1
            return None
        self.cache_hits += 1
        return self._store[key]

    def set(self, key: str, value: Any) -> None:
        if key in self._store:
            self._store[key] = value
            return
        if len(self._store) >= self.max_size:
            self._store.popitem(last=False)
        self._store[key] = value

    def pop(self, key: str) -> Optional[Any]:
        return self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()
        self.cache_hits = 0
        self.cache_misses = 0

    def stats(self) -> Dict[str, int]:
        return {"size": len(self._store), "hits": self.cache_hits, "misses": self.cache_misses}


class LRUCache:
    def __init__(self, max_size: int = 5000, default_ttl: int = 600):
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._lock = threading.RLock()
        self._store: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()
        self.cache_hits = 0
        self.cache_misses = 0

    def _evict(self) -> None:
        while len(self._store) > self.max_size:
            self._store.popitem(last=False)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                self.cache_misses += 1
                return None
            expiry, value = item
            if expiry < time.time():
                del self._store[key]
                self.cache_misses += 1
                return None
            self._store.move_to_end(key)
            self.cache_hits += 1
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl or self.default_ttl
        with self._lock:
            self._store[key] = (time.time() + ttl, value)
            self._store.move_to_end(key)
            self._evict()

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.cache_hits = 0
            self.cache_misses = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"size": len(self._store), "hits": self.cache_hits, "misses": self.cache_misses}
