"""
In-memory commit detail cache.

A bounded least-recently-used map shared by the author resolver, the diff
service and the metrics pass, so a commit referenced by both the commit log
and the metrics report costs one git call.

Key namespaces:
    message:{hash}  (subject, body) tuple
    details:{hash}  `git show --stat` text
    diff:{ref}      unified diff text
"""

import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from .logging_config import get_logger

logger = get_logger(__name__)

_MISSING = object()


def message_key(commit_hash: str) -> str:
    return f"message:{commit_hash}"


def details_key(commit_hash: str) -> str:
    return f"details:{commit_hash}"


def diff_key(ref: str, other: Optional[str] = None) -> str:
    return f"diff:{ref}..{other}" if other else f"diff:{ref}"


class LRUCache:
    """
    Thread-safe LRU cache with a fixed capacity.

    Features:
    - ``get`` promotes the entry to most-recently-used
    - ``set`` on a new key evicts exactly one least-recently-used entry when full
    - ``get_or_compute`` runs the factory at most once per key at a time
    - Process lifetime only, nothing is persisted
    """

    def __init__(self, max_size: int = 1000):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries (at least 1)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: Dict[str, threading.Lock] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a cached value and mark it most recently used.

        Returns:
            The cached value, or ``default`` when the key is absent
        """
        with self._lock:
            if key not in self._entries:
                self._misses += 1
                return default
            self._entries.move_to_end(key)
            self._hits += 1
            return self._entries[key]

    def set(self, key: str, value: Any) -> None:
        """Insert or update a value, evicting the LRU entry if at capacity."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self._entries[key] = value
                return
            if len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted {evicted}")
            self._entries[key] = value

    def get_or_compute(self, key: str, factory: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key``, computing and storing it on a miss.

        Concurrent callers for the same key wait for the first computation
        instead of issuing a duplicate git call. Exceptions from ``factory``
        propagate and leave the key absent.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        try:
            with key_lock:
                # Another thread may have filled it while we waited
                with self._lock:
                    if key in self._entries:
                        self._entries.move_to_end(key)
                        return self._entries[key]
                value = factory()
                self.set(key, value)
                return value
        finally:
            with self._lock:
                if self._key_locks.get(key) is key_lock and not key_lock.locked():
                    del self._key_locks[key]

    def __contains__(self, key: str) -> bool:
        # Membership test does not promote
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop every entry and reset statistics."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with size, max_size, hits, misses and evictions
        """
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

