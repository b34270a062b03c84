"""
Bounded result cache keyed by a hash of the posting text.

Eviction is by insertion order: when full, the oldest inserted entry goes,
regardless of how recently it was read. Instances are independent, so tests
and hosts can create as many as they need.
"""

import threading
from collections import OrderedDict
from typing import Any, Optional

from skillfit.contexts.analysis.logger import log_cache_eviction
from skillfit.utils.text_processing import hash_text

DEFAULT_MAX_ENTRIES = 50


class ResultCache:
    """
    Thread-safe insertion-order cache.

    Attributes:
        max_entries: Capacity (at least 1)
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.max_entries = max(1, int(max_entries))
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(text: str) -> str:
        """SHA-256 hex digest of the (normalized) text."""
        return hash_text(text)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def put(self, key: str, value: Any) -> None:
        """Insert or replace; replacing keeps the original insertion position."""
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log_cache_eviction(evicted, self.max_entries)
            self._entries[key] = value

    def clear(self) -> int:
        """Drop every entry; returns how many were dropped."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
            }
