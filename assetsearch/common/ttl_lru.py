"""
TTL LRU cache for search results.

This module provides a thread-safe cache with least-recently-used eviction
and time-based expiration. The search service keys entries by the store
generation, so results never outlive the index state that produced them.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional, Tuple


class TTLRUCache:
    """Thread-safe TTL LRU cache implementation."""

    def __init__(self, maxsize: int = 1000, ttl_seconds: int = 300):
        """
        Initialize TTL LRU cache.

        Args:
            maxsize: Maximum number of items in cache
            ttl_seconds: Time-to-live in seconds; 0 disables expiry
        """
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self.cache: "OrderedDict[Hashable, Tuple[Any, float]]" = OrderedDict()
        self.lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def _expired(self, timestamp: float, now: float) -> bool:
        return self.ttl_seconds > 0 and now - timestamp > self.ttl_seconds

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get item from cache.

        Returns:
            Cached value if present and not expired, None otherwise
        """
        with self.lock:
            item = self.cache.get(key)
            if item is None:
                self.misses += 1
                return None

            value, timestamp = item
            if self._expired(timestamp, time.time()):
                del self.cache[key]
                self.misses += 1
                return None

            self.cache.move_to_end(key)
            self.hits += 1
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self.lock:
            if key in self.cache:
                del self.cache[key]
            self.cache[key] = (value, time.time())

            # Evict least recently used
            while len(self.cache) > self.maxsize:
                self.cache.popitem(last=False)

    def clear(self) -> None:
        """Clear all items from cache."""
        with self.lock:
            self.cache.clear()

    def size(self) -> int:
        with self.lock:
            return len(self.cache)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with size, limits, hit/miss counts and utilization
        """
        with self.lock:
            return {
                "size": len(self.cache),
                "maxsize": self.maxsize,
                "ttl_seconds": self.ttl_seconds,
                "hits": self.hits,
                "misses": self.misses,
                "utilization": (
                    len(self.cache) / self.maxsize if self.maxsize > 0 else 0.0
                ),
            }
