"""Caching utilities for domain check results."""

import logging
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple


logger = logging.getLogger(__name__)


class AvailabilityCache:
    """In-memory TTL cache keyed by normalized domain.

    Entries are evicted lazily: an expired entry is dropped the next time it
    is read, and counts as a miss.
    """

    def __init__(
        self,
        ttl_hours: float = 24,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl = timedelta(hours=ttl_hours)
        self._clock = clock
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, domain: str) -> Optional[Any]:
        """Get cached result if not expired."""
        entry = self._cache.get(domain)
        if entry is None:
            self.misses += 1
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._cache[domain]
            self.misses += 1
            return None

        self.hits += 1
        logger.debug("Cache hit for %s", domain)
        return value

    def set(self, domain: str, value: Any, ttl: Optional[timedelta] = None):
        """Cache a result, optionally with a TTL other than the default."""
        ttl = self.ttl if ttl is None else ttl
        self._cache[domain] = (value, self._clock() + ttl.total_seconds())

    def clear_expired(self) -> int:
        """Remove expired entries."""
        now = self._clock()
        expired = [d for d, (_, expires_at) in self._cache.items() if now >= expires_at]
        for domain in expired:
            del self._cache[domain]
        return len(expired)

    def clear(self):
        self._cache.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> Dict[str, int]:
        """Get cache statistics; expired entries are evicted first."""
        self.clear_expired()
        return {
            'entry_count': len(self._cache),
            'hits': self.hits,
            'misses': self.misses
        }
