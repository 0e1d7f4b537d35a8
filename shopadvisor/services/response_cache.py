"""Response cache - avoids repeated Gemini calls for the same query."""

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from shopadvisor.schemas.recommendations import RecommendationResponse

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60
DEFAULT_MAX_ENTRIES = 20


def normalize_query(query: str) -> str:
    """Cache key for a raw query: surrounding whitespace trimmed, lower-cased."""
    return (query or "").strip().lower()


class ResponseCache:
    """
    Bounded, time-expiring map from normalized query to response.

    Eviction is by insertion order, not recency: reads never move an
    entry. Expiry is checked lazily on read and when counting. Only
    remote-derived responses belong here; callers must not cache
    fallback output.

    Responses are deep-copied on the way in and out, so callers may
    edit what they get back without touching the stored entry.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: "OrderedDict[str, Tuple[RecommendationResponse, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, query: str) -> Optional[RecommendationResponse]:
        key = normalize_query(query)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            response, created_at = entry
            if self._clock() - created_at > self._ttl:
                del self._store[key]
                logger.debug(f"ResponseCache: expired entry for '{key[:50]}'")
                return None
        logger.debug(f"ResponseCache: hit for '{key[:50]}'")
        return response.model_copy(deep=True)

    def put(self, query: str, response: RecommendationResponse) -> None:
        key = normalize_query(query)
        with self._lock:
            # Overwrite counts as a fresh insertion
            self._store.pop(key, None)
            self._store[key] = (response.model_copy(deep=True), self._clock())
            while len(self._store) > self._max_entries:
                evicted, _ = self._store.popitem(last=False)
                logger.debug(f"ResponseCache: evicted '{evicted[:50]}'")

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, query: object) -> bool:
        return isinstance(query, str) and self.get(query) is not None

    def __len__(self) -> int:
        """Number of unexpired entries; expired ones are dropped first."""
        with self._lock:
            now = self._clock()
            expired = [
                key for key, (_, created_at) in self._store.items()
                if now - created_at > self._ttl
            ]
            for key in expired:
                del self._store[key]
            return len(self._store)

    def keys(self) -> list:
        """Resident keys, oldest insertion first (expired ones included)."""
        with self._lock:
            return list(self._store.keys())
