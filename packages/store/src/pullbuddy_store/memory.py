"""TTLStore: in-process cache with per-entry expiry.

Entries live in a plain dict and are evicted lazily by the read that finds
them stale. There is no size bound. All access happens on the event loop
thread.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from pullbuddy_store.base import BaseStore
from pullbuddy_store.models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class TTLStore(BaseStore):
    """Key/value store whose entries expire ``ttl`` seconds after being set.

    ``clock`` defaults to time.monotonic so wall-clock adjustments never
    resurrect or prematurely expire entries. Tests pass a fake clock.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        if ttl < 0:
            raise ValueError(f"ttl must be non-negative, got {ttl!r}")
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.stored_at > self._ttl:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None

        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
