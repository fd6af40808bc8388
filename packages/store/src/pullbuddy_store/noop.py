"""No-op store, selected when cache_ttl is 0.

The accessor keeps its read-through path; every read simply misses.
"""

from __future__ import annotations

from typing import Any

from pullbuddy_store.base import BaseStore


class NoOpStore(BaseStore):
    """Never retains anything; every get() is a miss."""

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any) -> None:
        pass

    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return 0
