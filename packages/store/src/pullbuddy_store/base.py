"""Abstract cache store interface.

The data accessor depends on BaseStore, not on a concrete backend, so the
in-memory TTL store and the no-op store are swappable without touching the
accessor. Values are whatever the accessor fetched (lists of dicts); stores
never copy or inspect them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseStore(ABC):
    """Key/value cache living for the lifetime of the process.

    Nothing here is persisted: entries disappear on expiry or process exit.
    A miss is always reported as None, so callers must not cache None itself.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value for key, or None if absent or stale."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of entries currently held."""
