"""Cache entry model.

Decoupled from pullbuddy_core so the store layer has no knowledge of
GitHub record shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """A cached value and the clock reading at which it was stored."""

    value: Any
    stored_at: float  # seconds on the store's clock, not wall time
