from __future__ import annotations

import json
from datetime import datetime
from typing import Any


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: Any, indent: int | None = None) -> str:
    """json.dumps that renders datetimes as ISO-8601 strings."""
    return json.dumps(data, default=_default, indent=indent, ensure_ascii=False)
