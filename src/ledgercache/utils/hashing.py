"""Hashing and canonical JSON helpers for keys and ETags."""

import hashlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def json_default(obj: Any) -> Any:
    """Encode values the json module does not know about.

    Dates become ISO strings and decimals become strings, so a row read
    fresh from the source of record and the same row read back from the
    cache encode to identical JSON.
    """
    if isinstance(obj, datetime | date):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(value: Any) -> str:
    """Serialize a value to compact JSON with sorted keys."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=json_default,
    )


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    if value is None:
        return "none"

    return hashlib.sha256(canonical_json(value).encode()).hexdigest()[:16]
