"""Canonical JSON text for tree values.

Used wherever two values must be compared or hashed independently of key
order: matching unkeyed leftovers inside identity-keyed arrays, the report
writer, and the fingerprint callers use to memoize classifications.
"""

from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Mapping, Sequence
from typing import Any


def _canonical_float(value: float) -> float | str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return int(value)
    return round(value, 12)


def canonical_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): canonical_value(value[key]) for key in sorted(value.keys(), key=str)}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [canonical_value(item) for item in value]
    if isinstance(value, bool) or value is None or isinstance(value, (str, int)):
        return value
    if isinstance(value, float):
        return _canonical_float(value)
    return str(value)


def canonical_dumps(value: Any, *, indent: int | None = None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        canonical_value(value),
        sort_keys=True,
        separators=separators,
        ensure_ascii=True,
        indent=indent,
    )


def value_token(value: Any) -> str:
    """Hashable stand-in for a tree value; equal tokens mean equal JSON values."""
    return canonical_dumps(value)


def fingerprint(value: Any) -> str:
    return hashlib.sha256(canonical_dumps(value).encode("utf-8")).hexdigest()


__all__ = [
    "canonical_dumps",
    "canonical_value",
    "fingerprint",
    "value_token",
]
