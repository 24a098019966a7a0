"""Normalization helpers.

Centralizes defensive parsing of the store's loosely-typed JSON.
"""

from __future__ import annotations

import math
from typing import Any

# Sentinel strings the store uses for "not available".
SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in SENTINELS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text and text not in SENTINELS else None


def str_list(value: Any) -> list[str]:
    """Coerce a JSON value to a list of non-empty strings.

    The store keeps list columns (aliases, phones, domiciles) as JSON
    arrays, but older rows hold a single string or ``null``.
    """
    if value is None:
        return []
    if isinstance(value, str):
        text = safe_str(value)
        return [text] if text else []
    if isinstance(value, (list, tuple)):
        items: list[str] = []
        for item in value:
            text = safe_str(item)
            if text:
                items.append(text)
        return items
    return []


def valid_coordinates(lat: float | None, lon: float | None) -> bool:
    """Return True when *lat*/*lon* form a plottable WGS84 point."""
    if lat is None or lon is None:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
