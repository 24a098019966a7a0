"""Redaction of entity store payloads for debug logs.

Person payloads carry personal data (national ids, phone numbers, photos).
The masked keys are derived from :class:`PersonDetail`, so every spelling
the store uses for those columns (``identificacion``, ``telefonos``...) is
covered.  Coordinates are coarsened and long relation lists cut so a trace
of a large neighborhood stays readable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel

from pyrelmap._normalize import safe_float
from pyrelmap.models.detail import EntityDetailBase, PersonDetail

#: Decimal places kept for logged coordinates (roughly 1 km).
COORDINATE_DECIMALS = 2

_PERSONAL_FIELDS = ("identification", "phones", "photo")
_COORDINATE_FIELDS = ("lat", "lon")
_HTTP_SECRETS = frozenset({"authorization", "cookie", "password", "token"})


def _spellings(model: type[BaseModel], field_names: Iterable[str]) -> frozenset[str]:
    """Lower-cased field names of *model* plus every validation alias."""
    names: set[str] = set()
    for name in field_names:
        names.add(name.lower())
        alias = model.model_fields[name].validation_alias
        if isinstance(alias, AliasChoices):
            names.update(choice.lower() for choice in alias.choices if isinstance(choice, str))
        elif isinstance(alias, str):
            names.add(alias.lower())
    return frozenset(names)


_MASKED_KEYS = _spellings(PersonDetail, _PERSONAL_FIELDS) | _HTTP_SECRETS
_COORDINATE_KEYS = _spellings(EntityDetailBase, _COORDINATE_FIELDS)


def _mask(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return f"<redacted:{len(value)} items>"
    return "<redacted>"


def _coarsen(value: Any) -> Any:
    number = safe_float(value)
    if number is None:
        return value
    return round(number, COORDINATE_DECIMALS)


def redact_for_log(value: Any, *, max_string: int = 256, max_items: int = 20) -> Any:
    """Return a copy of a decoded store payload that is safe for DEBUG logs.

    Personal columns are masked, coordinates rounded to
    :data:`COORDINATE_DECIMALS`, strings longer than *max_string*
    truncated and lists longer than *max_items* cut, with a trailing
    marker giving the number of dropped entries.
    """
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            lowered = name.lower()
            if lowered in _MASKED_KEYS:
                redacted[name] = _mask(item)
            elif lowered in _COORDINATE_KEYS:
                redacted[name] = _coarsen(item)
            else:
                redacted[name] = redact_for_log(item, max_string=max_string, max_items=max_items)
        return redacted

    if isinstance(value, (list, tuple)):
        kept = [redact_for_log(item, max_string=max_string, max_items=max_items) for item in value[:max_items]]
        if len(value) > max_items:
            kept.append(f"<+{len(value) - max_items} more>")
        return kept

    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value
