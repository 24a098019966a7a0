"""Shared helpers for entity store endpoint modules.

It is internal to pyrelmap and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pyrelmap.exceptions import EntityNotFoundError, RelMapApiError
from pyrelmap.models.entity import EntityRef


def build_endpoint(prefix: str, ref: EntityRef) -> str:
    """``/entities`` + ``person:4`` -> ``/entities/person/4``."""
    return f"{prefix.rstrip('/')}/{ref.kind.value}/{ref.id}"


def unwrap_object(endpoint: str, body: Any) -> dict[str, Any]:
    """Return the JSON object behind an optional ``{"data": ...}`` envelope.

    An empty body (``null``, ``{}``) means the store has no such entity.
    """
    if body is None or body == {}:
        raise EntityNotFoundError(f"{endpoint} returned no entity", endpoint=endpoint)
    if not isinstance(body, dict):
        raise RelMapApiError(
            f"{endpoint} returned {type(body).__name__}, expected an object",
            endpoint=endpoint,
        )
    nested = body.get("data")
    if isinstance(nested, dict) and "id" not in body:
        if not nested:
            raise EntityNotFoundError(f"{endpoint} returned no entity", endpoint=endpoint)
        return nested
    return body
