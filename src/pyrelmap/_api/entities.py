"""Entity detail endpoint.

Endpoint:
  - GET /entities/{kind}/{id}
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyrelmap._api._common import build_endpoint, unwrap_object
from pyrelmap._transport import Transport
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import RelMapApiError
from pyrelmap.models.detail import EntityDetail, parse_entity_detail
from pyrelmap.models.entity import EntityKind, EntityRef

_logger = logging.getLogger(__name__)


def _declared_kind(payload: dict[str, Any]) -> EntityKind | None:
    value = payload.get("kind")
    if value is None:
        return None
    try:
        return EntityKind.parse(value)
    except ValueError:
        return None


async def fetch_entity(
    config: RelMapConfig,
    transport: Transport,
    ref: EntityRef,
) -> EntityDetail:
    """Fetch and validate the detail payload of *ref*.

    Raises
    ------
    EntityNotFoundError
        If the store has no such entity.
    RelMapApiError
        If the payload does not validate or names a different entity.
    RelMapTransportError
        On HTTP-level failures.
    """
    endpoint = build_endpoint(config.entities_path, ref)
    payload = unwrap_object(endpoint, await transport.get_json(endpoint))

    # The store echoes its own type name in some payloads (``tipo`` is
    # reused for the vehicle/property subtype), so only ``kind`` is checked.
    declared = _declared_kind(payload)
    if declared is not None and declared != ref.kind:
        raise RelMapApiError(
            f"{endpoint} returned a {declared!r} payload for {ref.key}",
            endpoint=endpoint,
        )

    try:
        detail = parse_entity_detail(ref.kind, payload)
    except ValidationError as exc:
        raise RelMapApiError(f"{endpoint} payload is invalid: {exc}", endpoint=endpoint) from exc

    if detail.id != ref.id:
        raise RelMapApiError(
            f"{endpoint} returned entity id {detail.id} for {ref.key}",
            endpoint=endpoint,
        )
    _logger.debug("Fetched %s (%s)", ref.key, type(detail).__name__)
    return detail
