"""One-hop relations endpoint.

Endpoint:
  - GET /relations/{kind}/{id}
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pyrelmap._api._common import build_endpoint, unwrap_object
from pyrelmap._transport import Transport
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import EntityNotFoundError, RelMapApiError
from pyrelmap.models.entity import EntityRef
from pyrelmap.models.relations import Neighbors

_logger = logging.getLogger(__name__)


async def fetch_neighbors(
    config: RelMapConfig,
    transport: Transport,
    ref: EntityRef,
) -> Neighbors:
    """Fetch the entities directly related to *ref*, one hop only."""
    endpoint = build_endpoint(config.relations_path, ref)
    body = await transport.get_json(endpoint)
    # An entity without relations may come back as an empty object.
    if body is None or body == {}:
        return Neighbors()
    try:
        payload = unwrap_object(endpoint, body)
    except EntityNotFoundError:
        return Neighbors()

    try:
        neighbors = Neighbors.model_validate(payload)
    except ValidationError as exc:
        raise RelMapApiError(f"{endpoint} payload is invalid: {exc}", endpoint=endpoint) from exc

    if neighbors.is_empty:
        _logger.debug("%s has no relations", ref.key)
        return neighbors

    _logger.debug(
        "Relations of %s: persons=%d vehicles=%d properties=%d locations=%d",
        ref.key,
        len(neighbors.persons),
        len(neighbors.vehicles),
        len(neighbors.properties),
        len(neighbors.locations),
    )
    return neighbors
