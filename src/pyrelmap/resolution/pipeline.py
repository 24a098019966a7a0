"""End-to-end resolution: walk, extract, aggregate, highlight."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

from pyrelmap._constants import DEFAULT_FAN_OUT, DEFAULT_MAX_DEPTH
from pyrelmap.adapter import RelationStore
from pyrelmap.models.entity import EntityKind, EntityRef
from pyrelmap.models.resolution import ResolutionResult
from pyrelmap.resolution.aggregate import aggregate
from pyrelmap.resolution.engine import TraversalEngine
from pyrelmap.resolution.extract import LocationExtractor
from pyrelmap.resolution.highlight import highlight

if TYPE_CHECKING:
    from pyrelmap.state.store import RunToken

_logger = logging.getLogger(__name__)


async def resolve_locations(
    store: RelationStore,
    origin: EntityRef,
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    fan_out: int = DEFAULT_FAN_OUT,
    allowed_pairs: Collection[frozenset[EntityKind]] = frozenset(),
    token: RunToken | None = None,
) -> ResolutionResult:
    """Resolve every location reachable from *origin*.

    Holds no state between calls: the same origin and depth over an
    unchanged store always yield the same result.

    Raises
    ------
    OriginUnresolvedError
        If the origin cannot be fetched.
    ResolutionCancelledError
        If *token* went stale before the result was complete.
    """
    engine = TraversalEngine(store, fan_out=fan_out, token=token)
    traversal = await engine.resolve(origin, max_depth)
    raw_markers = await LocationExtractor(engine).extract(traversal)
    markers, bounds = aggregate(raw_markers)
    connectors = highlight(markers, traversal.edges, origin=origin, allowed_pairs=allowed_pairs)

    _logger.debug(
        "Resolved %s (depth %d): visited=%d markers=%d connectors=%d",
        origin.key,
        max_depth,
        len(traversal.records),
        len(markers),
        len(connectors),
    )
    return ResolutionResult(
        origin=origin,
        max_depth=max_depth,
        markers=tuple(markers),
        bounds=bounds,
        connectors=tuple(connectors),
        visited=traversal.visited,
        edges=traversal.edges,
    )
