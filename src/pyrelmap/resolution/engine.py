"""Breadth-first walker over the entity graph.

The walk is layered: every ref in the current frontier is expanded
concurrently, and the next layer only starts once the whole frontier has
resolved, so each node's depth is its true hop distance from the origin.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from pyrelmap._constants import DEFAULT_FAN_OUT, DEFAULT_MAX_DEPTH
from pyrelmap.adapter import RelationStore
from pyrelmap.exceptions import OriginUnresolvedError, RelMapError
from pyrelmap.models.detail import EntityDetail
from pyrelmap.models.entity import EntityRef, RelationEdge
from pyrelmap.models.relations import Neighbors
from pyrelmap.models.resolution import VisitedRecord

if TYPE_CHECKING:
    from pyrelmap.state.store import RunToken

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(slots=True)
class Traversal:
    """Mutable bookkeeping of one walk.

    ``records`` is keyed by ref identity and ordered by discovery;
    ``neighbors`` caches every one-hop list fetched during the run so the
    extractor never asks the store twice for the same node.
    """

    origin: EntityRef
    max_depth: int
    records: dict[EntityRef, VisitedRecord] = dataclasses.field(default_factory=dict)
    neighbors: dict[EntityRef, Neighbors] = dataclasses.field(default_factory=dict)
    _edges: dict[RelationEdge, None] = dataclasses.field(default_factory=dict)

    @property
    def visited(self) -> tuple[VisitedRecord, ...]:
        return tuple(self.records.values())

    @property
    def edges(self) -> tuple[RelationEdge, ...]:
        return tuple(self._edges)

    def record_neighbors(self, ref: EntityRef, neighbors: Neighbors) -> list[EntityRef]:
        """Cache *neighbors* of *ref*, register their edges and return the refs."""
        self.neighbors[ref] = neighbors
        refs = list(neighbors.refs(exclude=ref))
        for neighbor in refs:
            self._edges.setdefault(RelationEdge(ref, neighbor), None)
        return refs


class TraversalEngine:
    """Walks the graph around an origin through a :class:`RelationStore`.

    Parameters
    ----------
    store : RelationStore
        Source of entity details and one-hop relations.
    fan_out : int
        Maximum number of store requests in flight at once.
    token : RunToken or None
        Run token checked between layers; a stale token aborts the walk
        with :class:`~pyrelmap.exceptions.ResolutionCancelledError`.
    """

    def __init__(
        self,
        store: RelationStore,
        *,
        fan_out: int = DEFAULT_FAN_OUT,
        token: RunToken | None = None,
    ) -> None:
        if fan_out < 1:
            raise ValueError(f"fan_out must be >= 1, got {fan_out}")
        self._store = store
        self._limiter = asyncio.Semaphore(fan_out)
        self._token = token

    # ------------------------------------------------------------------
    # Store access (bounded, failure-tolerant)
    # ------------------------------------------------------------------

    async def _limited(self, fn: Callable[[EntityRef], Awaitable[T]], ref: EntityRef) -> T:
        async with self._limiter:
            return await fn(ref)

    async def _neighbors_or_error(self, ref: EntityRef) -> Neighbors | RelMapError:
        try:
            return await self._limited(self._store.fetch_neighbors, ref)
        except RelMapError as exc:
            return exc

    async def entity_or_none(self, ref: EntityRef) -> EntityDetail | None:
        """Fetch the detail of *ref*; failures are logged and yield ``None``."""
        try:
            return await self._limited(self._store.fetch_entity, ref)
        except RelMapError as exc:
            _logger.warning("Could not fetch %s: %s", ref.key, exc)
            return None

    async def neighbors_or_none(self, ref: EntityRef) -> Neighbors | None:
        """Fetch one-hop relations of *ref*; failures are logged and yield ``None``."""
        result = await self._neighbors_or_error(ref)
        if isinstance(result, RelMapError):
            _logger.warning("Could not fetch relations of %s: %s", ref.key, result)
            return None
        return result

    def check(self) -> None:
        """Abort if this run has been superseded."""
        if self._token is not None:
            self._token.ensure_current()

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    async def resolve(self, origin: EntityRef, max_depth: int = DEFAULT_MAX_DEPTH) -> Traversal:
        """Walk breadth-first from *origin* up to *max_depth* hops.

        Returns
        -------
        Traversal
            Visited records in discovery order (one per ref), the edges
            seen and the neighbor lists fetched.

        Raises
        ------
        OriginUnresolvedError
            If the origin's detail or relations cannot be fetched.
        ResolutionCancelledError
            If the run token went stale mid-walk.
        ValueError
            If *max_depth* is negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        self.check()
        try:
            origin_entity = await self._limited(self._store.fetch_entity, origin)
        except RelMapError as exc:
            raise OriginUnresolvedError(origin) from exc
        self.check()

        traversal = Traversal(origin=origin, max_depth=max_depth)
        traversal.records[origin] = VisitedRecord(ref=origin, depth=0, chain=(origin,), entity=origin_entity)

        frontier: list[EntityRef] = [origin]
        depth = 0
        while frontier and depth < max_depth:
            results = await asyncio.gather(*(self._neighbors_or_error(ref) for ref in frontier))
            self.check()

            # Parents are visited in frontier order so the first-discovered
            # chain of each node is deterministic.
            chains: dict[EntityRef, tuple[EntityRef, ...]] = {}
            for parent_ref, result in zip(frontier, results, strict=True):
                if isinstance(result, RelMapError):
                    if parent_ref == origin:
                        raise OriginUnresolvedError(origin) from result
                    _logger.warning("Could not fetch relations of %s: %s", parent_ref.key, result)
                    continue
                parent = traversal.records[parent_ref]
                for neighbor in traversal.record_neighbors(parent_ref, result):
                    if neighbor in traversal.records or neighbor in chains:
                        continue
                    chains[neighbor] = (*parent.chain, neighbor)

            layer = list(chains)
            details = await asyncio.gather(*(self.entity_or_none(ref) for ref in layer))
            self.check()

            depth += 1
            frontier = []
            for ref, detail in zip(layer, details, strict=True):
                traversal.records[ref] = VisitedRecord(ref=ref, depth=depth, chain=chains[ref], entity=detail)
                if detail is None:
                    _logger.debug("Not expanding unresolved %s", ref.key)
                    continue
                frontier.append(ref)

            _logger.debug("Layer %d of %s: %d new nodes", depth, origin.key, len(layer))

        return traversal
