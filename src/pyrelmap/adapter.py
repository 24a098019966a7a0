"""Relation store adapter.

The resolution core talks to the entity store only through
:class:`RelationStore`.  :class:`HttpRelationStore` is the production
implementation over the REST endpoints; tests drive the core with
in-memory stores.
"""

from __future__ import annotations

from typing import Protocol

from pyrelmap._api.entities import fetch_entity
from pyrelmap._api.relations import fetch_neighbors
from pyrelmap._transport import Transport
from pyrelmap.config import RelMapConfig
from pyrelmap.models.detail import EntityDetail
from pyrelmap.models.entity import EntityRef
from pyrelmap.models.relations import Neighbors


class RelationStore(Protocol):
    """Read-only view of the entity store.

    Implementations raise :class:`~pyrelmap.exceptions.EntityNotFoundError`
    for unknown refs and :class:`~pyrelmap.exceptions.RelMapTransportError`
    for I/O failures.
    """

    async def fetch_entity(self, ref: EntityRef) -> EntityDetail:
        ...

    async def fetch_neighbors(self, ref: EntityRef) -> Neighbors:
        ...


class HttpRelationStore:
    """:class:`RelationStore` backed by ``GET /entities`` and ``GET /relations``."""

    def __init__(self, config: RelMapConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def fetch_entity(self, ref: EntityRef) -> EntityDetail:
        return await fetch_entity(self._config, self._transport, ref)

    async def fetch_neighbors(self, ref: EntityRef) -> Neighbors:
        return await fetch_neighbors(self._config, self._transport, ref)
