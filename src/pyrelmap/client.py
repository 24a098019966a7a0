"""High-level async client for resolving entity locations."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyrelmap._transport import HttpTransport
from pyrelmap.adapter import HttpRelationStore, RelationStore
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import OriginUnresolvedError, RelMapError, ResolutionCancelledError
from pyrelmap.models.detail import EntityDetail
from pyrelmap.models.entity import EntityRef
from pyrelmap.models.relations import Neighbors
from pyrelmap.models.resolution import LocationMarker, ResolutionResult
from pyrelmap.resolution.pipeline import resolve_locations
from pyrelmap.state.store import ResolutionStore

_logger = logging.getLogger(__name__)


class RelMapClient:
    """Async client for the entity store and the location resolution core.

    Usage::

        async with RelMapClient(config) as client:
            result = await client.resolve(EntityRef.parse("person:4"))
            if result is not None:
                draw(result.markers, result.bounds, result.connectors)

    Only the latest run may commit: starting a new resolution (or calling
    :meth:`cancel`) discards whatever an older, still in-flight run
    produces.
    """

    def __init__(
        self,
        config: RelMapConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        relation_store: RelationStore | None = None,
    ) -> None:
        self._config = config if config is not None else RelMapConfig()
        self._external_session = session is not None
        self._http_session = session
        self._relation_store = relation_store
        self._external_store = relation_store is not None
        self.store = ResolutionStore()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RelMapClient:
        if not self._external_store:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._config, self._http_session)
            self._relation_store = HttpRelationStore(self._config, transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.store.cancel()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_store:
            self._relation_store = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_store(self) -> RelationStore:
        if self._relation_store is None:
            raise RelMapError("Client not initialized. Use 'async with RelMapClient(...) as client:'")
        return self._relation_store

    @property
    def config(self) -> RelMapConfig:
        return self._config

    # ------------------------------------------------------------------
    # Store reads
    # ------------------------------------------------------------------

    async def get_entity(self, ref: EntityRef) -> EntityDetail:
        """Fetch the detail payload of *ref*."""
        return await self._require_store().fetch_entity(ref)

    async def get_neighbors(self, ref: EntityRef) -> Neighbors:
        """Fetch the entities one hop away from *ref*."""
        return await self._require_store().fetch_neighbors(ref)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, origin: EntityRef, max_depth: int | None = None) -> ResolutionResult | None:
        """Resolve the locations around *origin* and commit the result.

        Any run still in flight is superseded.  Returns the committed
        result, or ``None`` when this run was itself superseded or
        cancelled before finishing.

        Raises
        ------
        OriginUnresolvedError
            If the origin cannot be fetched; the committed state is
            cleared so the UI shows its empty/retry state.
        """
        relation_store = self._require_store()
        depth = self._config.max_depth if max_depth is None else max_depth
        token = self.store.begin()

        try:
            result = await resolve_locations(
                relation_store,
                origin,
                depth,
                fan_out=self._config.fan_out,
                allowed_pairs=self._config.highlight_pairs,
                token=token,
            )
        except ResolutionCancelledError:
            _logger.debug("Resolution of %s superseded", origin.key)
            return None
        except OriginUnresolvedError as exc:
            if not self.store.fail(token, exc):
                return None
            raise

        if not self.store.commit(token, result):
            return None
        return result

    def cancel(self) -> None:
        """Abort the in-flight resolution; its result will never be committed."""
        self.store.cancel()

    # ------------------------------------------------------------------
    # UI event contract
    # ------------------------------------------------------------------

    @staticmethod
    def on_marker_click(marker: LocationMarker) -> EntityRef:
        """Map a clicked marker to the entity to restart resolution from."""
        return marker.owner

    async def resolve_from_marker(
        self,
        marker: LocationMarker,
        max_depth: int | None = None,
    ) -> ResolutionResult | None:
        """Restart resolution from the owner of a clicked marker."""
        return await self.resolve(self.on_marker_click(marker), max_depth)
