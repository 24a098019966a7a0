"""Turn visited entities into location markers."""

from __future__ import annotations

import asyncio
import logging

from pyrelmap.models.detail import EntityDetail
from pyrelmap.models.entity import EntityKind, EntityRef
from pyrelmap.models.resolution import LocationMarker, RelationStatus, VisitedRecord
from pyrelmap.resolution.engine import Traversal, TraversalEngine

_logger = logging.getLogger(__name__)


class LocationExtractor:
    """Derives markers from a finished :class:`Traversal`.

    A record yields a marker for its own coordinates (always the case for
    locations, sometimes for geocoded properties), and every person,
    vehicle or property also yields one marker per location it owns, i.e.
    the locations in its one-hop relations.  Owners at the depth limit were
    never expanded by the walk, so their relations are fetched here: one
    hop deeper than the generic walk.
    """

    def __init__(self, engine: TraversalEngine) -> None:
        self._engine = engine

    async def extract(self, traversal: Traversal) -> list[LocationMarker]:
        """Return raw (not yet deduplicated) markers in discovery order."""
        owners = [
            record
            for record in traversal.visited
            if record.resolved and record.ref.kind is not EntityKind.LOCATION
        ]

        await self._fill_missing_neighbors(traversal, owners)
        owned_details = await self._fetch_owned_locations(traversal, owners)

        markers: list[LocationMarker] = []
        for record in traversal.visited:
            if not record.resolved:
                continue
            own = _own_marker(record)
            if own is not None:
                markers.append(own)
            if record.ref.kind is EntityKind.LOCATION:
                continue
            neighbors = traversal.neighbors.get(record.ref)
            if neighbors is None:
                continue
            for location_ref in neighbors.location_refs():
                detail = _known_detail(traversal, location_ref) or owned_details.get(location_ref)
                if detail is None:
                    continue
                marker = _owned_marker(record, location_ref, detail)
                if marker is not None:
                    markers.append(marker)

        _logger.debug("Extracted %d markers from %d visited nodes", len(markers), len(traversal.records))
        return markers

    async def _fill_missing_neighbors(self, traversal: Traversal, owners: list[VisitedRecord]) -> None:
        missing = [record.ref for record in owners if record.ref not in traversal.neighbors]
        if not missing:
            return
        results = await asyncio.gather(*(self._engine.neighbors_or_none(ref) for ref in missing))
        self._engine.check()
        for ref, neighbors in zip(missing, results, strict=True):
            if neighbors is not None:
                traversal.record_neighbors(ref, neighbors)

    async def _fetch_owned_locations(
        self,
        traversal: Traversal,
        owners: list[VisitedRecord],
    ) -> dict[EntityRef, EntityDetail]:
        wanted: dict[EntityRef, None] = {}
        for record in owners:
            neighbors = traversal.neighbors.get(record.ref)
            if neighbors is None:
                continue
            for location_ref in neighbors.location_refs():
                # Visited locations are already fetched (or already failed).
                if location_ref not in traversal.records:
                    wanted.setdefault(location_ref, None)
        if not wanted:
            return {}

        refs = list(wanted)
        details = await asyncio.gather(*(self._engine.entity_or_none(ref) for ref in refs))
        self._engine.check()
        return {ref: detail for ref, detail in zip(refs, details, strict=True) if detail is not None}


def _known_detail(traversal: Traversal, ref: EntityRef) -> EntityDetail | None:
    record = traversal.records.get(ref)
    return record.entity if record is not None else None


def _own_marker(record: VisitedRecord) -> LocationMarker | None:
    assert record.entity is not None  # noqa: S101
    coordinates = record.entity.coordinates
    if coordinates is None:
        return None
    lat, lon = coordinates
    return LocationMarker(
        ref=record.ref,
        lat=lat,
        lon=lon,
        label=record.entity.label,
        relation=RelationStatus.for_hops(record.depth),
        hops=record.depth,
        chains=(record.chain,),
        owner_ref=record.ref,
    )


def _owned_marker(owner: VisitedRecord, location_ref: EntityRef, detail: EntityDetail) -> LocationMarker | None:
    coordinates = detail.coordinates
    if coordinates is None:
        return None
    lat, lon = coordinates
    hops = owner.depth + 1
    return LocationMarker(
        ref=location_ref,
        lat=lat,
        lon=lon,
        label=detail.label,
        relation=RelationStatus.for_hops(hops),
        hops=hops,
        chains=(owner.chain,),
        owner_ref=owner.ref,
    )
