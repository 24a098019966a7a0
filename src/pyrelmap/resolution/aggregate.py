"""Marker deduplication and map bounds."""

from __future__ import annotations

from collections.abc import Iterable

from pyrelmap.models.entity import EntityRef
from pyrelmap.models.resolution import Bounds, LocationMarker, RelationStatus


def _merge(existing: LocationMarker, incoming: LocationMarker) -> LocationMarker:
    """Fold *incoming* into *existing*; the first occurrence wins every scalar."""
    chains = existing.chains + tuple(chain for chain in incoming.chains if chain not in existing.chains)
    return existing.model_copy(
        update={
            "chains": chains,
            "hops": min(existing.hops, incoming.hops),
            "owner_ref": existing.owner_ref if existing.owner_ref is not None else incoming.owner_ref,
            "label": existing.label or incoming.label,
        }
    )


def aggregate(markers: Iterable[LocationMarker]) -> tuple[list[LocationMarker], Bounds]:
    """Deduplicate *markers* by ref and compute their bounds.

    Chains of duplicates are unioned (in discovery order), the first
    occurrence keeps its position, coordinates, label and owner, and the
    relation status is recomputed from the shortest hop distance seen.

    Returns
    -------
    tuple of (list of LocationMarker, Bounds)
        Unique markers in first-occurrence order and their bounding box
        (empty when there are no markers).
    """
    merged: dict[EntityRef, LocationMarker] = {}
    for marker in markers:
        existing = merged.get(marker.ref)
        merged[marker.ref] = marker if existing is None else _merge(existing, marker)

    result: list[LocationMarker] = []
    bounds = Bounds()
    for marker in merged.values():
        relation = RelationStatus.for_hops(marker.hops)
        if relation is not marker.relation:
            marker = marker.model_copy(update={"relation": relation})
        result.append(marker)
        bounds = bounds.extend(marker.lat, marker.lon)
    return result, bounds
