"""Connectors between markers whose owners are directly related."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from pyrelmap.models.entity import EntityKind, EntityRef, RelationEdge
from pyrelmap.models.resolution import ConnectorDescriptor, LocationMarker


def connector_reason(first: EntityKind, second: EntityKind) -> str:
    return f"{first.label} ↔ {second.label} direct relation"


def highlight(
    markers: Sequence[LocationMarker],
    edges: Iterable[RelationEdge],
    *,
    origin: EntityRef | None = None,
    allowed_pairs: Collection[frozenset[EntityKind]] = frozenset(),
) -> list[ConnectorDescriptor]:
    """Emit one connector per pair of marker owners joined by a direct edge.

    Only owners of different kinds qualify.  When *allowed_pairs* is not
    empty, the owners' kinds must also form one of those pairs.  The
    connector runs from the owner whose marker comes first.

    *origin* takes part as a candidate owner even when it has no marker of
    its own, so a neighbor that owns a marker is linked back to it.  It
    always comes first.
    """
    edge_set = set(edges)
    candidates = [marker.owner for marker in markers]
    if origin is not None:
        candidates.insert(0, origin)
    owners: list[EntityRef] = list(dict.fromkeys(candidates))

    connectors: list[ConnectorDescriptor] = []
    for index, first in enumerate(owners):
        for second in owners[index + 1 :]:
            if first.kind is second.kind:
                continue
            if allowed_pairs and frozenset({first.kind, second.kind}) not in allowed_pairs:
                continue
            if RelationEdge(first, second) not in edge_set:
                continue
            connectors.append(
                ConnectorDescriptor(
                    from_ref=first,
                    to_ref=second,
                    reason=connector_reason(first.kind, second.kind),
                )
            )
    return connectors
