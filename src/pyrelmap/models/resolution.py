"""Derived, per-run resolution views.

None of these outlive a single resolution run; the entity store stays the
system of record.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pyrelmap.models.detail import EntityDetail
from pyrelmap.models.entity import Chain, EntityRef, RelationEdge

#: Locations at most this many hops from the origin are direct.
DIRECT_MAX_HOPS = 1


class RelationStatus(StrEnum):
    DIRECT = "direct"
    RELATED = "related"

    @classmethod
    def for_hops(cls, hops: int) -> RelationStatus:
        """Direct when the location is the origin itself or one of its neighbors."""
        return cls.DIRECT if hops <= DIRECT_MAX_HOPS else cls.RELATED


class VisitedRecord(BaseModel):
    """One node reached by the walk.

    ``entity`` is ``None`` when the detail fetch failed; the record is
    kept so the node is never fetched twice in the same run.
    """

    model_config = ConfigDict(frozen=True)

    ref: EntityRef
    depth: int = Field(ge=0)
    chain: Chain
    entity: EntityDetail | None = None

    @model_validator(mode="after")
    def _check_chain(self) -> VisitedRecord:
        if len(self.chain) != self.depth + 1:
            raise ValueError(f"chain of {self.ref.key} has {len(self.chain)} refs for depth {self.depth}")
        if self.chain[-1] != self.ref:
            raise ValueError(f"chain of {self.ref.key} must end at the node itself")
        return self

    @property
    def resolved(self) -> bool:
        return self.entity is not None


class LocationMarker(BaseModel):
    """A plottable point with provenance.

    ``ref`` is the location entity (or the entity whose own payload holds
    the coordinates).  ``owner_ref`` is the entity the point belongs to:
    the location itself, or the person/vehicle/property it was resolved
    from.  ``chains`` holds one chain per distinct path discovered, each
    ending at the owner.  ``hops`` is the shortest hop distance of the
    point itself from the origin: an owned location sits one hop past its
    owner.
    """

    model_config = ConfigDict(frozen=True)

    ref: EntityRef
    lat: float
    lon: float
    label: str = ""
    relation: RelationStatus = RelationStatus.RELATED
    hops: int = Field(default=0, ge=0)
    chains: tuple[Chain, ...] = ()
    owner_ref: EntityRef | None = None

    @property
    def owner(self) -> EntityRef:
        """The owner, falling back to the marker's own ref."""
        return self.owner_ref if self.owner_ref is not None else self.ref


class ConnectorDescriptor(BaseModel):
    """A line to draw between two markers' owners that share a direct edge."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_ref: EntityRef = Field(alias="from")
    to_ref: EntityRef = Field(alias="to")
    reason: str


class Bounds(BaseModel):
    """Lat/lon bounding box; all fields ``None`` when empty."""

    model_config = ConfigDict(frozen=True)

    min_lat: float | None = None
    max_lat: float | None = None
    min_lon: float | None = None
    max_lon: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.min_lat is None

    def extend(self, lat: float, lon: float) -> Bounds:
        """Return bounds grown to include ``(lat, lon)``."""
        if self.is_empty:
            return Bounds(min_lat=lat, max_lat=lat, min_lon=lon, max_lon=lon)
        return Bounds(
            min_lat=min(self.min_lat, lat),  # type: ignore[type-var]
            max_lat=max(self.max_lat, lat),  # type: ignore[type-var]
            min_lon=min(self.min_lon, lon),  # type: ignore[type-var]
            max_lon=max(self.max_lon, lon),  # type: ignore[type-var]
        )

    def contains(self, lat: float, lon: float) -> bool:
        if self.is_empty:
            return False
        return (
            self.min_lat <= lat <= self.max_lat  # type: ignore[operator]
            and self.min_lon <= lon <= self.max_lon  # type: ignore[operator]
        )


class ResolutionResult(BaseModel):
    """Everything the map layer needs from one resolution run.

    ``markers``, ``bounds`` and ``connectors`` are the renderer contract;
    ``visited`` and ``edges`` are kept for inspection.
    """

    model_config = ConfigDict(frozen=True)

    origin: EntityRef
    max_depth: int
    markers: tuple[LocationMarker, ...] = ()
    bounds: Bounds = Field(default_factory=Bounds)
    connectors: tuple[ConnectorDescriptor, ...] = ()
    visited: tuple[VisitedRecord, ...] = ()
    edges: tuple[RelationEdge, ...] = ()

    def marker_for(self, ref: EntityRef) -> LocationMarker | None:
        for marker in self.markers:
            if marker.ref == ref:
                return marker
        return None
