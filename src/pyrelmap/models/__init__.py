"""Data models for entity store payloads and resolution results."""

from pyrelmap.models._base import RelMapBaseModel
from pyrelmap.models.detail import (
    EntityDetail,
    EntityDetailBase,
    LocationDetail,
    PersonDetail,
    PropertyDetail,
    VehicleDetail,
    parse_entity_detail,
)
from pyrelmap.models.entity import KIND_ORDER, Chain, EntityKind, EntityRef, RelationEdge
from pyrelmap.models.relations import Neighbors
from pyrelmap.models.resolution import (
    Bounds,
    ConnectorDescriptor,
    LocationMarker,
    RelationStatus,
    ResolutionResult,
    VisitedRecord,
)

__all__ = [
    "Bounds",
    "Chain",
    "ConnectorDescriptor",
    "EntityDetail",
    "EntityDetailBase",
    "EntityKind",
    "EntityRef",
    "KIND_ORDER",
    "LocationDetail",
    "LocationMarker",
    "Neighbors",
    "PersonDetail",
    "PropertyDetail",
    "RelMapBaseModel",
    "RelationEdge",
    "RelationStatus",
    "ResolutionResult",
    "VehicleDetail",
    "VisitedRecord",
    "parse_entity_detail",
]
