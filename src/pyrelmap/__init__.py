"""pyrelmap - Async location resolution over an entity relation graph."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrelmap")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrelmap.adapter import HttpRelationStore, RelationStore
from pyrelmap.client import RelMapClient
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import (
    EntityNotFoundError,
    OriginUnresolvedError,
    RelMapApiError,
    RelMapConfigError,
    RelMapError,
    RelMapTransportError,
    ResolutionCancelledError,
)
from pyrelmap.models import (
    Bounds,
    ConnectorDescriptor,
    EntityDetail,
    EntityKind,
    EntityRef,
    LocationDetail,
    LocationMarker,
    Neighbors,
    PersonDetail,
    PropertyDetail,
    RelationEdge,
    RelationStatus,
    ResolutionResult,
    VehicleDetail,
    VisitedRecord,
)
from pyrelmap.resolution import resolve_locations

__all__ = [
    "__version__",
    "Bounds",
    "ConnectorDescriptor",
    "EntityDetail",
    "EntityKind",
    "EntityNotFoundError",
    "EntityRef",
    "HttpRelationStore",
    "LocationDetail",
    "LocationMarker",
    "Neighbors",
    "OriginUnresolvedError",
    "PersonDetail",
    "PropertyDetail",
    "RelMapApiError",
    "RelMapClient",
    "RelMapConfig",
    "RelMapConfigError",
    "RelMapError",
    "RelMapTransportError",
    "RelationEdge",
    "RelationStatus",
    "RelationStore",
    "ResolutionCancelledError",
    "ResolutionResult",
    "VehicleDetail",
    "VisitedRecord",
    "resolve_locations",
]
