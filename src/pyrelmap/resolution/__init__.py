"""Resolution core: graph walk, location extraction, aggregation, highlighting."""

from pyrelmap.resolution.aggregate import aggregate
from pyrelmap.resolution.engine import Traversal, TraversalEngine
from pyrelmap.resolution.extract import LocationExtractor
from pyrelmap.resolution.highlight import connector_reason, highlight
from pyrelmap.resolution.pipeline import resolve_locations

__all__ = [
    "LocationExtractor",
    "Traversal",
    "TraversalEngine",
    "aggregate",
    "connector_reason",
    "highlight",
    "resolve_locations",
]
