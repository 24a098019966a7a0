"""Internal constants shared across the library."""

BASE_URL = "http://localhost:5000/api"
USER_AGENT = "pyrelmap/1"
ENTITIES_PATH = "/entities"
RELATIONS_PATH = "/relations"

# ------------------------------------------------------------------
# Traversal limits
# ------------------------------------------------------------------

#: Default walk depth.  Two hops reach a person's vehicles' properties,
#: which is the deepest chain investigators plot in practice.
DEFAULT_MAX_DEPTH = 2

#: Maximum number of concurrent store requests within one BFS layer.
DEFAULT_FAN_OUT = 8

#: Seconds before a single store request is abandoned.
DEFAULT_REQUEST_TIMEOUT = 15.0

#: HTTP statuses the store uses for "entity does not exist".
NOT_FOUND_STATUSES: frozenset[int] = frozenset({404, 410})
