"""Custom exception hierarchy for pyrelmap."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyrelmap.models.entity import EntityRef


class RelMapError(Exception):
    """Base exception for all pyrelmap errors."""


class RelMapConfigError(RelMapError):
    """Invalid or missing configuration."""


class RelMapTransportError(RelMapError):
    """HTTP-level failure (network, unexpected status, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RelMapApiError(RelMapError):
    """The store answered, but the payload cannot be used."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class EntityNotFoundError(RelMapApiError):
    """The requested entity does not exist in the store (HTTP 404 or empty body)."""


class OriginUnresolvedError(RelMapError):
    """The origin of a resolution run could not be fetched.

    Fatal for the run: without the origin there is no chain to anchor
    markers to.  The underlying adapter error is chained as ``__cause__``.
    """

    def __init__(self, origin: EntityRef, message: str = "") -> None:
        self.origin = origin
        super().__init__(message or f"origin {origin.key} could not be resolved")


class ResolutionCancelledError(RelMapError):
    """A resolution run was superseded by a newer one or cancelled.

    Raised inside the pipeline when its run token goes stale.
    :class:`pyrelmap.client.RelMapClient` catches it and reports the run as
    discarded; it never reaches UI callers.
    """
