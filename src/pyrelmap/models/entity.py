"""Entity identity: kinds, references and relation edges."""

from __future__ import annotations

import dataclasses
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class EntityKind(StrEnum):
    PERSON = "person"
    VEHICLE = "vehicle"
    PROPERTY = "property"
    LOCATION = "location"

    @property
    def label(self) -> str:
        """Human-readable kind name (``"Person"``)."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Any) -> EntityKind:
        """Resolve any spelling the store uses for a kind.

        Accepts the enum values, English plurals and the store's legacy
        Spanish table names (``personas``, ``inmueble``, ``ubicaciones``...).

        Raises
        ------
        ValueError
            If *value* names no known kind.
        """
        if isinstance(value, EntityKind):
            return value
        text = str(value).strip().lower()
        kind = _KIND_ALIASES.get(text)
        if kind is None:
            raise ValueError(f"unknown entity kind: {value!r}")
        return kind


_KIND_ALIASES: dict[str, EntityKind] = {
    "person": EntityKind.PERSON,
    "persons": EntityKind.PERSON,
    "people": EntityKind.PERSON,
    "persona": EntityKind.PERSON,
    "personas": EntityKind.PERSON,
    "vehicle": EntityKind.VEHICLE,
    "vehicles": EntityKind.VEHICLE,
    "vehiculo": EntityKind.VEHICLE,
    "vehiculos": EntityKind.VEHICLE,
    "property": EntityKind.PROPERTY,
    "properties": EntityKind.PROPERTY,
    "inmueble": EntityKind.PROPERTY,
    "inmuebles": EntityKind.PROPERTY,
    "location": EntityKind.LOCATION,
    "locations": EntityKind.LOCATION,
    "ubicacion": EntityKind.LOCATION,
    "ubicaciones": EntityKind.LOCATION,
}

#: Canonical kind order, used for neighbor lists and edge normalisation.
KIND_ORDER: tuple[EntityKind, ...] = (
    EntityKind.PERSON,
    EntityKind.VEHICLE,
    EntityKind.PROPERTY,
    EntityKind.LOCATION,
)


class EntityRef(BaseModel):
    """Immutable reference to one entity in the store.

    Identity is ``kind:id``; two refs with the same kind and id are equal
    and hash alike, so refs can key visited maps directly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: EntityKind
    id: int

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> EntityKind:
        return EntityKind.parse(value)

    @property
    def key(self) -> str:
        return f"{self.kind.value}:{self.id}"

    def __str__(self) -> str:
        return self.key

    def sort_key(self) -> tuple[int, int]:
        return KIND_ORDER.index(self.kind), self.id

    @classmethod
    def parse(cls, text: str) -> EntityRef:
        """Parse a ``"kind:id"`` string (``"person:4"``, ``"inmueble:1"``)."""
        kind, sep, ident = text.strip().partition(":")
        if not sep:
            raise ValueError(f"entity reference must look like 'kind:id', got {text!r}")
        try:
            return cls(kind=EntityKind.parse(kind), id=int(ident))
        except ValueError as exc:
            raise ValueError(f"invalid entity reference {text!r}: {exc}") from exc


Chain = tuple[EntityRef, ...]
"""Ordered path of refs from the origin to a discovered node (inclusive)."""


@dataclasses.dataclass(frozen=True, slots=True)
class RelationEdge:
    """Unordered relation between two entities.

    Endpoints are stored in canonical order so ``RelationEdge(a, b) ==
    RelationEdge(b, a)``.
    """

    a: EntityRef
    b: EntityRef

    def __post_init__(self) -> None:
        if self.a == self.b:
            raise ValueError(f"relation edge cannot join {self.a.key} to itself")
        if self.b.sort_key() < self.a.sort_key():
            a, b = self.b, self.a
            object.__setattr__(self, "a", a)
            object.__setattr__(self, "b", b)

    def other(self, ref: EntityRef) -> EntityRef:
        if ref == self.a:
            return self.b
        if ref == self.b:
            return self.a
        raise ValueError(f"{ref.key} is not an endpoint of {self.a.key}-{self.b.key}")
