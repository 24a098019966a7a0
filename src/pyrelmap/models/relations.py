"""One-hop relation lists."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyrelmap._normalize import safe_int
from pyrelmap.models._base import RelMapBaseModel
from pyrelmap.models.entity import KIND_ORDER, EntityKind, EntityRef


def _coerce_ids(value: Any) -> list[int]:
    """Turn ``[1, "2", {"id": 3}]`` into ``[1, 2, 3]``, dropping junk and duplicates."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    ids: list[int] = []
    seen: set[int] = set()
    for item in value:
        candidate = item.get("id") if isinstance(item, dict) else item
        ident = safe_int(candidate)
        if ident is None or ident in seen:
            continue
        seen.add(ident)
        ids.append(ident)
    return ids


class Neighbors(RelMapBaseModel):
    """Entities one hop away from a ref, grouped by kind.

    The store returns either bare id lists or lists of full entity
    objects; only the ids are kept.
    """

    persons: list[int] = Field(default_factory=list, validation_alias=AliasChoices("persons", "personas"))
    vehicles: list[int] = Field(default_factory=list, validation_alias=AliasChoices("vehicles", "vehiculos"))
    properties: list[int] = Field(default_factory=list, validation_alias=AliasChoices("properties", "inmuebles"))
    locations: list[int] = Field(default_factory=list, validation_alias=AliasChoices("locations", "ubicaciones"))

    @field_validator("persons", "vehicles", "properties", "locations", mode="before")
    @classmethod
    def _coerce_id_lists(cls, value: Any) -> list[int]:
        return _coerce_ids(value)

    def ids_for(self, kind: EntityKind) -> list[int]:
        return {
            EntityKind.PERSON: self.persons,
            EntityKind.VEHICLE: self.vehicles,
            EntityKind.PROPERTY: self.properties,
            EntityKind.LOCATION: self.locations,
        }[kind]

    def refs(self, *, exclude: EntityRef | None = None) -> Iterator[EntityRef]:
        """Yield neighbor refs in canonical kind order, skipping *exclude*.

        Self-relations occasionally appear in the store's symmetric join
        tables; passing the owner as *exclude* drops them.
        """
        for kind in KIND_ORDER:
            for ident in self.ids_for(kind):
                ref = EntityRef(kind=kind, id=ident)
                if ref != exclude:
                    yield ref

    def location_refs(self) -> list[EntityRef]:
        return [EntityRef(kind=EntityKind.LOCATION, id=ident) for ident in self.locations]

    @property
    def is_empty(self) -> bool:
        return not (self.persons or self.vehicles or self.properties or self.locations)
