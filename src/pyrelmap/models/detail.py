"""Entity detail payloads.

The store returns loosely-shaped JSON per kind.  These models form a closed
union discriminated on ``kind`` so the traversal core never inspects raw
dicts.  Field aliases cover the store's column names (``nombre``,
``latitud``, ``direccion``...) as well as English spellings.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, Field, TypeAdapter, field_validator

from pyrelmap._normalize import safe_float, safe_str, str_list, valid_coordinates
from pyrelmap.models._base import RelMapBaseModel
from pyrelmap.models.entity import EntityKind, EntityRef


class EntityDetailBase(RelMapBaseModel):
    """Fields shared by every entity kind.

    ``lat``/``lon`` are optional on every kind: locations always carry
    them, while a property (or any other entity) may carry the geocoded
    position of its own address.
    """

    id: int
    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitud", "latitude"))
    lon: float | None = Field(
        default=None,
        validation_alias=AliasChoices("lon", "lng", "longitud", "longitude"),
    )

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def entity_kind(self) -> EntityKind:
        return EntityKind.parse(getattr(self, "kind"))

    @property
    def ref(self) -> EntityRef:
        return EntityRef(kind=self.entity_kind, id=self.id)

    @property
    def coordinates(self) -> tuple[float, float] | None:
        """``(lat, lon)`` when both are present and in range, else ``None``."""
        if valid_coordinates(self.lat, self.lon):
            return self.lat, self.lon  # type: ignore[return-value]
        return None

    @property
    def label(self) -> str:
        return f"{self.entity_kind.label} {self.id}"


class PersonDetail(EntityDetailBase):
    kind: Literal["person"] = "person"
    name: str = Field(default="", validation_alias=AliasChoices("name", "nombre"))
    identification: str = Field(default="", validation_alias=AliasChoices("identification", "identificacion"))
    aliases: list[str] = Field(default_factory=list, validation_alias=AliasChoices("aliases", "alias"))
    phones: list[str] = Field(default_factory=list, validation_alias=AliasChoices("phones", "telefonos"))
    domiciles: list[str] = Field(default_factory=list, validation_alias=AliasChoices("domiciles", "domicilios"))
    photo: str | None = Field(default=None, validation_alias=AliasChoices("photo", "foto"))

    @field_validator("aliases", "phones", "domiciles", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str]:
        return str_list(value)

    @property
    def label(self) -> str:
        return self.name or self.identification or super().label


class VehicleDetail(EntityDetailBase):
    kind: Literal["vehicle"] = "vehicle"
    brand: str = Field(default="", validation_alias=AliasChoices("brand", "marca"))
    vehicle_type: str = Field(default="", validation_alias=AliasChoices("vehicle_type", "vehicleType", "tipo", "type"))
    color: str = ""
    plate: str = Field(default="", validation_alias=AliasChoices("plate", "placa"))
    model: str | None = Field(default=None, validation_alias=AliasChoices("model", "modelo"))

    @field_validator("model", mode="before")
    @classmethod
    def _coerce_model(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def label(self) -> str:
        parts = [part for part in (self.brand, self.plate) if part]
        return " ".join(parts) or super().label


class PropertyDetail(EntityDetailBase):
    kind: Literal["property"] = "property"
    property_type: str = Field(
        default="",
        validation_alias=AliasChoices("property_type", "propertyType", "tipo", "type"),
    )
    owner: str = Field(default="", validation_alias=AliasChoices("owner", "propietario"))
    address: str = Field(default="", validation_alias=AliasChoices("address", "direccion"))
    notes: str | None = Field(default=None, validation_alias=AliasChoices("notes", "observaciones"))

    @property
    def label(self) -> str:
        if self.property_type and self.address:
            return f"{self.property_type}: {self.address}"
        return self.address or self.property_type or super().label


class LocationDetail(EntityDetailBase):
    kind: Literal["location"] = "location"
    location_type: str = Field(
        default="",
        validation_alias=AliasChoices("location_type", "locationType", "tipo", "type"),
    )
    observed_at: datetime | None = Field(default=None, validation_alias=AliasChoices("observed_at", "fecha", "date"))
    notes: str | None = Field(default=None, validation_alias=AliasChoices("notes", "observaciones"))

    @property
    def label(self) -> str:
        if self.location_type and self.notes:
            return f"{self.location_type}: {self.notes}"
        return self.location_type or self.notes or super().label


EntityDetail = Annotated[
    PersonDetail | VehicleDetail | PropertyDetail | LocationDetail,
    Field(discriminator="kind"),
]
"""Closed union of entity payloads, discriminated on ``kind``."""

_ENTITY_DETAIL_ADAPTER: TypeAdapter[EntityDetail] = TypeAdapter(EntityDetail)


def parse_entity_detail(kind: EntityKind, payload: dict[str, Any]) -> EntityDetail:
    """Validate a store payload as the detail model for *kind*.

    The store does not echo the kind back, so it is injected from the
    requested ref before validation.
    """
    data = dict(payload)
    data["kind"] = kind.value
    return _ENTITY_DETAIL_ADAPTER.validate_python(data)
