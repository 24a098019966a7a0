from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from pyrelmap._api._common import build_endpoint, unwrap_object
from pyrelmap._api.entities import fetch_entity
from pyrelmap._api.relations import fetch_neighbors
from pyrelmap.adapter import HttpRelationStore
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import EntityNotFoundError, RelMapApiError, RelMapTransportError
from pyrelmap.models.detail import PersonDetail, PropertyDetail

from .fakes import ref


@dataclass
class FakeTransport:
    responses: dict[str, Any] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def get_json(self, endpoint: str) -> Any:
        self.calls.append(endpoint)
        response = self.responses.get(endpoint)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def config() -> RelMapConfig:
    return RelMapConfig(base_url="http://store.test/api")


def test_build_endpoint() -> None:
    assert build_endpoint("/entities", ref("inmueble:3")) == "/entities/property/3"
    assert build_endpoint("/relations/", ref("person:4")) == "/relations/person/4"


class TestUnwrapObject:
    def test_plain_object(self) -> None:
        assert unwrap_object("/x", {"id": 1}) == {"id": 1}

    def test_data_envelope(self) -> None:
        assert unwrap_object("/x", {"success": True, "data": {"id": 1}}) == {"id": 1}

    @pytest.mark.parametrize("body", [None, {}, {"data": {}}])
    def test_empty_bodies_mean_not_found(self, body: Any) -> None:
        with pytest.raises(EntityNotFoundError):
            unwrap_object("/x", body)

    def test_non_object_is_api_error(self) -> None:
        with pytest.raises(RelMapApiError):
            unwrap_object("/x", [1, 2])


class TestFetchEntity:
    @pytest.mark.asyncio
    async def test_parses_detail_for_requested_kind(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/entities/person/4": {"data": {"id": 4, "nombre": "Ana", "telefonos": ["1"]}}})

        detail = await fetch_entity(config, transport, ref("person:4"))

        assert isinstance(detail, PersonDetail)
        assert detail.name == "Ana"
        assert transport.calls == ["/entities/person/4"]

    @pytest.mark.asyncio
    async def test_id_mismatch_is_api_error(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/entities/person/4": {"id": 5}})
        with pytest.raises(RelMapApiError):
            await fetch_entity(config, transport, ref("person:4"))

    @pytest.mark.asyncio
    async def test_declared_kind_mismatch_is_api_error(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/entities/person/4": {"id": 4, "kind": "vehiculo"}})
        with pytest.raises(RelMapApiError):
            await fetch_entity(config, transport, ref("person:4"))

    @pytest.mark.asyncio
    async def test_invalid_payload_is_api_error(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/entities/property/1": {"id": "not-a-number"}})
        with pytest.raises(RelMapApiError) as excinfo:
            await fetch_entity(config, transport, ref("property:1"))
        assert not isinstance(excinfo.value, EntityNotFoundError)

    @pytest.mark.asyncio
    async def test_empty_body_is_not_found(self, config: RelMapConfig) -> None:
        with pytest.raises(EntityNotFoundError):
            await fetch_entity(config, FakeTransport(), ref("person:4"))

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/entities/person/4": RelMapTransportError("down", status_code=502)})
        with pytest.raises(RelMapTransportError):
            await fetch_entity(config, transport, ref("person:4"))


class TestFetchNeighbors:
    @pytest.mark.asyncio
    async def test_store_column_names(self, config: RelMapConfig) -> None:
        transport = FakeTransport(
            {
                "/relations/person/4": {
                    "personas": [{"id": 2, "nombre": "Luis"}],
                    "vehiculos": [7],
                    "inmuebles": [],
                    "ubicaciones": ["9"],
                }
            }
        )

        neighbors = await fetch_neighbors(config, transport, ref("person:4"))

        assert neighbors.persons == [2]
        assert neighbors.vehicles == [7]
        assert neighbors.properties == []
        assert neighbors.locations == [9]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, {}, {"data": {}}])
    async def test_empty_relations(self, config: RelMapConfig, body: Any) -> None:
        transport = FakeTransport({"/relations/vehicle/1": body})
        neighbors = await fetch_neighbors(config, transport, ref("vehicle:1"))
        assert neighbors.is_empty

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, config: RelMapConfig) -> None:
        transport = FakeTransport({"/relations/vehicle/1": EntityNotFoundError("gone")})
        with pytest.raises(EntityNotFoundError):
            await fetch_neighbors(config, transport, ref("vehicle:1"))


@pytest.mark.asyncio
async def test_http_relation_store_uses_configured_paths() -> None:
    config = RelMapConfig(entities_path="/v2/entidades", relations_path="/v2/relaciones")
    transport = FakeTransport(
        {
            "/v2/entidades/property/1": {"id": 1, "direccion": "Sabanilla", "latitud": 9.94, "longitud": -84.04},
            "/v2/relaciones/property/1": {"data": {"personas": [3]}},
        }
    )
    store = HttpRelationStore(config, transport)

    detail = await store.fetch_entity(ref("property:1"))
    neighbors = await store.fetch_neighbors(ref("property:1"))

    assert isinstance(detail, PropertyDetail)
    assert detail.coordinates == (9.94, -84.04)
    assert neighbors.persons == [3]
