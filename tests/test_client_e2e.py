from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyrelmap.client import RelMapClient
from pyrelmap.config import RelMapConfig
from pyrelmap.exceptions import EntityNotFoundError, OriginUnresolvedError, RelMapError
from pyrelmap.models.detail import PersonDetail
from pyrelmap.models.resolution import RelationStatus

from .fakes import FakeRelationStore, ref


@dataclass
class FakeStoreBackend:
    """Serves ``/entities`` and ``/relations`` JSON the way the REST store does."""

    entities: dict[str, dict[str, Any]] = field(default_factory=dict)
    relations: dict[str, dict[str, Any]] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: dict[str, int] = field(default_factory=dict)

    def _record_call(self, endpoint: str) -> None:
        self.calls[endpoint] = self.calls.get(endpoint, 0) + 1

    async def get_json(self, endpoint: str) -> Any:
        self._record_call(endpoint)
        gate = self.gates.get(endpoint)
        if gate is not None:
            await gate.wait()
        _, collection, kind, ident = endpoint.split("/")
        key = f"{kind}/{ident}"
        if collection == "entities":
            if key not in self.entities:
                raise EntityNotFoundError(f"{endpoint} not found", endpoint=endpoint)
            return {"success": True, "data": self.entities[key]}
        if collection == "relations":
            return self.relations.get(key, {})
        raise AssertionError(f"unexpected endpoint {endpoint}")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeStoreBackend:
    fake = FakeStoreBackend(
        entities={
            "person/1": {"id": 1, "nombre": "Ana Mora", "identificacion": "1-1111-1111"},
            "vehicle/1": {"id": 1, "marca": "Toyota", "placa": "ABC123"},
            "property/1": {"id": 1, "tipo": "Casa", "direccion": "San Pedro", "latitud": 9.93, "longitud": -84.08},
            "person/2": {"id": 2, "nombre": "Luis"},
            "property/2": {"id": 2, "tipo": "Lote", "direccion": "Escazu", "latitud": 9.918, "longitud": -84.139},
            "location/2": {"id": 2, "tipo": "Domicilio", "latitud": 9.935, "longitud": -84.051},
        },
        relations={
            "person/1": {"vehiculos": [1]},
            "vehicle/1": {"personas": [{"id": 1}], "inmuebles": [1]},
            "property/1": {"vehiculos": [1]},
            "person/2": {"inmuebles": [2], "ubicaciones": [2]},
            "property/2": {"personas": [2]},
            "location/2": {"personas": [2]},
        },
    )
    monkeypatch.setattr("pyrelmap._transport.HttpTransport.get_json", fake.get_json)
    return fake


def _config() -> RelMapConfig:
    return RelMapConfig(base_url="http://store.test/api", max_depth=2)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_resolve_commits_result(backend: FakeStoreBackend) -> None:
    async with RelMapClient(_config()) as client:
        result = await client.resolve(ref("person:1"))

        assert result is not None
        assert client.store.current is result
        assert [m.ref.key for m in result.markers] == ["property:1"]
        assert result.markers[0].relation is RelationStatus.RELATED
        assert result.connectors == ()

    assert backend.calls["/entities/person/1"] == 1


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_direct_relation_gets_connector(backend: FakeStoreBackend) -> None:
    async with RelMapClient(_config()) as client:
        result = await client.resolve(ref("person:2"))

    assert result is not None
    assert {m.ref.key: m.relation for m in result.markers} == {
        "location:2": RelationStatus.DIRECT,
        "property:2": RelationStatus.DIRECT,
    }
    assert [(c.from_ref.key, c.to_ref.key) for c in result.connectors] == [("person:2", "property:2")]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_newer_run_wins_over_slower_older_run(backend: FakeStoreBackend) -> None:
    gate = asyncio.Event()
    backend.gates["/relations/person/1"] = gate

    async with RelMapClient(_config()) as client:
        slow = asyncio.create_task(client.resolve(ref("person:1")))
        while "/relations/person/1" not in backend.calls:
            await asyncio.sleep(0)

        fast = await client.resolve(ref("person:2"))
        gate.set()
        stale = await slow

        assert stale is None
        assert fast is not None
        assert client.store.current is fast
        assert client.store.current.origin == ref("person:2")


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_cancel_discards_in_flight_run(backend: FakeStoreBackend) -> None:
    gate = asyncio.Event()
    backend.gates["/entities/vehicle/1"] = gate

    async with RelMapClient(_config()) as client:
        task = asyncio.create_task(client.resolve(ref("person:1")))
        while "/entities/vehicle/1" not in backend.calls:
            await asyncio.sleep(0)
        client.cancel()
        gate.set()

        assert await task is None
        assert client.store.current is None


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_unresolvable_origin_clears_state(backend: FakeStoreBackend) -> None:
    async with RelMapClient(_config()) as client:
        assert await client.resolve(ref("person:1")) is not None

        with pytest.raises(OriginUnresolvedError) as excinfo:
            await client.resolve(ref("person:404"))

        assert isinstance(excinfo.value.__cause__, EntityNotFoundError)
        assert client.store.current is None
        assert client.store.last_error is excinfo.value


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_marker_click_restarts_from_owner(backend: FakeStoreBackend) -> None:
    async with RelMapClient(_config()) as client:
        first = await client.resolve(ref("person:2"))
        assert first is not None
        location = first.marker_for(ref("location:2"))
        assert location is not None

        assert RelMapClient.on_marker_click(location) == ref("person:2")

        house = first.marker_for(ref("property:2"))
        assert house is not None
        second = await client.resolve_from_marker(house)

    assert second is not None
    assert second.origin == ref("property:2")
    assert second.marker_for(ref("property:2")) is not None


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_store_reads(backend: FakeStoreBackend) -> None:
    async with RelMapClient(_config()) as client:
        person = await client.get_entity(ref("person:1"))
        neighbors = await client.get_neighbors(ref("vehicle:1"))

    assert isinstance(person, PersonDetail)
    assert person.name == "Ana Mora"
    assert neighbors.persons == [1]
    assert neighbors.properties == [1]


@pytest.mark.asyncio
async def test_external_relation_store(scenario_chain: FakeRelationStore) -> None:
    async with RelMapClient(_config(), relation_store=scenario_chain) as client:
        result = await client.resolve(ref("person:1"), max_depth=1)

    assert result is not None
    assert result.max_depth == 1
    assert result.markers == ()


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    client = RelMapClient(_config())
    with pytest.raises(RelMapError, match="not initialized"):
        await client.resolve(ref("person:1"))
