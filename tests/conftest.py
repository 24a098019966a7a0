from __future__ import annotations

import pytest

from .fakes import FakeRelationStore


@pytest.fixture
def graph() -> FakeRelationStore:
    return FakeRelationStore()


@pytest.fixture
def scenario_chain(graph: FakeRelationStore) -> FakeRelationStore:
    """Person P1 -- Vehicle V1 -- Property H1, only H1 carries coordinates."""
    graph.add("person:1", nombre="P1")
    graph.add("vehicle:1", marca="Toyota", placa="ABC123")
    graph.add("property:1", tipo="Casa", direccion="San Pedro", latitud=9.93, longitud=-84.08)
    graph.relate("person:1", "vehicle:1")
    graph.relate("vehicle:1", "property:1")
    return graph


@pytest.fixture
def scenario_direct(graph: FakeRelationStore) -> FakeRelationStore:
    """Person P2 related to Property H2 (with coordinates) and owning location L2."""
    graph.add("person:2", nombre="P2")
    graph.add("property:2", tipo="Casa", direccion="Escazu", latitud=9.918, longitud=-84.139)
    graph.add("location:2", tipo="Domicilio", latitud=9.935, longitud=-84.051)
    graph.relate("person:2", "property:2")
    graph.relate("person:2", "location:2")
    return graph
