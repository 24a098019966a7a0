from __future__ import annotations

import pytest

from pyrelmap.config import RelMapConfig, parse_highlight_pairs
from pyrelmap.exceptions import RelMapConfigError
from pyrelmap.models.entity import EntityKind

_ENV_KEYS = (
    "RELMAP_BASE_URL",
    "RELMAP_ENTITIES_PATH",
    "RELMAP_RELATIONS_PATH",
    "RELMAP_MAX_DEPTH",
    "RELMAP_FAN_OUT",
    "RELMAP_REQUEST_TIMEOUT",
    "RELMAP_HIGHLIGHT_PAIRS",
    "RELMAP_API_TRACE_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = RelMapConfig.from_env()
    assert config.base_url == "http://localhost:5000/api"
    assert config.max_depth == 2
    assert config.fan_out == 8
    assert config.highlight_pairs == frozenset()
    assert config.api_trace_enabled is False


def test_env_values_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELMAP_BASE_URL", "https://store.example/api/")
    monkeypatch.setenv("RELMAP_MAX_DEPTH", "3")
    monkeypatch.setenv("RELMAP_FAN_OUT", "4")
    monkeypatch.setenv("RELMAP_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("RELMAP_HIGHLIGHT_PAIRS", "persona:inmueble, vehicle:property")
    monkeypatch.setenv("RELMAP_API_TRACE_ENABLED", "yes")

    config = RelMapConfig.from_env()

    assert config.base_url == "https://store.example/api"
    assert config.max_depth == 3
    assert config.fan_out == 4
    assert config.request_timeout == 2.5
    assert config.highlight_pairs == frozenset(
        {
            frozenset({EntityKind.PERSON, EntityKind.PROPERTY}),
            frozenset({EntityKind.VEHICLE, EntityKind.PROPERTY}),
        }
    )
    assert config.api_trace_enabled is True


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELMAP_MAX_DEPTH", "5")
    monkeypatch.setenv("RELMAP_HIGHLIGHT_PAIRS", "person:vehicle")

    config = RelMapConfig.from_env(max_depth=1, highlight_pairs="location:property")

    assert config.max_depth == 1
    assert config.highlight_pairs == frozenset({frozenset({EntityKind.LOCATION, EntityKind.PROPERTY})})


def test_bad_number_raises_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELMAP_FAN_OUT", "many")
    with pytest.raises(RelMapConfigError, match="RELMAP_FAN_OUT"):
        RelMapConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [{"max_depth": -1}, {"fan_out": 0}, {"request_timeout": 0}],
)
def test_invalid_values_rejected(kwargs: dict[str, float]) -> None:
    with pytest.raises(RelMapConfigError):
        RelMapConfig(**kwargs)  # type: ignore[arg-type]


@pytest.mark.parametrize("value", ["person", "person:alien", "person:persona"])
def test_bad_highlight_pairs(value: str) -> None:
    with pytest.raises(RelMapConfigError):
        parse_highlight_pairs(value)


def test_empty_highlight_pairs() -> None:
    assert parse_highlight_pairs("") == frozenset()
    assert parse_highlight_pairs(None) == frozenset()
    assert parse_highlight_pairs(" , ") == frozenset()
