"""Client configuration for pyrelmap."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrelmap._constants import (
    BASE_URL,
    DEFAULT_FAN_OUT,
    DEFAULT_MAX_DEPTH,
    DEFAULT_REQUEST_TIMEOUT,
    ENTITIES_PATH,
    RELATIONS_PATH,
)
from pyrelmap.exceptions import RelMapConfigError
from pyrelmap.models.entity import EntityKind

KindPair = frozenset[EntityKind]


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise RelMapConfigError(f"{env_key} must be a number, got {value!r}") from exc


def parse_highlight_pairs(value: str | None) -> frozenset[KindPair]:
    """Parse ``"person:property,vehicle:property"`` into unordered kind pairs.

    An empty or missing value yields an empty set, meaning "any cross-kind
    pair qualifies".
    """
    if not value or not value.strip():
        return frozenset()
    pairs: set[KindPair] = set()
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        left, sep, right = chunk.partition(":")
        if not sep:
            raise RelMapConfigError(f"highlight pair must look like 'kind:kind', got {chunk!r}")
        try:
            kinds = frozenset({EntityKind.parse(left), EntityKind.parse(right)})
        except ValueError as exc:
            raise RelMapConfigError(str(exc)) from exc
        if len(kinds) != 2:
            raise RelMapConfigError(f"highlight pair must join two different kinds, got {chunk!r}")
        pairs.add(kinds)
    return frozenset(pairs)


@dataclasses.dataclass(frozen=True)
class RelMapConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the entity store API.
    entities_path : str
        Path prefix for entity detail lookups (``{base_url}{entities_path}/{kind}/{id}``).
    relations_path : str
        Path prefix for one-hop relation lookups.
    max_depth : int
        Default walk depth when ``resolve`` is called without one.
    fan_out : int
        Maximum concurrent store requests within a single BFS layer.
    request_timeout : float
        Total timeout in seconds for a single store request.
    highlight_pairs : frozenset of frozenset of EntityKind
        Kind pairs eligible for connectors.  Empty means any pair of
        different kinds.
    api_trace_enabled : bool
        Log redacted response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    entities_path: str = ENTITIES_PATH
    relations_path: str = RELATIONS_PATH
    max_depth: int = DEFAULT_MAX_DEPTH
    fan_out: int = DEFAULT_FAN_OUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    highlight_pairs: frozenset[KindPair] = frozenset()
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise RelMapConfigError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.fan_out < 1:
            raise RelMapConfigError(f"fan_out must be >= 1, got {self.fan_out}")
        if self.request_timeout <= 0:
            raise RelMapConfigError(f"request_timeout must be > 0, got {self.request_timeout}")
        # Normalise trailing slashes so URL joining stays predictable.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> RelMapConfig:
        """Create configuration from environment variables.

        Reads optional ``RELMAP_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RelMapConfig
            Populated configuration.

        Raises
        ------
        RelMapConfigError
            If a numeric or pair variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "RELMAP_BASE_URL": "base_url",
            "RELMAP_ENTITIES_PATH": "entities_path",
            "RELMAP_RELATIONS_PATH": "relations_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "RELMAP_MAX_DEPTH": ("max_depth", int),
            "RELMAP_FAN_OUT": ("fan_out", int),
            "RELMAP_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        if "highlight_pairs" not in overrides:
            config_kwargs["highlight_pairs"] = parse_highlight_pairs(env.get("RELMAP_HIGHLIGHT_PAIRS"))
        elif isinstance(overrides["highlight_pairs"], str):
            overrides["highlight_pairs"] = parse_highlight_pairs(overrides["highlight_pairs"])

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("RELMAP_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
