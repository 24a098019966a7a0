"""Base model for entity store payloads.

Every store payload model inherits from :class:`RelMapBaseModel` which
provides:

* A ``model_validator(mode="before")`` that unwraps ``{"data": {...}}``
  envelopes and strips sentinel values (``""``, ``"--"``, NaN) so the
  field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pyrelmap._normalize import SENTINELS


class RelMapBaseModel(BaseModel):
    """Base for entity store response models.

    Handles:
    * ``{"data": {...}}`` envelopes (merged into the top level)
    * sentinel values (``""``, ``"--"``, NaN) dropped so the field
      default is used instead
    * the original store dict stashed in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original store response dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_store_values(cls, values: Any) -> Any:
        """Unwrap envelopes, strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        nested = original.get("data")
        merged = dict(original)
        if isinstance(nested, dict):
            merged.pop("data")
            merged.update(nested)

        cleaned = RelMapBaseModel._clean_dict(merged)
        # Keep the caller's raw when constructing from kwargs.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
