"""Base model for persisted garage payloads.

Every persisted model inherits from :class:`GarageBaseModel` which
provides:

* Frozen instances, so a loaded garage can be staged and copied
  without aliasing the caller's data.
* ``extra="ignore"`` so hand-edited files with additional keys still load.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used instead.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator


def _non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must be non-empty")
    return value


NonEmptyStr = Annotated[str, AfterValidator(_non_blank)]
"""String kept as given that must contain something other than whitespace."""


class GarageBaseModel(BaseModel):
    """Base for garage storage models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
