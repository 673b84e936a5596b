"""Garage operation outcomes."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from pygarage.models.record import StoredVehicle


class GarageOutcome(StrEnum):
    """Terminal result of a garage operation.

    World conditions such as "no vehicle in range" are outcomes rather
    than exceptions; each maps to a user-facing message in
    :mod:`pygarage.notify`.
    """

    STORED = "stored"
    OUT_OF_RANGE = "out_of_range"
    OCCUPIED = "occupied"
    WEAPONS_PRESENT = "weapons_present"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    PERSIST_FAILED = "persist_failed"
    RETRIEVED = "retrieved"
    SITE_BLOCKED = "site_blocked"
    DELETED = "deleted"
    NOTHING = "nothing"


_SUCCESS_OUTCOMES = frozenset({GarageOutcome.STORED, GarageOutcome.RETRIEVED, GarageOutcome.DELETED})


class GarageResult(BaseModel):
    """Outcome of a deposit, retrieve or delete request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    outcome: GarageOutcome
    owner_id: str
    record: StoredVehicle | None = Field(
        default=None,
        description="Record that was stored, retrieved or deleted.",
    )
    remaining: int | None = Field(
        default=None,
        description="Stored vehicle count after the operation, when known.",
    )

    @property
    def ok(self) -> bool:
        """Whether the operation changed the garage."""
        return self.outcome in _SUCCESS_OUTCOMES
