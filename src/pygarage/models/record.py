"""Stored vehicle records and the per-player garage collection."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field, model_validator

from pygarage.models._base import GarageBaseModel, NonEmptyStr


class InventorySlot(GarageBaseModel):
    """One coalesced inventory entry: an item prefab and how many were stored."""

    prefab: NonEmptyStr
    """Prefab path of the stored item."""
    count: int = Field(..., ge=1)
    """Quantity of this item (never zero)."""


class StoredVehicle(GarageBaseModel):
    """Full saved state of a single vehicle in a player's garage.

    Example JSON fragment::

        {
          "prefab": "{...}Prefabs/Vehicles/Car/MyCar.et",
          "inventory": [
            {"prefab": "{...}Prefabs/Items/Fuel/FuelCan.et", "count": 2}
          ],
          "key_id": "1234-5678-90",
          "key_code": "ABCD"
        }
    """

    prefab: NonEmptyStr
    """Prefab path used to respawn the vehicle."""
    inventory: tuple[InventorySlot, ...] = ()
    """Vehicle inventory at the time of storage."""
    key_id: str = ""
    """Identifier correlating the vehicle to its physical key."""
    key_code: str = ""
    """Secondary key credential (PIN / lock code)."""

    @model_validator(mode="after")
    def _reject_duplicate_slots(self) -> StoredVehicle:
        seen: set[str] = set()
        for slot in self.inventory:
            if slot.prefab in seen:
                raise ValueError(f"inventory slot {slot.prefab!r} appears more than once")
            seen.add(slot.prefab)
        return self

    @property
    def display_name(self) -> str:
        """Short name for list views.

        ``"Some/Path/MyVehicle.et"`` becomes ``"MyVehicle"``. Falls back
        to the full prefab path when it has no slash followed by a dot.
        """
        last_slash = self.prefab.rfind("/")
        dot = self.prefab.rfind(".")
        if last_slash >= 0 and dot > last_slash:
            return self.prefab[last_slash + 1 : dot]
        return self.prefab

    @property
    def item_count(self) -> int:
        return sum(slot.count for slot in self.inventory)


class PlayerGarage(GarageBaseModel):
    """Everything persisted for one player.

    ``vehicles`` order is load-bearing: retrieval and deletion address
    records by index into it.
    """

    player_uid: NonEmptyStr
    vehicles: tuple[StoredVehicle, ...] = ()

    @classmethod
    def empty(cls, player_uid: str) -> PlayerGarage:
        return cls(player_uid=player_uid)

    def __len__(self) -> int:
        return len(self.vehicles)

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self.vehicles)

    def with_vehicle(self, vehicle: StoredVehicle) -> PlayerGarage:
        """Return a copy with *vehicle* appended."""
        return self.model_copy(update={"vehicles": (*self.vehicles, vehicle)})

    def without_index(self, index: int) -> PlayerGarage:
        """Return a copy with the record at *index* removed.

        Raises :class:`IndexError` when *index* is out of range.
        """
        if not self.has_index(index):
            raise IndexError(f"vehicle index {index} out of range for {len(self.vehicles)} records")
        remaining = self.vehicles[:index] + self.vehicles[index + 1 :]
        return self.model_copy(update={"vehicles": remaining})

    def to_payload(self) -> dict[str, object]:
        """Serializable dict in the on-disk layout."""
        return self.model_dump(mode="json")


def build_inventory(counts: Iterable[tuple[str, int]]) -> tuple[InventorySlot, ...]:
    """Build slots from ``(prefab, count)`` pairs, dropping zero counts."""
    return tuple(InventorySlot(prefab=prefab, count=count) for prefab, count in counts if count > 0)
