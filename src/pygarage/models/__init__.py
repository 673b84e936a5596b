"""Data models for garage storage."""

from pygarage.models._base import GarageBaseModel, NonEmptyStr
from pygarage.models.outcome import GarageOutcome, GarageResult
from pygarage.models.record import InventorySlot, PlayerGarage, StoredVehicle, build_inventory

__all__ = [
    "GarageBaseModel",
    "GarageOutcome",
    "GarageResult",
    "InventorySlot",
    "NonEmptyStr",
    "PlayerGarage",
    "StoredVehicle",
    "build_inventory",
]
