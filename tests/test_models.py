"""Tests for the persisted garage models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pygarage.models.outcome import GarageOutcome, GarageResult
from pygarage.models.record import InventorySlot, PlayerGarage, StoredVehicle, build_inventory

CAR = "{5E16DB1B42D5D0A4}Prefabs/Vehicles/Wheeled/UAZ469/UAZ469.et"
FUEL = "{A2B1C3D4E5F60718}Prefabs/Items/Fuel/FuelCan.et"


class TestStoredVehicle:
    SAMPLE_PAYLOAD: dict = {
        "prefab": CAR,
        "inventory": [{"prefab": FUEL, "count": 2}],
        "key_id": "1234-5678-90",
        "key_code": "ABCD",
    }

    def test_parse_payload(self) -> None:
        vehicle = StoredVehicle.model_validate(self.SAMPLE_PAYLOAD)

        assert vehicle.prefab == CAR
        assert vehicle.inventory == (InventorySlot(prefab=FUEL, count=2),)
        assert vehicle.key_id == "1234-5678-90"
        assert vehicle.key_code == "ABCD"
        assert vehicle.item_count == 2

    def test_null_credentials_fall_back_to_defaults(self) -> None:
        vehicle = StoredVehicle.model_validate({"prefab": CAR, "key_id": None, "key_code": None})

        assert vehicle.key_id == ""
        assert vehicle.key_code == ""
        assert vehicle.inventory == ()

    def test_extra_keys_ignored(self) -> None:
        vehicle = StoredVehicle.model_validate({**self.SAMPLE_PAYLOAD, "fuel": 0.5})
        assert vehicle.prefab == CAR

    @pytest.mark.parametrize("prefab", ["", "   "])
    def test_empty_prefab_rejected(self, prefab: str) -> None:
        with pytest.raises(ValidationError):
            StoredVehicle(prefab=prefab)

    def test_zero_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StoredVehicle.model_validate({"prefab": CAR, "inventory": [{"prefab": FUEL, "count": 0}]})

    def test_duplicate_slots_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StoredVehicle.model_validate(
                {"prefab": CAR, "inventory": [{"prefab": FUEL, "count": 1}, {"prefab": FUEL, "count": 2}]}
            )

    def test_frozen(self) -> None:
        vehicle = StoredVehicle.model_validate(self.SAMPLE_PAYLOAD)
        with pytest.raises(ValidationError):
            vehicle.prefab = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("prefab", "expected"),
        [
            ("Some/Path/MyVehicle.et", "MyVehicle"),
            (CAR, "UAZ469"),
            ("NoSlash.et", "NoSlash.et"),
            ("Dotted.Dir/NoExtension", "Dotted.Dir/NoExtension"),
        ],
    )
    def test_display_name(self, prefab: str, expected: str) -> None:
        assert StoredVehicle(prefab=prefab).display_name == expected


class TestPlayerGarage:
    def test_empty(self) -> None:
        garage = PlayerGarage.empty("P1")

        assert garage.player_uid == "P1"
        assert garage.vehicles == ()
        assert len(garage) == 0

    def test_with_vehicle_does_not_mutate_original(self) -> None:
        garage = PlayerGarage.empty("P1")
        updated = garage.with_vehicle(StoredVehicle(prefab=CAR))

        assert len(garage) == 0
        assert len(updated) == 1

    def test_without_index(self) -> None:
        garage = PlayerGarage(
            player_uid="P1",
            vehicles=(StoredVehicle(prefab="a/A.et"), StoredVehicle(prefab="b/B.et"), StoredVehicle(prefab="c/C.et")),
        )

        assert [v.display_name for v in garage.without_index(1).vehicles] == ["A", "C"]
        assert len(garage) == 3

    @pytest.mark.parametrize("index", [-1, 1])
    def test_without_index_out_of_range(self, index: int) -> None:
        garage = PlayerGarage(player_uid="P1", vehicles=(StoredVehicle(prefab=CAR),))

        assert not garage.has_index(index)
        with pytest.raises(IndexError):
            garage.without_index(index)

    def test_payload_layout(self) -> None:
        garage = PlayerGarage.model_validate(
            {"player_uid": "P1", "vehicles": [TestStoredVehicle.SAMPLE_PAYLOAD]},
        )

        assert garage.to_payload() == {"player_uid": "P1", "vehicles": [TestStoredVehicle.SAMPLE_PAYLOAD]}

    def test_blank_uid_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlayerGarage(player_uid=" ")


def test_build_inventory_drops_zero_counts() -> None:
    assert build_inventory([(FUEL, 0), (CAR, 1)]) == (InventorySlot(prefab=CAR, count=1),)


def test_result_ok_flags() -> None:
    assert GarageResult(outcome=GarageOutcome.STORED, owner_id="P1").ok
    assert GarageResult(outcome=GarageOutcome.DELETED, owner_id="P1").ok
    assert not GarageResult(outcome=GarageOutcome.SITE_BLOCKED, owner_id="P1").ok
    assert not GarageResult(outcome=GarageOutcome.NOTHING, owner_id="P1").ok
