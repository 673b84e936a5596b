from __future__ import annotations

import itertools

import pytest

from pygarage.codec import capture, manifest_counts, restore
from pygarage.exceptions import WeaponPresentError
from pygarage.models.record import InventorySlot
from pygarage.sandbox import SandboxItem

FUEL = "Prefabs/Items/Fuel/FuelCan.et"
BANDAGE = "Prefabs/Items/Medicine/Bandage.et"
SHOVEL = "Prefabs/Items/Tools/Shovel.et"
PISTOL = "Prefabs/Weapons/Handguns/M9.et"


def _items(*prefabs: str) -> list[SandboxItem]:
    return [SandboxItem(prefab=prefab, is_weapon=prefab == PISTOL) for prefab in prefabs]


class TestCapture:
    def test_coalesces_in_first_seen_order(self) -> None:
        manifest = capture(_items(FUEL, BANDAGE, FUEL, SHOVEL, BANDAGE, FUEL))

        assert manifest == (
            InventorySlot(prefab=FUEL, count=3),
            InventorySlot(prefab=BANDAGE, count=2),
            InventorySlot(prefab=SHOVEL, count=1),
        )

    def test_empty_container(self) -> None:
        assert capture([]) == ()

    def test_counts_do_not_depend_on_item_order(self) -> None:
        prefabs = (FUEL, BANDAGE, FUEL, SHOVEL)
        expected = {FUEL: 2, BANDAGE: 1, SHOVEL: 1}
        for ordering in itertools.permutations(prefabs):
            assert manifest_counts(capture(_items(*ordering))) == expected

    @pytest.mark.parametrize("position", [0, 2, 4])
    def test_weapon_anywhere_fails(self, position: int) -> None:
        prefabs = [FUEL, BANDAGE, FUEL, SHOVEL]
        prefabs.insert(position, PISTOL)

        with pytest.raises(WeaponPresentError) as excinfo:
            capture(_items(*prefabs))

        assert excinfo.value.prefabs == (PISTOL,)

    @pytest.mark.parametrize("blank", ["", "  "])
    def test_items_without_prefab_are_left_out(self, blank: str) -> None:
        manifest = capture(_items(FUEL, blank, BANDAGE, blank))

        assert manifest_counts(manifest) == {FUEL: 1, BANDAGE: 1}


class TestRestore:
    def test_expands_slots_in_stored_order(self) -> None:
        manifest = (InventorySlot(prefab=SHOVEL, count=1), InventorySlot(prefab=FUEL, count=2))

        assert restore(manifest) == [SHOVEL, FUEL, FUEL]

    def test_inverse_of_capture(self) -> None:
        items = _items(BANDAGE, FUEL, BANDAGE, SHOVEL, BANDAGE)

        spawned = restore(capture(items))

        assert sorted(spawned) == sorted(item.prefab for item in items)
