from __future__ import annotations

# pylint: disable=redefined-outer-name

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pygarage.config import GarageConfig
from pygarage.engine import GarageEngine
from pygarage.sandbox import (
    ItemCatalog,
    RecordingNotifier,
    SandboxInventory,
    SandboxPlayers,
    SandboxSite,
    SandboxVehicle,
    SandboxWorld,
)
from pygarage.store import RecordStore
from pygarage.world import Transform, Vector


@dataclass
class Scene:
    """A garage at the origin with its spawn point 20m east."""

    CAR = "{5E16DB1B42D5D0A4}Prefabs/Vehicles/Wheeled/UAZ469/UAZ469.et"
    TRUCK = "{91C4ABC1AF8A1B9F}Prefabs/Vehicles/Wheeled/Ural4320/Ural4320_transport.et"
    FUEL = "{A2B1C3D4E5F60718}Prefabs/Items/Fuel/FuelCan.et"
    MEDKIT = "{0C47A6B1E4C9D2F3}Prefabs/Items/Medicine/FieldDressing.et"
    RIFLE = "{3E413771E1834D2F}Prefabs/Weapons/Rifles/M16/Rifle_M16A2.et"
    OWNER = "76561198000000001"
    PLAYER_ID = 7

    config: GarageConfig
    catalog: ItemCatalog = field(default_factory=lambda: ItemCatalog(weapon_prefabs=frozenset({Scene.RIFLE})))
    world: SandboxWorld = field(init=False)
    site: SandboxSite = field(init=False)
    players: SandboxPlayers = field(init=False)
    notifier: RecordingNotifier = field(default_factory=RecordingNotifier)
    engine: GarageEngine = field(init=False)

    def __post_init__(self) -> None:
        self.world = SandboxWorld(self.catalog, vehicle_prefabs={self.CAR, self.TRUCK})
        self.site = SandboxSite(
            world=self.world,
            transform=Transform((0.0, 0.0, 0.0)),
            spawn_transform=Transform((20.0, 0.0, 0.0), (90.0, 0.0, 0.0)),
        )
        self.players = SandboxPlayers(self.catalog)
        self.engine = self.make_engine()

    def make_engine(self, *, store: RecordStore | None = None) -> GarageEngine:
        return GarageEngine(self.site, self.players, config=self.config, store=store, notifier=self.notifier)

    @property
    def store(self) -> RecordStore:
        return self.engine.store

    def player(self, keys: Iterable[tuple[str, str]] = (), requester_id: int | None = None) -> SandboxInventory:
        return self.players.join(self.PLAYER_ID if requester_id is None else requester_id, keys=keys)

    def park(
        self,
        prefab: str | None = None,
        *,
        key_id: str = "KEY-1",
        key_code: str = "1234",
        items: Iterable[str] = (),
        position: Vector = (3.0, 0.0, 0.0),
    ) -> SandboxVehicle:
        return self.world.add_vehicle(
            prefab or self.CAR,
            position,
            key_id=key_id,
            key_code=key_code,
            items=items,
        )

    def deposit_parked(self, key_id: str, *, prefab: str | None = None, items: Iterable[str] = ()) -> None:
        """Park a keyed vehicle, hand the player its key and store it."""
        self.park(prefab, key_id=key_id, key_code=f"code-{key_id}", items=items)
        self.player(keys=[(key_id, f"code-{key_id}")])
        result = self.engine.deposit(self.OWNER, self.PLAYER_ID)
        assert result.ok, result


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "BLG"


@pytest.fixture
def scene(data_dir: Path) -> Scene:
    return Scene(config=GarageConfig(data_dir=data_dir, max_vehicles_per_player=2))
