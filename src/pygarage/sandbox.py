"""In-memory world for tests and offline scripts.

Implements the protocols in :mod:`pygarage.world` with plain
dataclasses. Sphere queries yield entities in spawn order, not by
distance, like a real engine is allowed to.
"""

from __future__ import annotations

import dataclasses
import itertools
from collections.abc import Callable, Iterable, Iterator, Sequence

from pygarage._constants import KEY_ITEM_PREFAB
from pygarage.world import Transform, Vector

_ids = itertools.count(1)


@dataclasses.dataclass
class SandboxKeyLock:
    key_id: str = ""
    key_code: str = ""
    locked: bool = True

    def set_id(self, key_id: str) -> None:
        self.key_id = key_id

    def set_code(self, key_code: str) -> None:
        self.key_code = key_code

    def set_locked(self, locked: bool) -> None:
        self.locked = locked


@dataclasses.dataclass(eq=False)
class SandboxItem:
    prefab: str
    is_weapon: bool = False
    key_lock: SandboxKeyLock | None = None
    item_id: int = dataclasses.field(default_factory=lambda: next(_ids))


@dataclasses.dataclass
class ItemCatalog:
    """Decides what a spawned item looks like."""

    key_prefab: str = KEY_ITEM_PREFAB
    weapon_prefabs: frozenset[str] = frozenset()
    unspawnable: frozenset[str] = frozenset()
    preset_key_id: str = ""
    """Key id a freshly spawned key item already carries (empty: none)."""

    def make(self, prefab: str) -> SandboxItem | None:
        if prefab in self.unspawnable:
            return None
        if prefab == self.key_prefab:
            return SandboxItem(prefab=prefab, key_lock=SandboxKeyLock(key_id=self.preset_key_id))
        return SandboxItem(prefab=prefab, is_weapon=prefab in self.weapon_prefabs)

    def key(self, key_id: str, key_code: str = "") -> SandboxItem:
        return SandboxItem(prefab=self.key_prefab, key_lock=SandboxKeyLock(key_id=key_id, key_code=key_code))


class SandboxInventory:
    def __init__(self, catalog: ItemCatalog, items: Iterable[SandboxItem] = ()) -> None:
        self._catalog = catalog
        self._items: list[SandboxItem] = list(items)

    def __iter__(self) -> Iterator[SandboxItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> Sequence[SandboxItem]:
        return tuple(self._items)

    def add(self, item: SandboxItem) -> SandboxItem:
        self._items.append(item)
        return item

    def spawn(self, prefab: str) -> SandboxItem | None:
        item = self._catalog.make(prefab)
        if item is not None:
            self._items.append(item)
        return item

    def remove(self, item: SandboxItem) -> bool:
        for pos, existing in enumerate(self._items):
            if existing is item:
                del self._items[pos]
                return True
        return False

    def find_first(self, predicate: Callable[[SandboxItem], bool]) -> SandboxItem | None:
        return next((item for item in self._items if predicate(item)), None)

    def prefabs(self) -> list[str]:
        return [item.prefab for item in self._items]


class SandboxEntity:
    """Non-vehicle world entity (props, characters)."""

    def __init__(self, prefab: str, transform: Transform) -> None:
        self.prefab = prefab
        self.transform = transform
        self.entity_id = next(_ids)

    def as_vehicle(self) -> SandboxVehicle | None:
        return None


class SandboxVehicle(SandboxEntity):
    def __init__(
        self,
        prefab: str,
        transform: Transform,
        catalog: ItemCatalog,
        *,
        key_lock: SandboxKeyLock | None = None,
        seats: int = 4,
        items: Iterable[SandboxItem] = (),
    ) -> None:
        super().__init__(prefab, transform)
        self.inventory = SandboxInventory(catalog, items)
        self.key_lock = key_lock
        self.seats: list[bool] = [False] * seats

    def as_vehicle(self) -> SandboxVehicle:
        return self

    def seats_occupied(self) -> bool:
        return any(self.seats)


class SandboxWorld:
    def __init__(
        self,
        catalog: ItemCatalog | None = None,
        *,
        vehicle_prefabs: Iterable[str] = (),
        default_cargo: dict[str, Sequence[str]] | None = None,
    ) -> None:
        self.catalog = catalog or ItemCatalog()
        self.vehicle_prefabs = set(vehicle_prefabs)
        self.default_cargo = dict(default_cargo or {})
        self.entities: list[SandboxEntity] = []
        self.destroyed: list[SandboxEntity] = []

    def add_vehicle(
        self,
        prefab: str,
        position: Vector = (0.0, 0.0, 0.0),
        *,
        key_id: str = "",
        key_code: str = "",
        items: Iterable[str] = (),
        seats: int = 4,
    ) -> SandboxVehicle:
        """Place a vehicle with a lock and cargo built from item prefabs."""
        cargo = [item for item in (self.catalog.make(prefab) for prefab in items) if item is not None]
        vehicle = SandboxVehicle(
            prefab,
            Transform(position),
            self.catalog,
            key_lock=SandboxKeyLock(key_id=key_id, key_code=key_code),
            seats=seats,
            items=cargo,
        )
        self.entities.append(vehicle)
        return vehicle

    def add_entity(self, prefab: str, position: Vector = (0.0, 0.0, 0.0)) -> SandboxEntity:
        entity = SandboxEntity(prefab, Transform(position))
        self.entities.append(entity)
        return entity

    def query_sphere(self, center: Vector, radius: float) -> Iterator[SandboxEntity]:
        # Snapshot so callers may destroy while iterating.
        for entity in list(self.entities):
            if entity.transform.distance_to(center) <= radius:
                yield entity

    def spawn(self, prefab: str, transform: Transform) -> SandboxEntity | None:
        entity: SandboxEntity
        if prefab in self.vehicle_prefabs:
            vehicle = SandboxVehicle(prefab, transform, self.catalog, key_lock=SandboxKeyLock())
            for cargo in self.default_cargo.get(prefab, ()):
                vehicle.inventory.spawn(cargo)
            entity = vehicle
        elif prefab:
            entity = SandboxEntity(prefab, transform)
        else:
            return None
        self.entities.append(entity)
        return entity

    def destroy(self, entity: SandboxEntity) -> None:
        self.entities = [existing for existing in self.entities if existing is not entity]
        self.destroyed.append(entity)

    def vehicles(self) -> list[SandboxVehicle]:
        return [entity for entity in self.entities if isinstance(entity, SandboxVehicle)]


@dataclasses.dataclass
class SandboxSite:
    world: SandboxWorld
    transform: Transform = Transform()
    spawn_transform: Transform | None = None


class SandboxPlayers:
    def __init__(self, catalog: ItemCatalog) -> None:
        self._catalog = catalog
        self._inventories: dict[int, SandboxInventory] = {}

    def join(self, requester_id: int, *, keys: Iterable[tuple[str, str]] = ()) -> SandboxInventory:
        inventory = SandboxInventory(self._catalog, (self._catalog.key(key_id, code) for key_id, code in keys))
        self._inventories[requester_id] = inventory
        return inventory

    def inventory(self, requester_id: int) -> SandboxInventory | None:
        return self._inventories.get(requester_id)


@dataclasses.dataclass
class RecordingNotifier:
    sent: list[tuple[int, str, str]] = dataclasses.field(default_factory=list)

    def notify(self, requester_id: int, title: str, message: str) -> None:
        self.sent.append((requester_id, title, message))

    @property
    def messages(self) -> list[str]:
        return [message for _, _, message in self.sent]
