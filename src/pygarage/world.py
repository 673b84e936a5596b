"""Interfaces of the game world the garage engine talks to.

The engine never touches a concrete game engine directly. Hosts adapt
their entity/component model to these protocols; :mod:`pygarage.sandbox`
provides an in-memory implementation.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

Vector = tuple[float, float, float]


@dataclasses.dataclass(frozen=True, slots=True)
class Transform:
    """World placement: position plus yaw/pitch/roll in degrees."""

    position: Vector = (0.0, 0.0, 0.0)
    rotation: Vector = (0.0, 0.0, 0.0)

    def distance_to(self, point: Vector) -> float:
        return math.dist(self.position, point)


class KeyLock(Protocol):
    """Key credential attached to a vehicle or to a key item."""

    @property
    def key_id(self) -> str: ...

    @property
    def key_code(self) -> str: ...

    @property
    def locked(self) -> bool: ...

    def set_id(self, key_id: str) -> None: ...

    def set_code(self, key_code: str) -> None: ...

    def set_locked(self, locked: bool) -> None: ...


class Item(Protocol):
    """An inventory item."""

    @property
    def prefab(self) -> str: ...

    @property
    def is_weapon(self) -> bool: ...

    @property
    def key_lock(self) -> KeyLock | None: ...


class Inventory(Protocol):
    """Item storage of a player or a vehicle."""

    def items(self) -> Sequence[Item]: ...

    def spawn(self, prefab: str) -> Item | None: ...

    def remove(self, item: Item) -> bool: ...

    def find_first(self, predicate: Callable[[Item], bool]) -> Item | None: ...


class VehicleHandle(Protocol):
    """Vehicle capability of a world entity."""

    @property
    def prefab(self) -> str: ...

    @property
    def inventory(self) -> Inventory: ...

    @property
    def key_lock(self) -> KeyLock | None: ...

    def seats_occupied(self) -> bool: ...


class Entity(Protocol):
    """Anything living in the world."""

    @property
    def prefab(self) -> str: ...

    def as_vehicle(self) -> VehicleHandle | None:
        """Return the vehicle capability, or ``None`` for non-vehicles."""
        ...


class World(Protocol):
    def query_sphere(self, center: Vector, radius: float) -> Iterable[Entity]:
        """Yield entities within *radius* of *center* in world-defined order."""
        ...

    def spawn(self, prefab: str, transform: Transform) -> Entity | None: ...

    def destroy(self, entity: Entity) -> None: ...


class GarageSite(Protocol):
    """The world object (sign, terminal) a garage is attached to."""

    @property
    def world(self) -> World: ...

    @property
    def transform(self) -> Transform: ...

    @property
    def spawn_transform(self) -> Transform | None:
        """Configured spawn point in world space, if any."""
        ...


class Players(Protocol):
    def inventory(self, requester_id: int) -> Inventory | None:
        """Inventory of the entity the player currently controls."""
        ...


def is_key_item(item: Item, key_prefab: str) -> bool:
    return item.prefab == key_prefab and item.key_lock is not None


def held_key_ids(inventory: Inventory, key_prefab: str) -> frozenset[str]:
    """Key ids of every key item in *inventory*, ignoring blank ids."""
    key_ids: set[str] = set()
    for item in inventory.items():
        if not is_key_item(item, key_prefab):
            continue
        lock = item.key_lock
        if lock is not None and lock.key_id:
            key_ids.add(lock.key_id)
    return frozenset(key_ids)
