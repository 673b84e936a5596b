"""Sphere searches for vehicles around a garage.

Predicates return a value on match and ``None`` otherwise, so whatever
the predicate learned while matching (the vehicle handle, the matched
key id) travels back with the result.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Collection
from typing import TypeVar

from pygarage.world import Entity, VehicleHandle, Vector, World

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Predicate = Callable[[Entity], T | None]


@dataclasses.dataclass(frozen=True, slots=True)
class Candidate:
    """A live vehicle matched for storage, plus the key id that matched it."""

    entity: Entity
    vehicle: VehicleHandle
    key_id: str


class SpatialLocator:
    """First-match search over a world's sphere query."""

    def __init__(self, world: World) -> None:
        self._world = world

    def find_nearest(self, anchor: Vector, radius: float, predicate: Predicate[T]) -> T | None:
        """Return the first predicate match within *radius* of *anchor*.

        Entities are visited in the order the world yields them, which is
        not guaranteed to be by distance.
        """
        for entity in self._world.query_sphere(anchor, radius):
            match = predicate(entity)
            if match is not None:
                return match
        _logger.debug("No match within %.1fm of %s", radius, anchor)
        return None


def _vehicle_with_prefab(entity: Entity) -> VehicleHandle | None:
    vehicle = entity.as_vehicle()
    if vehicle is None or not vehicle.prefab.strip():
        return None
    return vehicle


def keyed_vehicle(key_ids: Collection[str]) -> Predicate[Candidate]:
    """Match a vehicle whose lock id is one of *key_ids*."""

    def _predicate(entity: Entity) -> Candidate | None:
        vehicle = _vehicle_with_prefab(entity)
        if vehicle is None:
            return None
        lock = vehicle.key_lock
        if lock is None or lock.key_id not in key_ids:
            return None
        return Candidate(entity=entity, vehicle=vehicle, key_id=lock.key_id)

    return _predicate


def any_vehicle(entity: Entity) -> VehicleHandle | None:
    """Match any vehicle; used to check that a spawn site is clear."""
    return _vehicle_with_prefab(entity)
