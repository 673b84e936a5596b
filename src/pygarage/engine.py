"""Garage controller: store nearby vehicles and spawn them back."""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator

from pygarage import codec
from pygarage._redact import redact_for_log
from pygarage.config import GarageConfig
from pygarage.exceptions import GarageValidationError, RecordCorruptError, RecordWriteError, WeaponPresentError
from pygarage.locator import Candidate, SpatialLocator, any_vehicle, keyed_vehicle
from pygarage.models.outcome import GarageOutcome, GarageResult
from pygarage.models.record import PlayerGarage, StoredVehicle
from pygarage.notify import Notifier, NullNotifier, send_outcome
from pygarage.store.records import RecordStore, normalize_owner_id
from pygarage.world import GarageSite, Inventory, Item, Players, VehicleHandle, held_key_ids, is_key_item

_logger = logging.getLogger(__name__)


class _OwnerLocks:
    """Mutex per owner id, kept only while someone holds or waits for it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # owner id -> [lock, holders and waiters]
        self._locks: dict[str, list] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextlib.contextmanager
    def hold(self, owner_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(owner_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[owner_id]


def _validate_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise GarageValidationError(f"vehicle index must be an int, got {type(index).__name__}")
    return index


class GarageEngine:
    """Server-side garage attached to one world site.

    Usage::

        engine = GarageEngine(site, players, config=GarageConfig.from_env())
        result = engine.deposit(player_uid, player_id)
        if result.ok:
            ...

    Every operation reloads the owner's file, mutates it and saves it
    while holding that owner's lock, so back-to-back requests for the
    same player cannot lose updates.
    """

    def __init__(
        self,
        site: GarageSite,
        players: Players,
        *,
        config: GarageConfig | None = None,
        store: RecordStore | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._site = site
        self._players = players
        self._config = config or GarageConfig()
        self._store = store or RecordStore(self._config.data_dir)
        self._notifier: Notifier = notifier or NullNotifier()
        self._locator = SpatialLocator(site.world)
        self._locks = _OwnerLocks()

    @property
    def config(self) -> GarageConfig:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_records(self, owner_id: str) -> list[StoredVehicle]:
        """Return the owner's stored vehicles in retrieval order.

        Raises :class:`RecordCorruptError` if the owner's file is unreadable.
        """
        owner = normalize_owner_id(owner_id)
        with self._locks.hold(owner):
            return list(self._store.load(owner).vehicles)

    # ------------------------------------------------------------------
    # Deposit
    # ------------------------------------------------------------------

    def deposit(self, owner_id: str, requester_id: int) -> GarageResult:
        """Store the first keyed vehicle near the garage.

        Flow:
          1) Collect key ids from the requester's key items
          2) Find a vehicle within ``store_radius`` matching one of them
          3) Reject occupied vehicles and vehicles carrying weapons
          4) Check capacity, append the record and save
          5) Only after a successful save, remove the vehicle from the
             world and take back one matching key
        """
        owner = normalize_owner_id(owner_id)
        player_inventory = self._players.inventory(requester_id)
        key_ids = (
            held_key_ids(player_inventory, self._config.key_prefab) if player_inventory is not None else frozenset()
        )
        _logger.debug("Deposit owner=%s requester=%s keys=%d", owner, requester_id, len(key_ids))

        candidate = self._locator.find_nearest(
            self._site.transform.position,
            self._config.store_radius,
            keyed_vehicle(key_ids),
        )
        if candidate is None:
            return self._finish(owner, requester_id, GarageOutcome.OUT_OF_RANGE)

        vehicle = candidate.vehicle
        if vehicle.seats_occupied():
            return self._finish(owner, requester_id, GarageOutcome.OCCUPIED)

        try:
            manifest = codec.capture(vehicle.inventory.items())
        except WeaponPresentError as exc:
            _logger.debug("Deposit refused owner=%s weapons=%s", owner, exc.prefabs)
            return self._finish(owner, requester_id, GarageOutcome.WEAPONS_PRESENT)

        lock = vehicle.key_lock
        record = StoredVehicle(
            prefab=vehicle.prefab,
            inventory=manifest,
            key_id=candidate.key_id,
            key_code=lock.key_code if lock is not None else "",
        )

        with self._locks.hold(owner):
            garage = self._load_for_update(owner)
            if garage is None:
                return self._finish(owner, requester_id, GarageOutcome.PERSIST_FAILED)
            if len(garage) >= self._config.max_vehicles_per_player:
                return self._finish(owner, requester_id, GarageOutcome.CAPACITY_EXCEEDED, remaining=len(garage))

            updated = garage.with_vehicle(record)
            if not self._save(updated):
                return self._finish(owner, requester_id, GarageOutcome.PERSIST_FAILED, remaining=len(garage))

            self._site.world.destroy(candidate.entity)
            if player_inventory is not None:
                self._take_key(player_inventory, candidate)

        _logger.info(
            "Stored %s for owner=%s (%d/%d)",
            record.prefab,
            owner,
            len(updated),
            self._config.max_vehicles_per_player,
        )
        return self._finish(owner, requester_id, GarageOutcome.STORED, record=record, remaining=len(updated))

    def _take_key(self, inventory: Inventory, candidate: Candidate) -> None:
        key_prefab = self._config.key_prefab

        def _matches(item: Item) -> bool:
            lock = item.key_lock
            return is_key_item(item, key_prefab) and lock is not None and lock.key_id == candidate.key_id

        key_item = inventory.find_first(_matches)
        if key_item is not None:
            inventory.remove(key_item)

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, owner_id: str, index: int, requester_id: int) -> GarageResult:
        """Spawn the stored vehicle at *index* and remove it from the garage.

        The removal is staged and only committed by a successful save; if
        the save fails, the freshly spawned vehicle is destroyed and the
        record stays stored.
        """
        owner = normalize_owner_id(owner_id)
        index = _validate_index(index)

        with self._locks.hold(owner):
            garage = self._load_for_update(owner)
            if garage is None or not garage.has_index(index):
                _logger.debug("Retrieve no-op owner=%s index=%d", owner, index)
                return self._finish(owner, requester_id, GarageOutcome.NOTHING)

            record = garage.vehicles[index]
            transform = self._site.spawn_transform or self._site.transform

            blocker = self._locator.find_nearest(transform.position, self._config.spawn_clear_radius, any_vehicle)
            if blocker is not None:
                return self._finish(owner, requester_id, GarageOutcome.SITE_BLOCKED, remaining=len(garage))

            world = self._site.world
            entity = world.spawn(record.prefab, transform)
            if entity is None:
                _logger.warning("Could not spawn %s for owner=%s", record.prefab, owner)
                return self._finish(owner, requester_id, GarageOutcome.NOTHING, remaining=len(garage))
            vehicle = entity.as_vehicle()
            if vehicle is None:
                _logger.warning("Prefab %s is not a vehicle; owner=%s", record.prefab, owner)
                world.destroy(entity)
                return self._finish(owner, requester_id, GarageOutcome.NOTHING, remaining=len(garage))

            staged = garage.without_index(index)
            self._rehydrate(vehicle, record)

            if not self._save(staged):
                world.destroy(entity)
                return self._finish(owner, requester_id, GarageOutcome.PERSIST_FAILED, remaining=len(garage))

        _logger.info("Retrieved %s for owner=%s", record.prefab, owner)
        return self._finish(owner, requester_id, GarageOutcome.RETRIEVED, record=record, remaining=len(staged))

    def _rehydrate(self, vehicle: VehicleHandle, record: StoredVehicle) -> None:
        inventory = vehicle.inventory
        for item in list(inventory.items()):
            inventory.remove(item)

        for prefab in codec.restore(record.inventory):
            if inventory.spawn(prefab) is None:
                _logger.debug("Could not restore item %s into %s", prefab, record.prefab)

        lock = vehicle.key_lock
        if lock is not None:
            lock.set_id(record.key_id)
            lock.set_code(record.key_code)
            lock.set_locked(False)

        key_item = inventory.spawn(self._config.key_prefab)
        key_lock = key_item.key_lock if key_item is not None else None
        # A key template may already carry its own id; leave it alone.
        if key_lock is not None and not key_lock.key_id:
            key_lock.set_id(record.key_id)
            key_lock.set_code(record.key_code)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_record(self, owner_id: str, index: int) -> GarageResult:
        """Drop the stored vehicle at *index* without spawning it."""
        owner = normalize_owner_id(owner_id)
        index = _validate_index(index)

        with self._locks.hold(owner):
            garage = self._load_for_update(owner)
            if garage is None or not garage.has_index(index):
                return GarageResult(outcome=GarageOutcome.NOTHING, owner_id=owner)

            record = garage.vehicles[index]
            staged = garage.without_index(index)
            if not self._save(staged):
                return GarageResult(outcome=GarageOutcome.PERSIST_FAILED, owner_id=owner, remaining=len(garage))

        _logger.info("Deleted %s for owner=%s", record.prefab, owner)
        return GarageResult(outcome=GarageOutcome.DELETED, owner_id=owner, record=record, remaining=len(staged))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_for_update(self, owner: str) -> PlayerGarage | None:
        try:
            return self._store.load(owner)
        except RecordCorruptError as exc:
            _logger.warning("Garage file for owner=%s is unusable: %s", owner, exc)
            return None

    def _save(self, garage: PlayerGarage) -> bool:
        try:
            self._store.save(garage)
        except RecordWriteError as exc:
            _logger.warning("Saving garage for owner=%s failed: %s", garage.player_uid, exc)
            return False
        return True

    def _finish(
        self,
        owner: str,
        requester_id: int,
        outcome: GarageOutcome,
        *,
        record: StoredVehicle | None = None,
        remaining: int | None = None,
    ) -> GarageResult:
        if record is not None:
            _logger.debug("Outcome %s owner=%s record=%s", outcome, owner, redact_for_log(record))
        else:
            _logger.debug("Outcome %s owner=%s", outcome, owner)
        send_outcome(self._notifier, requester_id, self._config.notify_title, outcome)
        return GarageResult(outcome=outcome, owner_id=owner, record=record, remaining=remaining)
