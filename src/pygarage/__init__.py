"""pygarage - Per-player vehicle garage storage for shared game worlds."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygarage")
except PackageNotFoundError:
    __version__ = "0+local"
from pygarage.codec import capture, restore
from pygarage.config import GarageConfig
from pygarage.engine import GarageEngine
from pygarage.exceptions import (
    GarageConfigError,
    GarageError,
    GaragePersistenceError,
    GarageValidationError,
    RecordCorruptError,
    RecordWriteError,
    WeaponPresentError,
)
from pygarage.locator import Candidate, SpatialLocator, any_vehicle, keyed_vehicle
from pygarage.models import (
    GarageOutcome,
    GarageResult,
    InventorySlot,
    PlayerGarage,
    StoredVehicle,
)
from pygarage.notify import OUTCOME_MESSAGES, Notifier, message_for
from pygarage.store import RecordStore
from pygarage.world import Transform

__all__ = [
    "__version__",
    "Candidate",
    "GarageConfig",
    "GarageConfigError",
    "GarageEngine",
    "GarageError",
    "GarageOutcome",
    "GaragePersistenceError",
    "GarageResult",
    "GarageValidationError",
    "InventorySlot",
    "Notifier",
    "OUTCOME_MESSAGES",
    "PlayerGarage",
    "RecordCorruptError",
    "RecordStore",
    "RecordWriteError",
    "SpatialLocator",
    "StoredVehicle",
    "Transform",
    "WeaponPresentError",
    "any_vehicle",
    "capture",
    "keyed_vehicle",
    "message_for",
    "restore",
]
