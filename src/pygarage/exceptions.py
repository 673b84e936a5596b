"""Custom exception hierarchy for pygarage."""

from __future__ import annotations

from pathlib import Path


class GarageError(Exception):
    """Base exception for all pygarage errors."""


class GarageConfigError(GarageError):
    """Invalid or missing configuration."""


class GarageValidationError(GarageError):
    """A request argument was rejected before touching any state."""


class GaragePersistenceError(GarageError):
    """Record file could not be read or written."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class RecordCorruptError(GaragePersistenceError):
    """A record file exists but cannot be parsed or validated.

    Callers must not fall back to an empty garage when this is raised;
    saving over the file would destroy the stored vehicles.
    """


class RecordWriteError(GaragePersistenceError):
    """Saving a garage failed (empty owner id, disk full, permissions)."""


class WeaponPresentError(GarageError):
    """A container holds at least one weapon-capable item."""

    def __init__(self, message: str, *, prefabs: tuple[str, ...] = ()) -> None:
        self.prefabs = prefabs
        super().__init__(message)
