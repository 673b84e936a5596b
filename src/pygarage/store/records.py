"""Per-player garage files.

Files live at ``<data_dir>/<quoted player uid>.json``. The player uid is
percent-encoded with no safe characters, so every uid maps to exactly one
file name inside ``data_dir`` and no uid can reach outside it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from pydantic import ValidationError

from pygarage._constants import RECORD_FILE_SUFFIX
from pygarage._redact import redact_for_log
from pygarage.exceptions import GaragePersistenceError, GarageValidationError, RecordCorruptError, RecordWriteError
from pygarage.models.record import PlayerGarage

_logger = logging.getLogger(__name__)

# NAME_MAX on the filesystems a server profile lives on.
_MAX_FILE_NAME = 255


def normalize_owner_id(owner_id: str) -> str:
    """Validate *owner_id* and return it unchanged.

    Ids are opaque: whitespace is significant and only blank ids, or ids
    too long to become a file name, raise :class:`GarageValidationError`.
    """
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise GarageValidationError("owner id must be non-empty")
    if len(_file_name(owner_id).encode("ascii")) > _MAX_FILE_NAME:
        raise GarageValidationError(f"owner id is too long to store ({len(owner_id)} characters)")
    return owner_id


def _file_name(owner_id: str) -> str:
    return f"{quote(owner_id, safe='')}{RECORD_FILE_SUFFIX}"


def record_path(data_dir: Path, owner_id: str) -> Path:
    """Return the file holding *owner_id*'s garage."""
    return data_dir / _file_name(normalize_owner_id(owner_id))


def _atomic_write_text(path: Path, content: str) -> None:
    """Write *content* to *path* through a temp file and ``os.replace``."""
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=".garage-",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class RecordStore:
    """Load and save :class:`PlayerGarage` collections as JSON files."""

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, owner_id: str) -> Path:
        return record_path(self._data_dir, owner_id)

    def exists(self, owner_id: str) -> bool:
        path = self.path_for(owner_id)
        try:
            return path.is_file()
        except OSError as exc:
            raise GaragePersistenceError(f"Cannot check garage file {path}: {exc}", path=path) from exc

    def load(self, owner_id: str) -> PlayerGarage:
        """Load *owner_id*'s garage.

        A player without a file gets a fresh empty garage. A file that
        cannot be read, decoded or validated raises
        :class:`RecordCorruptError`.
        """
        owner = normalize_owner_id(owner_id)
        path = record_path(self._data_dir, owner)
        try:
            present = path.exists()
        except OSError as exc:
            raise RecordCorruptError(f"Cannot check garage file {path}: {exc}", path=path) from exc
        if not present:
            _logger.debug("No garage file for owner=%s, starting empty", owner)
            return PlayerGarage.empty(owner)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RecordCorruptError(f"Cannot read garage file {path}: {exc}", path=path) from exc

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordCorruptError(f"Garage file {path} is not valid JSON: {exc}", path=path) from exc

        try:
            garage = PlayerGarage.model_validate(payload)
        except ValidationError as exc:
            raise RecordCorruptError(f"Garage file {path} failed validation: {exc}", path=path) from exc

        if garage.player_uid != owner:
            raise RecordCorruptError(
                f"Garage file {path} belongs to {garage.player_uid!r}, expected {owner!r}",
                path=path,
            )

        _logger.debug("Loaded garage owner=%s vehicles=%d", owner, len(garage))
        return garage

    def save(self, garage: PlayerGarage) -> None:
        """Replace the garage file with *garage*.

        Raises :class:`RecordWriteError` if the player uid is blank or too
        long to store, or the write fails.
        """
        try:
            owner = normalize_owner_id(garage.player_uid)
        except GarageValidationError as exc:
            raise RecordWriteError(f"Cannot save garage: {exc}") from exc

        path = record_path(self._data_dir, owner)
        payload = garage.to_payload()
        content = json.dumps(payload, indent=2, ensure_ascii=False)
        try:
            _atomic_write_text(path, content)
        except OSError as exc:
            raise RecordWriteError(f"Cannot write garage file {path}: {exc}", path=path) from exc

        _logger.debug("Saved garage owner=%s payload=%s", owner, redact_for_log(payload))
