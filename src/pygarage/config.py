"""Garage configuration for pygarage."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pygarage._constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_MAX_VEHICLES_PER_PLAYER,
    DEFAULT_SPAWN_CLEAR_RADIUS,
    DEFAULT_STORE_RADIUS,
    KEY_ITEM_PREFAB,
    NOTIFY_TITLE,
)
from pygarage.exceptions import GarageConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise GarageConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class GarageConfig:
    """Garage controller configuration.

    Parameters
    ----------
    data_dir : Path
        Directory holding one ``<player_uid>.json`` file per player.
    max_vehicles_per_player : int
        Per-player storage cap. A deposit is refused once a player has
        this many stored vehicles.
    store_radius : float
        Search radius (meters) around the garage for vehicles to store.
    spawn_clear_radius : float
        Radius (meters) around the spawn point that must be free of
        vehicles before a stored vehicle is spawned.
    key_prefab : str
        Prefab of the physical car key item carried by players.
    notify_title : str
        Title used for every player notification.
    """

    data_dir: Path = Path(DEFAULT_DATA_DIR)
    max_vehicles_per_player: int = DEFAULT_MAX_VEHICLES_PER_PLAYER
    store_radius: float = DEFAULT_STORE_RADIUS
    spawn_clear_radius: float = DEFAULT_SPAWN_CLEAR_RADIUS
    key_prefab: str = KEY_ITEM_PREFAB
    notify_title: str = NOTIFY_TITLE

    def __post_init__(self) -> None:
        # Accept plain strings for data_dir; frozen so go through object.__setattr__.
        if not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir))
        if self.max_vehicles_per_player <= 0:
            raise GarageConfigError(f"max_vehicles_per_player must be positive, got {self.max_vehicles_per_player}")
        if self.store_radius < 0:
            raise GarageConfigError(f"store_radius must not be negative, got {self.store_radius}")
        if self.spawn_clear_radius < 0:
            raise GarageConfigError(f"spawn_clear_radius must not be negative, got {self.spawn_clear_radius}")
        if not self.key_prefab:
            raise GarageConfigError("key_prefab must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> GarageConfig:
        """Create configuration from environment variables.

        Reads optional ``GARAGE_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        GarageConfig
            Populated configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "GARAGE_DATA_DIR": "data_dir",
            "GARAGE_KEY_PREFAB": "key_prefab",
            "GARAGE_NOTIFY_TITLE": "notify_title",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric values are parsed separately so bad input names the variable.
        _ENV_NUMBER_MAP: dict[str, tuple[str, type]] = {
            "GARAGE_MAX_VEHICLES": ("max_vehicles_per_player", int),
            "GARAGE_STORE_RADIUS": ("store_radius", float),
            "GARAGE_SPAWN_CLEAR_RADIUS": ("spawn_clear_radius", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            if field_name in overrides:
                continue
            val = _env_number(env, env_key, cast)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
