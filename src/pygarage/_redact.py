"""Helpers for safe debug logging.

Garage records carry key codes, which work like PINs for the vehicle
lock. This module redacts them before records are emitted to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset({"key_code", "keycode", "pin"})
_REDACTED = "<redacted>"


def redact_for_log(value: Any) -> Any:
    """Return a copy of *value* with key codes masked.

    Models are dumped to JSON-compatible data first; records only nest a
    few levels, so plain recursion is enough.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")

    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED if str(key).lower() in _SENSITIVE_VALUE_KEYS else redact_for_log(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item) for item in value]
    return value
