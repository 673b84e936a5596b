"""Vehicle inventory capture and restore.

Captured manifests are coalesced: one slot per item prefab, slots in
first-seen order. Item instances are fungible within a prefab, so a
restore reproduces counts, not identities.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from pygarage.exceptions import WeaponPresentError
from pygarage.models.record import InventorySlot, build_inventory
from pygarage.world import Item

_logger = logging.getLogger(__name__)


def capture(items: Sequence[Item]) -> tuple[InventorySlot, ...]:
    """Coalesce *items* into inventory slots.

    The whole container is checked for weapons before anything is
    counted. Raises :class:`WeaponPresentError` if any item is
    weapon-capable. Items without a prefab cannot be respawned and are
    left out of the manifest.
    """
    weapons = tuple(item.prefab for item in items if item.is_weapon)
    if weapons:
        raise WeaponPresentError(f"{len(weapons)} weapon(s) in compartment", prefabs=weapons)

    # Counter keeps first-insertion order.
    counts = Counter(item.prefab for item in items if item.prefab.strip())
    skipped = len(items) - sum(counts.values())
    if skipped:
        _logger.debug("Skipped %d item(s) without a prefab", skipped)
    return build_inventory(counts.items())


def restore(manifest: Iterable[InventorySlot]) -> list[str]:
    """Expand a manifest into one prefab per item to spawn, in slot order."""
    spawn: list[str] = []
    for slot in manifest:
        spawn.extend([slot.prefab] * slot.count)
    return spawn


def manifest_counts(manifest: Iterable[InventorySlot]) -> dict[str, int]:
    return {slot.prefab: slot.count for slot in manifest}
