"""Player-facing messages for garage outcomes."""

from __future__ import annotations

import logging
from typing import Protocol

from pygarage.models.outcome import GarageOutcome

_logger = logging.getLogger(__name__)

OUTCOME_MESSAGES: dict[GarageOutcome, str] = {
    GarageOutcome.OUT_OF_RANGE: "Your vehicle is not within the storage radius",
    GarageOutcome.WEAPONS_PRESENT: "Weapons in compartment, please remove before storage.",
    GarageOutcome.CAPACITY_EXCEEDED: "Garage is full, can't store more vehicles.",
    GarageOutcome.STORED: "Your vehicle has been stored.",
    GarageOutcome.SITE_BLOCKED: "Can't spawn vehicle, area blocked.",
    GarageOutcome.RETRIEVED: "Your vehicle has been removed from the garage.",
    GarageOutcome.PERSIST_FAILED: "Garage storage is unavailable, please try again later.",
}
"""Outcomes missing here (occupied seats, no-ops, deletes) are silent."""


def message_for(outcome: GarageOutcome) -> str | None:
    return OUTCOME_MESSAGES.get(outcome)


class Notifier(Protocol):
    def notify(self, requester_id: int, title: str, message: str) -> None: ...


class NullNotifier:
    """Drops every notification."""

    def notify(self, requester_id: int, title: str, message: str) -> None:
        return None


def send_outcome(notifier: Notifier, requester_id: int, title: str, outcome: GarageOutcome) -> None:
    """Deliver the message for *outcome*, if it has one.

    Delivery problems are logged; they never change the outcome.
    """
    message = message_for(outcome)
    if message is None:
        return
    try:
        notifier.notify(requester_id, title, message)
    except Exception:  # noqa: BLE001 - notifier is host code
        _logger.debug("Notification to requester=%s failed", requester_id, exc_info=True)
