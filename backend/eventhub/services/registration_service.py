"""
Registration service with capacity and duplicate checks.

Protocol per attempt:
  1. Read the event snapshot (with its version)
  2. Check duplicate registration, then capacity
  3. Write the updated event; the store rejects it if the version moved
  4. On version conflict re-read and retry, up to MAX_RETRY_ATTEMPTS

Outcomes are returned, never raised, so callers can show a specific message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from eventhub.core.config import get_settings
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_registration, registration_retries
from eventhub.models.event import Event
from eventhub.services.event_store import EventStore, WriteResult

logger = get_logger(__name__)


class RegistrationOutcome(str, Enum):
    REGISTERED = "registered"
    NOT_FOUND = "not_found"
    ALREADY_REGISTERED = "already_registered"
    FULL = "full"
    PERSIST_FAILURE = "persist_failure"
    # unregister only
    UNREGISTERED = "unregistered"
    NOT_REGISTERED = "not_registered"


@dataclass(frozen=True)
class RegistrationResult:
    outcome: RegistrationOutcome
    event: Optional[Event] = None

    @property
    def ok(self) -> bool:
        return self.outcome in {RegistrationOutcome.REGISTERED, RegistrationOutcome.UNREGISTERED}


def _finish(outcome: RegistrationOutcome, event: Optional[Event] = None) -> RegistrationResult:
    record_registration(outcome.value)
    return RegistrationResult(outcome=outcome, event=event)


def register(
    store: EventStore,
    event_id: str,
    registrant_id: str,
    max_attempts: Optional[int] = None,
) -> RegistrationResult:
    """
    Register `registrant_id` for an event.
    Retries on version conflicts; a failed write leaves the stored event unchanged.
    """
    if max_attempts is None:
        max_attempts = get_settings().MAX_RETRY_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        event = store.find_by_id(event_id)
        if event is None:
            return _finish(RegistrationOutcome.NOT_FOUND)

        if registrant_id in event.registrations:
            return _finish(RegistrationOutcome.ALREADY_REGISTERED, event)

        if event.attendees >= event.max_seats:
            logger.warning(
                "registration_failed_full",
                event_id=event_id,
                attendees=event.attendees,
                max_seats=event.max_seats,
            )
            return _finish(RegistrationOutcome.FULL, event)

        updated = event.evolve(
            registrations=(*event.registrations, registrant_id),
            attendees=event.attendees + 1,
        )
        result = store.upsert(updated)

        if result is WriteResult.OK:
            logger.info(
                "registration_created",
                event_id=event_id,
                registrant=registrant_id,
                attendees=updated.attendees,
                attempt=attempt,
            )
            return _finish(RegistrationOutcome.REGISTERED, store.find_by_id(event_id))

        if result is WriteResult.UNAVAILABLE:
            return _finish(RegistrationOutcome.PERSIST_FAILURE, event)

        registration_retries.inc()
        logger.info(
            "registration_retry",
            event_id=event_id,
            attempt=attempt,
            reason="version_conflict",
        )

    logger.warning("registration_retries_exhausted", event_id=event_id, attempts=max_attempts)
    return _finish(RegistrationOutcome.PERSIST_FAILURE, store.find_by_id(event_id))


def unregister(
    store: EventStore,
    event_id: str,
    registrant_id: str,
    max_attempts: Optional[int] = None,
) -> RegistrationResult:
    """Release a registrant's seat, using the same retry loop as `register`."""
    if max_attempts is None:
        max_attempts = get_settings().MAX_RETRY_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        event = store.find_by_id(event_id)
        if event is None:
            return _finish(RegistrationOutcome.NOT_FOUND)

        if registrant_id not in event.registrations:
            return _finish(RegistrationOutcome.NOT_REGISTERED, event)

        updated = event.evolve(
            registrations=tuple(r for r in event.registrations if r != registrant_id),
            attendees=event.attendees - 1,
        )
        result = store.upsert(updated)

        if result is WriteResult.OK:
            logger.info(
                "registration_cancelled",
                event_id=event_id,
                registrant=registrant_id,
                attendees=updated.attendees,
            )
            return _finish(RegistrationOutcome.UNREGISTERED, store.find_by_id(event_id))

        if result is WriteResult.UNAVAILABLE:
            return _finish(RegistrationOutcome.PERSIST_FAILURE, event)

        registration_retries.inc()
        logger.info("unregister_retry", event_id=event_id, attempt=attempt)

    return _finish(RegistrationOutcome.PERSIST_FAILURE, store.find_by_id(event_id))
