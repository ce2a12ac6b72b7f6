"""
Event lifecycle: creation, owner/admin status changes, deletion, seeding,
export, the storage health check and the admin data reset.
"""

import json
import secrets
import string
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from eventhub.core.config import get_settings
from eventhub.core.exceptions import (
    EventNotFoundError,
    EventValidationError,
    InvalidStatusTransitionError,
    MalformedDataError,
    PermissionDeniedError,
    StorageUnavailableError,
    WriteConflictError,
)
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_transition
from eventhub.models.event import Event, EventStatus
from eventhub.models.user import Session
from eventhub.schemas.event import EVENT_FORM_RULES, parse_date, validate_fields
from eventhub.services.event_store import EventStore, WriteResult, decode_events

logger = get_logger(__name__)

HEALTHCHECK_KEY = "eventhub_healthcheck"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_event_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"evt_{int(time.time() * 1000)}_{suffix}"


def _normalize_form(form: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(form)
    # Older forms post a single `time` field
    if "time" in data and not data.get("startTime"):
        data["startTime"] = data.pop("time")
    return data


def validate_event_form(form: Mapping[str, Any], today: Optional[date] = None) -> dict[str, list[str]]:
    return validate_fields(_normalize_form(form), EVENT_FORM_RULES, today or date.today())


def _require_manage_permission(session: Session, event: Event) -> None:
    if session.is_admin:
        return
    if event.organizer_id != session.user_id:
        raise PermissionDeniedError("not organizer for this event")


def create_event(
    store: EventStore,
    session: Session,
    form: Mapping[str, Any],
    today: Optional[date] = None,
) -> Event:
    """Validate an event form and persist a new event with no registrations."""
    if not session.can_organize:
        raise PermissionDeniedError("only organizers or admins can create events")

    data = _normalize_form(form)
    errors = validate_fields(data, EVENT_FORM_RULES, today or date.today())
    if errors:
        logger.info("event_validation_failed", fields=sorted(errors))
        raise EventValidationError(errors)

    settings = get_settings()
    event = Event(
        id=generate_event_id(),
        title=str(data["title"]).strip(),
        description=str(data["description"]).strip(),
        date=parse_date(data["date"]),
        start_time=str(data["startTime"]).strip(),
        end_time=str(data.get("endTime") or "").strip() or None,
        venue=str(data["venue"]).strip(),
        category=data["category"],
        max_seats=int(data["maxSeats"]),
        organizer=session.name,
        organizer_id=session.user_id,
        created_at=datetime.now(timezone.utc),
        status=EventStatus.PENDING if settings.EVENTS_REQUIRE_APPROVAL else EventStatus.ACTIVE,
        attendees=0,
        registrations=(),
        image=data.get("image") or None,
    )

    if store.upsert(event) is not WriteResult.OK:
        raise StorageUnavailableError("failed to save event")

    record_transition("created")
    logger.info("event_created", event_id=event.id, title=event.title, seats=event.max_seats, status=event.status.value)
    return store.find_by_id(event.id) or event


def change_status(
    store: EventStore,
    event_id: str,
    target: EventStatus,
    allowed_from: Iterable[EventStatus],
    action: str,
    check: Optional[Callable[[Event], None]] = None,
    changes: Optional[dict[str, Any]] = None,
) -> Event:
    """
    Move an event to `target` if its current status is in `allowed_from`.
    `check` runs against the fresh snapshot on every attempt (permissions).
    """
    allowed = set(allowed_from)
    attempts = get_settings().MAX_RETRY_ATTEMPTS

    for attempt in range(1, attempts + 1):
        event = store.find_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if check is not None:
            check(event)
        if event.status not in allowed:
            raise InvalidStatusTransitionError(event_id, event.status.value, target.value)

        result = store.upsert(event.evolve(status=target, **(changes or {})))
        if result is WriteResult.OK:
            record_transition(action)
            logger.info("event_status_changed", event_id=event_id, status=target.value, action=action)
            return store.find_by_id(event_id)
        if result is WriteResult.UNAVAILABLE:
            raise StorageUnavailableError(f"failed to save event {event_id}")

        logger.info("event_status_retry", event_id=event_id, attempt=attempt)

    raise WriteConflictError(event_id, attempts)


def cancel_event(store: EventStore, session: Session, event_id: str) -> Event:
    return change_status(
        store, event_id, EventStatus.CANCELLED,
        allowed_from={EventStatus.PENDING, EventStatus.ACTIVE},
        action="cancelled",
        check=lambda event: _require_manage_permission(session, event),
    )


def complete_event(store: EventStore, session: Session, event_id: str) -> Event:
    return change_status(
        store, event_id, EventStatus.COMPLETED,
        allowed_from={EventStatus.ACTIVE},
        action="completed",
        check=lambda event: _require_manage_permission(session, event),
    )


def delete_event(store: EventStore, session: Session, event_id: str) -> None:
    """Permanently remove an event. Owner or admin only."""
    event = store.find_by_id(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    _require_manage_permission(session, event)

    if store.remove(event_id) is not WriteResult.OK:
        raise StorageUnavailableError(f"failed to delete event {event_id}")

    record_transition("deleted")
    logger.info("event_deleted", event_id=event_id, by=session.user_id)


def seed_sample_events(store: EventStore, today: Optional[date] = None) -> list[Event]:
    """Store three sample events if the store is empty. Returns what was added."""
    if store.load_all():
        return []

    today = today or date.today()
    now = datetime.now(timezone.utc)
    samples = [
        dict(
            title="Tech Innovation Summit",
            description=(
                "Join industry leaders for a day of cutting-edge technology presentations, "
                "networking, and innovation showcase."
            ),
            date=today + timedelta(days=1),
            start_time="10:00",
            venue="Main Auditorium, Tech Campus",
            category="Technology",
            max_seats=150,
            organizer="Tech Society",
            organizer_id="org_tech_001",
        ),
        dict(
            title="Annual Cultural Festival",
            description=(
                "Experience a vibrant celebration of diverse cultures with music, dance, "
                "food, and art from around the world."
            ),
            date=today + timedelta(days=7),
            start_time="18:00",
            venue="College Grounds",
            category="Cultural",
            max_seats=500,
            organizer="Cultural Committee",
            organizer_id="org_cultural_001",
        ),
        dict(
            title="Career Development Workshop",
            description=(
                "Learn essential career skills including resume writing, interview "
                "techniques, and professional networking."
            ),
            date=today + timedelta(days=30),
            start_time="14:00",
            venue="Conference Hall B",
            category="Career",
            max_seats=80,
            organizer="Career Services",
            organizer_id="org_career_001",
        ),
    ]

    added = []
    for sample in samples:
        event = Event(
            id=generate_event_id(),
            created_at=now,
            status=EventStatus.ACTIVE,
            attendees=0,
            registrations=(),
            **sample,
        )
        if store.upsert(event) is WriteResult.OK:
            added.append(event)

    logger.info("sample_events_seeded", count=len(added))
    return added


def export_events(store: EventStore) -> str:
    """Pretty-printed JSON of every stored event, in the persisted layout."""
    return json.dumps(store.export_raw(), indent=2)


def system_check(store: EventStore) -> dict[str, bool]:
    """Check that the storage handle accepts writes and the event container reads cleanly."""
    checks = {"storage": True, "event_data": True}

    try:
        store.storage.set_item(HEALTHCHECK_KEY, "ok")
        store.storage.remove_item(HEALTHCHECK_KEY)
    except StorageUnavailableError as e:
        logger.warning("healthcheck_storage_failed", error=str(e))
        checks["storage"] = False

    try:
        raw = store.storage.get_item(store.key)
        if raw is not None:
            _, unreadable = decode_events(raw)
            if unreadable:
                raise MalformedDataError(f"{unreadable} unreadable event records")
    except (StorageUnavailableError, MalformedDataError) as e:
        logger.warning("healthcheck_event_data_failed", error=str(e))
        checks["event_data"] = False

    return checks


def clear_event_data(store: EventStore, session: Session) -> None:
    """Admin recovery: drop the event container, including anything unreadable."""
    if not session.is_admin:
        raise PermissionDeniedError("only admins can clear event data")
    if store.clear() is not WriteResult.OK:
        raise StorageUnavailableError("failed to clear event data")
    logger.warning("event_data_cleared", by=session.user_id)
