"""
Read-only views over a loaded event snapshot.

Every function here is pure: it takes the list returned by
EventStore.load_all() and never touches storage. No matches is an empty
list, not an error.
"""

from collections import Counter
from datetime import date
from typing import Iterable

from eventhub.models.event import Event, EventStatus
from eventhub.schemas.stats import OrganizerStats, RegistrantStats

ALL_CATEGORIES = "all"


def active_upcoming(events: Iterable[Event], as_of: date) -> list[Event]:
    """Active events on or after `as_of` (date only, time of day ignored)."""
    return [e for e in events if e.status == EventStatus.ACTIVE and e.date >= as_of]


def by_organizer(events: Iterable[Event], organizer_id: str) -> list[Event]:
    return [e for e in events if e.organizer_id == organizer_id]


def _matches_term(event: Event, term: str) -> bool:
    fields = (event.title, event.description, event.venue, event.organizer)
    return any(term in (value or "").lower() for value in fields)


def search(events: Iterable[Event], term: str, category: str = ALL_CATEGORIES) -> list[Event]:
    """
    Case-insensitive substring search across title, description, venue and
    organizer name, narrowed to `category` unless it is "all".
    """
    needle = (term or "").strip().lower()
    return [
        e for e in events
        if _matches_term(e, needle) and (category == ALL_CATEGORIES or e.category == category)
    ]


def registered_for(events: Iterable[Event], registrant_id: str) -> list[Event]:
    return [e for e in events if registrant_id in e.registrations]


def display_status(event: Event, as_of: date) -> str:
    if event.status == EventStatus.CANCELLED:
        return "Cancelled"
    if event.date < as_of:
        return "Completed"
    return "Upcoming"


def registrant_stats(events: Iterable[Event], registrant_id: str, as_of: date) -> RegistrantStats:
    mine = registered_for(events, registrant_id)
    live = [e for e in mine if e.status != EventStatus.CANCELLED]
    return RegistrantStats(
        registered_events=len(mine),
        events_attended=sum(1 for e in live if e.date < as_of),
        upcoming_events=sum(1 for e in live if e.date >= as_of),
    )


def organizer_stats(events: Iterable[Event], organizer_id: str) -> OrganizerStats:
    organized = by_organizer(events, organizer_id)
    return OrganizerStats(
        organized_events=len(organized),
        total_registrations=sum(e.attendees for e in organized),
    )


def status_counts(events: Iterable[Event]) -> dict[str, int]:
    """Number of events per status; every status is present, zero if unused."""
    counts = Counter(e.status.value for e in events)
    return {status.value: counts.get(status.value, 0) for status in EventStatus}
