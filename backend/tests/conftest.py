"""
Pytest fixtures for storage handles, stores, sessions and sample events.

Each test gets a fresh in-memory storage handle, so no state leaks between
tests.
"""

from datetime import date, datetime, timezone, timedelta

import pytest

from eventhub.core.config import get_settings
from eventhub.infrastructure.storage import MemoryStorage
from eventhub.models.event import Event, EventStatus
from eventhub.models.user import Session, UserRole
from eventhub.services.event_store import EventStore
from eventhub.services.user_store import UserStore, seed_default_users

TODAY = date(2026, 10, 19)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> EventStore:
    return EventStore(storage)


@pytest.fixture
def organizer() -> Session:
    return Session(user_id="org_tech_001", name="Tech Society", email="tech@college.edu", role=UserRole.ORGANIZER)


@pytest.fixture
def other_organizer() -> Session:
    return Session(user_id="org_arts_001", name="Arts Club", email="arts@college.edu", role=UserRole.ORGANIZER)


@pytest.fixture
def student() -> Session:
    return Session(user_id="usr_001", name="Ada", email="ada@college.edu", role=UserRole.STUDENT)


@pytest.fixture
def admin() -> Session:
    return Session(user_id="adm_001", name="Registrar", email="admin@college.edu", role=UserRole.ADMIN)


@pytest.fixture
def make_event():
    """Build an Event with sensible defaults; override any field by keyword."""

    def _make(**overrides) -> Event:
        registrations = tuple(overrides.pop("registrations", ()))
        fields = dict(
            id="evt_test",
            title="Intro to Machine Learning",
            description="Hands-on workshop covering the basics of supervised learning.",
            date=TODAY + timedelta(days=7),
            start_time="14:00",
            venue="Lab 3, Science Block",
            category="Technology",
            max_seats=100,
            organizer="Tech Society",
            organizer_id="org_tech_001",
            created_at=datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc),
            status=EventStatus.ACTIVE,
            attendees=len(registrations),
            registrations=registrations,
        )
        fields.update(overrides)
        return Event(**fields)

    return _make


@pytest.fixture
def test_event(store: EventStore, make_event) -> Event:
    """E1: two seats, one already taken by a@x.com."""
    event = make_event(id="E1", max_seats=2, registrations=["a@x.com"])
    store.upsert(event)
    return store.find_by_id("E1")


@pytest.fixture
def full_event(store: EventStore, make_event) -> Event:
    event = make_event(id="E_FULL", max_seats=1, registrations=["z@x.com"])
    store.upsert(event)
    return store.find_by_id("E_FULL")


@pytest.fixture
def form(today: date) -> dict:
    """A valid event creation form as posted by the browser."""
    return {
        "title": "Robotics Club Demo Day",
        "description": "Student teams show off the robots they built this semester.",
        "date": (today + timedelta(days=10)).isoformat(),
        "startTime": "16:30",
        "venue": "Engineering Atrium",
        "category": "Technology",
        "maxSeats": "120",
        "image": "",
    }


@pytest.fixture
def user_store(storage: MemoryStorage) -> UserStore:
    """User store on the same handle as `store`, holding the three demo accounts."""
    users = UserStore(storage)
    seed_default_users(users)
    return users
