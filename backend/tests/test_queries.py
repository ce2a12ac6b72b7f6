"""
Tests for the pure query and dashboard views.
"""

from datetime import timedelta

import pytest

from eventhub.models.event import EventStatus
from eventhub.services.query_service import (
    active_upcoming,
    by_organizer,
    display_status,
    organizer_stats,
    registered_for,
    registrant_stats,
    search,
    status_counts,
)


@pytest.fixture
def events(make_event, today):
    return [
        make_event(id="past", date=today - timedelta(days=1), registrations=["a@x.com"]),
        make_event(id="today", date=today, title="AI Ethics Panel", category="Academic"),
        make_event(
            id="cancelled", date=today + timedelta(days=3), status=EventStatus.CANCELLED,
            registrations=["a@x.com"],
        ),
        make_event(
            id="music", date=today + timedelta(days=5), title="Open Mic Night",
            description="Bring your guitar.", venue="Student Union", category="Entertainment",
            organizer="Music Society", organizer_id="org_music_001", registrations=["a@x.com", "b@x.com"],
        ),
        make_event(id="pending", date=today + timedelta(days=9), status=EventStatus.PENDING),
    ]


def test_active_upcoming(events, today):
    ids = [e.id for e in active_upcoming(events, today)]
    assert ids == ["today", "music"]


def test_by_organizer(events):
    assert [e.id for e in by_organizer(events, "org_music_001")] == ["music"]
    assert by_organizer(events, "org_nobody") == []


def test_search_is_case_insensitive_across_fields(events):
    assert [e.id for e in search(events, "ai ethics", "all")] == ["today"]
    assert [e.id for e in search(events, "STUDENT UNION")] == ["music"]
    assert [e.id for e in search(events, "music society")] == ["music"]
    assert [e.id for e in search(events, "guitar")] == ["music"]


def test_search_with_category(events):
    assert [e.id for e in search(events, "", "Entertainment")] == ["music"]
    assert search(events, "guitar", "Technology") == []
    assert len(search(events, "", "all")) == len(events)


def test_search_empty_list():
    assert search([], "ai", "all") == []


def test_registered_for(events):
    assert [e.id for e in registered_for(events, "a@x.com")] == ["past", "cancelled", "music"]


def test_display_status(events, today):
    by_id = {e.id: e for e in events}
    assert display_status(by_id["cancelled"], today) == "Cancelled"
    assert display_status(by_id["past"], today) == "Completed"
    assert display_status(by_id["today"], today) == "Upcoming"


def test_registrant_stats(events, today):
    stats = registrant_stats(events, "a@x.com", today)
    assert stats.registered_events == 3
    assert stats.events_attended == 1
    assert stats.upcoming_events == 1


def test_organizer_stats(events):
    stats = organizer_stats(events, "org_tech_001")
    assert stats.organized_events == 4
    assert stats.total_registrations == 2


def test_status_counts(events):
    counts = status_counts(events)
    assert counts["active"] == 3
    assert counts["cancelled"] == 1
    assert counts["pending"] == 1
    assert counts["rejected"] == 0
    assert status_counts([])["completed"] == 0
