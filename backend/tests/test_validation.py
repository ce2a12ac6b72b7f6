"""
Tests for the declarative event form rules.
"""

from datetime import datetime, timedelta

from eventhub.schemas.event import EVENT_FORM_RULES, FieldRule, validate_fields
from eventhub.services.event_service import validate_event_form


def test_valid_form_has_no_errors(form, today):
    assert validate_event_form(form, today) == {}


def test_missing_required_field_reports_only_required(form, today):
    form["title"] = "   "
    errors = validate_event_form(form, today)
    assert errors == {"title": ["Title is required"]}


def test_length_limits(form, today):
    form["title"] = "Hi"
    form["description"] = "x" * 1001
    errors = validate_event_form(form, today)
    assert errors["title"] == ["Title must be at least 5 characters"]
    assert errors["description"] == ["Description must be no more than 1000 characters"]


def test_lengths_are_measured_after_stripping(form, today):
    form["title"] = "   abc   "
    form["venue"] = "  Hall  "
    errors = validate_event_form(form, today)
    assert errors["title"] == ["Title must be at least 5 characters"]
    assert "venue" not in errors


def test_datetime_date_value(form, today):
    form["date"] = datetime(today.year, today.month, today.day, 18, 30)
    assert "date" not in validate_event_form(form, today)

    form["date"] = datetime(today.year, today.month, today.day, 18, 30) - timedelta(days=2)
    assert validate_event_form(form, today)["date"] == ["Event date cannot be in the past"]


def test_past_date_rejected(form, today):
    form["date"] = (today - timedelta(days=1)).isoformat()
    assert validate_event_form(form, today)["date"] == ["Event date cannot be in the past"]


def test_today_is_allowed(form, today):
    form["date"] = today.isoformat()
    assert "date" not in validate_event_form(form, today)


def test_unparseable_date(form, today):
    form["date"] = "next tuesday"
    assert validate_event_form(form, today)["date"] == ["Date must be a valid date"]


def test_time_pattern(form, today):
    form["startTime"] = "25:00"
    form["endTime"] = "7pm"
    errors = validate_event_form(form, today)
    assert errors["startTime"] == ["Please enter a valid time"]
    assert errors["endTime"] == ["Please enter a valid time"]


def test_legacy_time_field(form, today):
    form["time"] = form.pop("startTime")
    assert validate_event_form(form, today) == {}


def test_category_must_be_known(form, today):
    form["category"] = "Underwater Basketweaving"
    assert validate_event_form(form, today)["category"] == ["Please select a valid category"]


def test_seat_range(form, today):
    for bad in ["0", "10001", "-5", "ten"]:
        form["maxSeats"] = bad
        assert validate_event_form(form, today)["maxSeats"] == ["Maximum seats must be between 1 and 10,000"]
    form["maxSeats"] = 10000
    assert "maxSeats" not in validate_event_form(form, today)


def test_rules_are_plain_data(today):
    rules = {"code": FieldRule(label="Code", pattern=r"^[A-Z]{3}$")}
    assert validate_fields({"code": "abc"}, rules, today) == {"code": ["Code format is invalid"]}
    assert validate_fields({}, rules, today) == {}
    assert set(EVENT_FORM_RULES) >= {"title", "description", "date", "startTime", "venue", "category", "maxSeats"}
