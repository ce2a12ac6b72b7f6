"""
Declarative validation rules for the event creation form.

Rules are data: one FieldRule per form field, consumed by the single
generic `validate_fields` function.
"""

import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

CATEGORIES = (
    "Technology",
    "Cultural",
    "Career",
    "Education",
    "Sports",
    "Health & Wellness",
    "Entertainment",
    "Social",
    "Professional",
    "Academic",
)

TIME_REGEX = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class FieldRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    options: Optional[tuple[str, ...]] = None
    integer: bool = False
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    not_before_today: bool = False
    message: Optional[str] = None


EVENT_FORM_RULES: dict[str, FieldRule] = {
    "title": FieldRule(
        label="Title", required=True, min_length=5, max_length=100,
        message="Title must be between 5 and 100 characters",
    ),
    "description": FieldRule(
        label="Description", required=True, min_length=20, max_length=1000,
        message="Description must be between 20 and 1000 characters",
    ),
    "date": FieldRule(
        label="Date", required=True, not_before_today=True,
        message="Event date cannot be in the past",
    ),
    "startTime": FieldRule(
        label="Start time", required=True, pattern=TIME_REGEX,
        message="Please enter a valid time",
    ),
    "endTime": FieldRule(
        label="End time", pattern=TIME_REGEX,
        message="Please enter a valid time",
    ),
    "venue": FieldRule(
        label="Venue", required=True, min_length=3,
        message="Venue must be at least 3 characters",
    ),
    "category": FieldRule(
        label="Category", required=True, options=CATEGORIES,
        message="Please select a valid category",
    ),
    "maxSeats": FieldRule(
        label="Maximum seats", required=True, integer=True, min_value=1, max_value=10000,
        message="Maximum seats must be between 1 and 10,000",
    ),
}


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def parse_date(value: Any) -> Optional[date]:
    # datetime subclasses date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _check(value: Any, rule: FieldRule, today: date) -> list[str]:
    # Saved values are stripped, so lengths are measured the same way
    text = str(value).strip()
    errors = []

    if rule.min_length is not None and len(text) < rule.min_length:
        errors.append(f"{rule.label} must be at least {rule.min_length} characters")
    if rule.max_length is not None and len(text) > rule.max_length:
        errors.append(f"{rule.label} must be no more than {rule.max_length} characters")

    if rule.pattern is not None and not re.match(rule.pattern, text):
        errors.append(rule.message or f"{rule.label} format is invalid")

    if rule.options is not None and value not in rule.options:
        errors.append(rule.message or f"Please select a valid {rule.label.lower()}")

    if rule.integer:
        if not re.fullmatch(r"\d+", text):
            errors.append(rule.message or f"{rule.label} must be a whole number")
        elif (rule.min_value is not None and int(text) < rule.min_value) or (
            rule.max_value is not None and int(text) > rule.max_value
        ):
            errors.append(rule.message or f"{rule.label} is out of range")

    if rule.not_before_today:
        parsed = parse_date(value)
        if parsed is None:
            errors.append(f"{rule.label} must be a valid date")
        elif parsed < today:
            errors.append(rule.message or f"{rule.label} is invalid")

    return errors


def validate_fields(
    data: Mapping[str, Any],
    rules: Mapping[str, FieldRule],
    today: date,
) -> dict[str, list[str]]:
    """
    Check `data` against `rules`. Returns field -> messages; empty means valid.
    Missing optional fields are skipped; a missing required field reports only
    the required message.
    """
    errors: dict[str, list[str]] = {}
    for field, rule in rules.items():
        value = data.get(field)
        if _is_blank(value):
            if rule.required:
                errors[field] = [f"{rule.label} is required"]
            continue
        field_errors = _check(value, rule, today)
        if field_errors:
            errors[field] = field_errors
    return errors
