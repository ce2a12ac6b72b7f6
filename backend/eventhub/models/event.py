"""
Event record with seat inventory tracking.

Key design decisions:
- `attendees` is denormalized (always equal to the registration count)
- `version` is bumped by the store on every write and enables optimistic locking
- Instances are frozen; changes go through `evolve(...)` and the store
- JSON field names are camelCase to match the persisted container layout
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class EventStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses written by older admin screens
LEGACY_STATUSES = {
    "approved": EventStatus.ACTIVE.value,
    "featured": EventStatus.ACTIVE.value,
}


def upgrade_legacy_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a persisted record from an older client up to the current layout.

    Legacy statuses are mapped, a missing registration list reads as empty,
    repeated registrants are dropped and `attendees` is recomputed from the
    list (older sample data stored a bare head count). A record that still
    breaks the seat invariants afterwards stays invalid.
    """
    data = dict(record)

    status = data.get("status")
    if isinstance(status, str) and status in LEGACY_STATUSES:
        data["status"] = LEGACY_STATUSES[status]

    registrations = data.get("registrations")
    if registrations is None:
        registrations = []
    if isinstance(registrations, list) and all(isinstance(r, str) for r in registrations):
        registrations = list(dict.fromkeys(registrations))
        data["registrations"] = registrations
        data["attendees"] = len(registrations)

    return data


class Event(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue: str = ""
    category: str = ""
    max_seats: int = Field(..., gt=0)
    organizer: str = ""
    organizer_id: Optional[str] = None
    created_at: datetime
    status: EventStatus
    attendees: int = Field(..., ge=0)
    registrations: tuple[str, ...]
    image: Optional[str] = None
    version: int = Field(default=0, ge=0)
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_time(cls, data: Any) -> Any:
        # Older records carry a single `time` field; read it as the start time.
        if isinstance(data, dict) and "time" in data:
            data = dict(data)
            legacy = data.pop("time")
            if data.get("startTime") is None and data.get("start_time") is None:
                data["startTime"] = legacy
        return data

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not TIME_PATTERN.match(value):
            raise ValueError("time must be HH:MM (24h)")
        return value

    @model_validator(mode="after")
    def _check_seat_invariants(self) -> "Event":
        if len(set(self.registrations)) != len(self.registrations):
            raise ValueError("registrations contain duplicates")
        if self.attendees != len(self.registrations):
            raise ValueError("attendees must equal the number of registrations")
        if self.attendees > self.max_seats:
            raise ValueError("attendees exceed maxSeats")
        return self

    @property
    def seats_left(self) -> int:
        return self.max_seats - self.attendees

    @property
    def is_full(self) -> bool:
        return self.attendees >= self.max_seats

    def evolve(self, **changes: Any) -> "Event":
        """Return a validated copy with `changes` applied (model_copy skips validation)."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict in the persisted layout."""
        return self.model_dump(mode="json", by_alias=True)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, seats={self.attendees}/{self.max_seats}, v={self.version})>"
