"""
Pydantic schemas for dashboard statistics.
"""

from pydantic import BaseModel


class RegistrantStats(BaseModel):
    registered_events: int
    events_attended: int
    upcoming_events: int


class OrganizerStats(BaseModel):
    organized_events: int
    total_registrations: int
