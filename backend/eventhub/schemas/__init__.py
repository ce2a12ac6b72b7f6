from eventhub.schemas.event import CATEGORIES, EVENT_FORM_RULES, FieldRule, validate_fields
from eventhub.schemas.stats import OrganizerStats, RegistrantStats

__all__ = [
    "CATEGORIES", "EVENT_FORM_RULES", "FieldRule", "validate_fields",
    "OrganizerStats", "RegistrantStats",
]
