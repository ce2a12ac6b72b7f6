from eventhub.models.event import Event, EventStatus
from eventhub.models.user import Session, User, UserRole, UserStatus

__all__ = ["Event", "EventStatus", "Session", "User", "UserRole", "UserStatus"]
