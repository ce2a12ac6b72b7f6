from eventhub.services.event_store import EventStore, WriteResult, create_event_store
from eventhub.services.user_store import UserStore, create_user_store, seed_default_users
from eventhub.services.registration_service import (
    RegistrationOutcome,
    RegistrationResult,
    register,
    unregister,
)
from eventhub.services.event_service import (
    cancel_event,
    clear_event_data,
    complete_event,
    create_event,
    delete_event,
    export_events,
    seed_sample_events,
    system_check,
)
from eventhub.services.moderation_service import (
    approve_event,
    ban_user,
    bulk_approve_pending,
    delete_user,
    export_users,
    reject_event,
    unban_user,
)

__all__ = [
    "EventStore",
    "WriteResult",
    "create_event_store",
    "UserStore",
    "create_user_store",
    "seed_default_users",
    "RegistrationOutcome",
    "RegistrationResult",
    "register",
    "unregister",
    "create_event",
    "cancel_event",
    "complete_event",
    "delete_event",
    "export_events",
    "seed_sample_events",
    "system_check",
    "clear_event_data",
    "approve_event",
    "reject_event",
    "bulk_approve_pending",
    "ban_user",
    "unban_user",
    "delete_user",
    "export_users",
]
