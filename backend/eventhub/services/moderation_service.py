"""
Admin moderation: review of pending events and ban/unban/delete of user
accounts.
"""

import json
from datetime import datetime, timezone

from eventhub.core.exceptions import (
    InvalidUserStatusError,
    PermissionDeniedError,
    StorageUnavailableError,
    UserNotFoundError,
)
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_user_action
from eventhub.models.event import Event, EventStatus
from eventhub.models.user import Session, User, UserStatus
from eventhub.services.event_service import change_status
from eventhub.services.event_store import EventStore, WriteResult
from eventhub.services.user_store import UserStore

logger = get_logger(__name__)


def _require_admin(session: Session, what: str = "events") -> None:
    if not session.is_admin:
        raise PermissionDeniedError(f"only admins can moderate {what}")


def _review_stamp(session: Session) -> dict:
    return {"reviewed_at": datetime.now(timezone.utc), "reviewed_by": session.name or "Admin"}


def approve_event(store: EventStore, session: Session, event_id: str) -> Event:
    _require_admin(session)
    return change_status(
        store, event_id, EventStatus.ACTIVE,
        allowed_from={EventStatus.PENDING},
        action="approved",
        changes=_review_stamp(session),
    )


def reject_event(store: EventStore, session: Session, event_id: str) -> Event:
    _require_admin(session)
    return change_status(
        store, event_id, EventStatus.REJECTED,
        allowed_from={EventStatus.PENDING},
        action="rejected",
        changes=_review_stamp(session),
    )


def bulk_approve_pending(store: EventStore, session: Session) -> int:
    """Approve every pending event. Returns how many were approved."""
    _require_admin(session)
    pending = [e for e in store.load_all() if e.status == EventStatus.PENDING]
    for event in pending:
        approve_event(store, session, event.id)
    logger.info("bulk_approve_completed", approved=len(pending))
    return len(pending)


def _load_target_user(store: UserStore, session: Session, user_id: str) -> User:
    _require_admin(session, "users")
    if user_id == session.user_id:
        raise PermissionDeniedError("admins cannot moderate their own account")
    user = store.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def _set_user_status(
    store: UserStore,
    session: Session,
    user_id: str,
    target: UserStatus,
    action: str,
) -> User:
    user = _load_target_user(store, session, user_id)
    if user.status == target:
        raise InvalidUserStatusError(user_id, user.status.value, target.value)

    updated = user.evolve(
        status=target,
        status_changed_at=datetime.now(timezone.utc),
        status_changed_by=session.name or "Admin",
    )
    if store.upsert(updated) is not WriteResult.OK:
        raise StorageUnavailableError(f"failed to save user {user_id}")

    record_user_action(action)
    logger.info("user_status_changed", user_id=user_id, status=target.value, by=session.user_id)
    return updated


def ban_user(store: UserStore, session: Session, user_id: str) -> User:
    return _set_user_status(store, session, user_id, UserStatus.BANNED, "banned")


def unban_user(store: UserStore, session: Session, user_id: str) -> User:
    return _set_user_status(store, session, user_id, UserStatus.ACTIVE, "unbanned")


def delete_user(store: UserStore, session: Session, user_id: str) -> None:
    """Permanently remove a user account. Their event registrations are left as they are."""
    _load_target_user(store, session, user_id)
    if store.remove(user_id) is not WriteResult.OK:
        raise StorageUnavailableError(f"failed to delete user {user_id}")

    record_user_action("deleted")
    logger.info("user_deleted", user_id=user_id, by=session.user_id)


def export_users(store: UserStore, session: Session) -> str:
    """Pretty-printed JSON of every stored user, in the persisted layout."""
    _require_admin(session, "users")
    return json.dumps(store.export_raw(), indent=2)
