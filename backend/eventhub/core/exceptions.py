"""Domain error codes and exceptions for the event core."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    MALFORMED_DATA = "MALFORMED_DATA"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    WRITE_CONFLICT = "WRITE_CONFLICT"
    USER_NOT_FOUND = "USER_NOT_FOUND"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class StorageUnavailableError(DomainError):
    """Raised when the storage backend cannot be read or rejects a write."""

    code = ErrorCode.STORAGE_UNAVAILABLE


class MalformedDataError(DomainError):
    """Raised when persisted data cannot be parsed into events."""

    code = ErrorCode.MALFORMED_DATA


class EventNotFoundError(DomainError):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class UserNotFoundError(DomainError):
    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class PermissionDeniedError(DomainError):
    code = ErrorCode.PERMISSION_DENIED


class EventValidationError(DomainError):
    """Raised when an event form fails validation. Carries per-field messages."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("Event form is invalid")
        self.errors = errors


class InvalidStatusTransitionError(DomainError):
    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, event_id: str, current: str, target: str) -> None:
        super().__init__(f"Cannot move event from {current} to {target}")
        self.event_id = event_id
        self.current = current
        self.target = target


class WriteConflictError(DomainError):
    """Raised when an update keeps losing to concurrent writers."""

    code = ErrorCode.WRITE_CONFLICT

    def __init__(self, event_id: str, attempts: int) -> None:
        super().__init__(f"Event changed concurrently; gave up after {attempts} attempts")
        self.event_id = event_id
        self.attempts = attempts


class InvalidUserStatusError(DomainError):
    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, user_id: str, current: str, target: str) -> None:
        super().__init__(f"Cannot move user from {current} to {target}")
        self.user_id = user_id
        self.current = current
        self.target = target
