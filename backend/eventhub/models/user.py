"""
Users: the explicit session context passed into operations, and the
account records admins moderate.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    STUDENT = "student"
    ORGANIZER = "organizer"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    BANNED = "banned"


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def can_organize(self) -> bool:
        return self.role in {UserRole.ORGANIZER, UserRole.ADMIN}

    def __repr__(self) -> str:
        return f"<Session(user_id={self.user_id}, role={self.role.value})>"


class User(BaseModel):
    """
    Stored account record.

    Older records use numeric ids and the "participant" role; both are read
    as the current layout. Unknown keys are kept and written back unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    id: str = Field(..., min_length=1)
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    status: UserStatus = UserStatus.ACTIVE
    join_date: Optional[str] = None
    events_created: int = Field(default=0, ge=0)
    avatar: Optional[str] = None
    status_changed_at: Optional[datetime] = None
    status_changed_by: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _accept_participant(cls, value: Any) -> Any:
        return UserRole.STUDENT.value if value == "participant" else value

    @property
    def is_banned(self) -> bool:
        return self.status == UserStatus.BANNED

    def evolve(self, **changes: Any) -> "User":
        return type(self).model_validate({**self.model_dump(), **changes})

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role.value}, status={self.status.value})>"
