"""Pydantic schemas for wire payloads and controller state."""

from admin_sync.schemas.notification import Notification, NotificationKind
from admin_sync.schemas.paging import PagedData
from admin_sync.schemas.role import Role, RoleUpdate
from admin_sync.schemas.state import (
    CollectionState,
    FetchStatus,
    RolesState,
    UsersState,
)
from admin_sync.schemas.user import EnrichedUser, User

__all__ = [
    "CollectionState",
    "EnrichedUser",
    "FetchStatus",
    "Notification",
    "NotificationKind",
    "PagedData",
    "Role",
    "RoleUpdate",
    "RolesState",
    "User",
    "UsersState",
]
