"""Controller-owned collection state and the snapshots handed to consumers."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from admin_sync.schemas.role import Role
from admin_sync.schemas.user import EnrichedUser

T = TypeVar("T")


class FetchStatus(str, Enum):
    """Lifecycle of one collection slice."""

    IDLE = "idle"
    LOADING = "loading"  # full-page fetch
    SEARCHING = "searching"  # query changed; consumers dim instead of showing a spinner
    ERROR = "error"


class CollectionState(BaseModel, Generic[T]):
    """Items, fetch status and pagination cursor of one independently-paginated collection."""

    items: list[T] = Field(default_factory=list)
    status: FetchStatus = FetchStatus.IDLE
    error: str | None = None
    pages: int = 0
    current_page: int = 1
    search_query: str = ""
    initialized: bool = False

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def search_loading(self) -> bool:
        return self.status is FetchStatus.SEARCHING


class UsersState(CollectionState[EnrichedUser]):
    """Users slice; deleting_user_id marks the one row with a delete in flight."""

    deleting_user_id: str | None = None
    delete_loading: bool = False
    roles_loading: bool = False

    @property
    def loading(self) -> bool:
        # Rows cannot be shown without their roles, so a role fetch counts as loading users.
        return self.status is FetchStatus.LOADING or self.roles_loading


class RolesState(CollectionState[Role]):
    """Roles slice; editing_role_id marks the one row with an update in flight."""

    editing_role_id: str | None = None
    edit_loading: bool = False
