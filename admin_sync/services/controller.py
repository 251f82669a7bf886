"""
Synchronization controller: owns the users and roles collections, keeps users enriched with
their roles, enforces the single-default-role invariant and reports every outcome through the
notification channel.

All methods are coroutines on one event loop; state is only mutated by the controller itself.
Concurrent fetches on the same collection are not serialized: the last one to resolve wins.
"""

import logging
from collections.abc import Callable
from typing import Literal

from admin_sync.schemas.notification import NotificationKind
from admin_sync.schemas.role import Role, RoleUpdate
from admin_sync.schemas.state import FetchStatus, RolesState, UsersState
from admin_sync.services.api_client import ApiClient, TransportError
from admin_sync.services.enrichment import (
    build_roles_map,
    count_defaults,
    join_users_with_roles,
    role_display_changed,
)
from admin_sync.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

SliceName = Literal["users", "roles"]
ChangeListener = Callable[[SliceName], None]

FETCH_USERS_FALLBACK = "Failed to fetch users"
FETCH_ROLES_FALLBACK = "Failed to fetch roles"
DELETE_USER_FALLBACK = "Failed to delete user"
UPDATE_ROLE_FALLBACK = "Failed to update role"


class DependencyError(Exception):
    """Raised when users are fetched before any role is loaded."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvariantViolation(Exception):
    """Raised when an update would leave the role collection with no default role."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _error_message(exc: Exception, fallback: str) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message or fallback


class SyncController:
    """One instance per application session; consumers read snapshots and call actions."""

    def __init__(self, api: ApiClient, notifications: NotificationChannel | None = None) -> None:
        self._api = api
        self.notifications = notifications if notifications is not None else NotificationChannel()
        self._users = UsersState()
        self._roles = RolesState()
        self._roles_map: dict[str, Role] = {}
        self._listeners: list[ChangeListener] = []

    # Snapshots

    @property
    def users(self) -> UsersState:
        snapshot = self._users.model_copy(deep=True)
        snapshot.roles_loading = self._roles.status in (FetchStatus.LOADING, FetchStatus.SEARCHING)
        return snapshot

    @property
    def roles(self) -> RolesState:
        return self._roles.model_copy(deep=True)

    @property
    def roles_map(self) -> dict[str, Role]:
        return dict(self._roles_map)

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a callback invoked with "users" or "roles" after every commit to that slice."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, name: SliceName) -> None:
        for listener in list(self._listeners):
            listener(name)

    # Notifications

    def show_toast(self, title: str, description: str, kind: NotificationKind = "info") -> None:
        self.notifications.show(title, description, kind)

    def hide_toast(self) -> None:
        self.notifications.hide()

    # Startup

    async def start(self) -> None:
        """Fetch roles; once they settle, the first user page is fetched (or marked as blocked)."""
        await self.fetch_roles()

    async def aclose(self) -> None:
        """Cancel the pending notification timer and close the HTTP client."""
        self.notifications.hide()
        await self._api.aclose()

    async def _after_roles_settled(self) -> None:
        users = self._users
        if users.initialized or users.status in (FetchStatus.LOADING, FetchStatus.SEARCHING):
            return
        if self._roles_map:
            await self.fetch_users()
        elif self._roles.error:
            users.status = FetchStatus.ERROR
            users.error = f"Cannot load users: {self._roles.error}"
            self._emit("users")
            # Replaces the roles toast; the message carries the roles error.
            self.notifications.show("Could not load users", users.error, "error")

    # Roles

    def _commit_roles(self, roles: list[Role]) -> None:
        """Replace the role list, rebuild the id map and re-enrich users when a role's display changed."""
        self._roles.items = roles
        self._roles_map = build_roles_map(roles)
        self._emit("roles")
        self._reenrich_users()

    def _reenrich_users(self) -> None:
        users = self._users
        if not users.items or not self._roles_map:
            return
        recomputed = join_users_with_roles(users.items, self._roles_map)
        if role_display_changed(users.items, recomputed):
            users.items = recomputed
            self._emit("users")

    async def fetch_roles(self, search: str | None = None, page: int | None = None) -> None:
        state = self._roles
        searching = search is not None and search != state.search_query
        query = search if search is not None else state.search_query
        target_page = page if page is not None else state.current_page

        state.status = FetchStatus.SEARCHING if searching else FetchStatus.LOADING
        state.error = None
        self._emit("roles")
        self._emit("users")
        try:
            result = await self._api.list_roles(search=query, page=target_page)
        except TransportError as e:
            message = _error_message(e, FETCH_ROLES_FALLBACK)
            logger.warning("Role fetch failed: %s", message, extra={"search": query, "page": target_page})
            state.status = FetchStatus.ERROR
            state.error = message
            state.pages = 0
            self._commit_roles([])
            self.notifications.show("Could not load roles", message, "error")
        else:
            state.pages = result.pages
            state.current_page = target_page
            state.search_query = query
            state.initialized = True
            state.status = FetchStatus.IDLE
            self._commit_roles(result.data)
            logger.info(
                "Roles loaded",
                extra={"count": len(result.data), "page": target_page, "pages": result.pages},
            )
        self._emit("users")
        await self._after_roles_settled()

    async def refresh_roles(self) -> None:
        await self.fetch_roles(self._roles.search_query, self._roles.current_page)

    async def search_roles(self, query: str) -> None:
        await self.fetch_roles(query, 1)

    async def clear_roles_search(self) -> None:
        await self.search_roles("")

    async def go_to_roles_page(self, page: int) -> None:
        await self.fetch_roles(self._roles.search_query, page)

    # Users

    async def fetch_users(self, search: str | None = None, page: int | None = None) -> None:
        state = self._users
        searching = search is not None and search != state.search_query
        query = search if search is not None else state.search_query
        target_page = page if page is not None else state.current_page

        state.status = FetchStatus.SEARCHING if searching else FetchStatus.LOADING
        state.error = None
        self._emit("users")
        try:
            if not self._roles_map:
                raise DependencyError("Cannot load users: roles are required")
            result = await self._api.list_users(search=query, page=target_page)
        except (TransportError, DependencyError) as e:
            message = _error_message(e, FETCH_USERS_FALLBACK)
            logger.warning("User fetch failed: %s", message, extra={"search": query, "page": target_page})
            state.status = FetchStatus.ERROR
            state.error = message
            state.items = []
            state.pages = 0
            self._emit("users")
            self.notifications.show("Could not load users", message, "error")
            return

        state.items = join_users_with_roles(result.data, self._roles_map)
        state.pages = result.pages
        state.current_page = target_page
        state.search_query = query
        state.initialized = True
        state.status = FetchStatus.IDLE
        self._emit("users")
        logger.info(
            "Users loaded",
            extra={"count": len(result.data), "page": target_page, "pages": result.pages},
        )

    async def refresh_users(self) -> None:
        """Refetch the current users page; when no role is loaded yet, bootstrap from roles instead."""
        if not self._roles_map:
            was_initialized = self._users.initialized
            await self.fetch_roles()
            # Before the first successful user fetch, the roles bootstrap already issued it.
            if not self._roles_map or not was_initialized:
                return
        await self.fetch_users(self._users.search_query, self._users.current_page)

    async def search_users(self, query: str) -> None:
        await self.fetch_users(query, 1)

    async def clear_users_search(self) -> None:
        await self.search_users("")

    async def go_to_users_page(self, page: int) -> None:
        await self.fetch_users(self._users.search_query, page)

    async def delete_user(self, user_id: str) -> None:
        """Delete one user. Failures are recorded, notified and re-raised."""
        state = self._users
        target = next((u for u in state.items if u.id == user_id), None)
        label = f"{target.first} {target.last}" if target else user_id

        state.error = None
        state.delete_loading = True
        state.deleting_user_id = user_id
        self._emit("users")
        try:
            await self._api.delete_user(user_id)
            state.items = [u for u in state.items if u.id != user_id]
            self.notifications.show("User deleted", f"{label} was removed.", "success")
            logger.info("User deleted", extra={"user_id": user_id})
        except TransportError as e:
            state.error = _error_message(e, DELETE_USER_FALLBACK)
            self.notifications.show("Could not delete user", state.error, "error")
            raise
        finally:
            state.delete_loading = False
            state.deleting_user_id = None
            self._emit("users")

    # Role updates

    def _check_default_invariant(self, role_id: str, updates: RoleUpdate) -> None:
        if not updates.touches_default or updates.is_default:
            return
        target = self._roles_map.get(role_id)
        if target is None or not target.is_default:
            return
        others = [r for r in self._roles.items if r.id != role_id]
        if count_defaults(others) == 0:
            raise InvariantViolation(
                f"{target.name} is the only default role; make another role the default first."
            )

    async def update_role(self, role_id: str, role_name: str, updates: RoleUpdate) -> bool:
        """
        Apply a partial update to one role.

        Returns False without calling the server when the update would leave no default role.
        Otherwise returns True on success and re-raises TransportError on failure, after rolling
        back any optimistic change.
        """
        try:
            self._check_default_invariant(role_id, updates)
        except InvariantViolation as e:
            logger.info("Role update rejected locally", extra={"role_id": role_id})
            self.notifications.show("Cannot update role", e.message, "error")
            return False

        state = self._roles
        state.editing_role_id = role_id
        state.edit_loading = True
        self._emit("roles")
        try:
            if updates.touches_default and updates.is_default:
                await self._set_default_role(role_id, updates)
            else:
                updated = await self._api.update_role(role_id, updates)
                self._replace_role(updated)
        except TransportError as e:
            state.error = _error_message(e, UPDATE_ROLE_FALLBACK)
            self.notifications.show("Could not update role", state.error, "error")
            raise
        finally:
            state.editing_role_id = None
            state.edit_loading = False
            self._emit("roles")

        self.notifications.show("Role updated", f"{role_name} was updated successfully.", "success")
        return True

    async def _set_default_role(self, role_id: str, updates: RoleUpdate) -> None:
        # Snapshot, then speculatively make the target the only default.
        before = [role.model_copy() for role in self._roles.items]
        self._commit_roles(
            [role.model_copy(update={"is_default": role.id == role_id}) for role in before]
        )
        try:
            updated = await self._api.update_role(role_id, updates)
        except TransportError:
            logger.warning("Default role change failed; rolling back", extra={"role_id": role_id})
            self._commit_roles(before)
            await self.refresh_roles()
            raise

        self._replace_role(updated)
        if self._users.items:
            await self.refresh_users()

    def _replace_role(self, updated: Role) -> None:
        self._commit_roles(
            [updated if role.id == updated.id else role for role in self._roles.items]
        )
