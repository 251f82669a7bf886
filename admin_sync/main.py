"""Session wiring. No business logic; builds one cache, client, channel and controller per session."""

from admin_sync.core.config import Settings, get_settings
from admin_sync.services.api_client import ApiClient
from admin_sync.services.cache import ResponseCache
from admin_sync.services.controller import SyncController
from admin_sync.services.debounce import SearchDebouncer
from admin_sync.services.notifications import NotificationChannel


def build_controller(settings: Settings | None = None) -> SyncController:
    """Create a fresh controller and its collaborators from settings."""
    settings = settings or get_settings()
    cache = ResponseCache(ttl_seconds=settings.CACHE_TTL_SEC)
    api = ApiClient.from_settings(settings, cache=cache)
    notifications = NotificationChannel(duration=settings.TOAST_DURATION_SEC)
    return SyncController(api, notifications)


def build_search_debouncers(
    controller: SyncController, settings: Settings | None = None
) -> tuple[SearchDebouncer, SearchDebouncer]:
    """Debouncers for the users and roles search inputs, in that order."""
    settings = settings or get_settings()
    delay = settings.SEARCH_DEBOUNCE_MS / 1000
    users = SearchDebouncer(
        controller.search_users,
        delay=delay,
        current=lambda: controller.users.search_query,
    )
    roles = SearchDebouncer(
        controller.search_roles,
        delay=delay,
        current=lambda: controller.roles.search_query,
    )
    return users, roles
