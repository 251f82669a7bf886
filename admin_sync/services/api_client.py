"""Typed client for the remote users/roles API. Reads go through the response cache; writes invalidate it."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from admin_sync.schemas.paging import PagedData
from admin_sync.schemas.role import Role, RoleUpdate
from admin_sync.schemas.user import User
from admin_sync.services.cache import ResponseCache, make_cache_key

if TYPE_CHECKING:
    from admin_sync.core.config import Settings

logger = logging.getLogger(__name__)

USERS_RESOURCE = "users"
ROLES_RESOURCE = "roles"

_MISS = object()


class TransportError(Exception):
    """Raised when the API cannot be reached or answers with a non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ApiClient:
    """
    One coroutine per server operation.

    List calls return a cached page when one is fresh; on a miss they hit the network and store
    the raw JSON under a deterministic key. Mutations always go to the network and, on success,
    invalidate every cached page of the mutated resource. No retries are performed here.
    """

    def __init__(
        self,
        base_url: str,
        cache: ResponseCache | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._cache = cache if cache is not None else ResponseCache()
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings, cache: ResponseCache | None = None) -> ApiClient:
        return cls(
            settings.API_BASE_URL,
            cache=cache if cache is not None else ResponseCache(settings.CACHE_TTL_SEC),
            timeout=settings.API_REQUEST_TIMEOUT_SEC,
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body. Raises TransportError on any failure."""
        url = f"{self._base_url}{path}"
        start = time.perf_counter()
        try:
            resp = await self._client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as e:
            logger.warning(
                "API request timed out",
                extra={"method": method, "path": path, "latency_seconds": time.perf_counter() - start},
            )
            raise TransportError(f"API request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "API request failed",
                extra={"method": method, "path": path, "latency_seconds": time.perf_counter() - start},
            )
            raise TransportError(f"API unreachable: {e}" if str(e) else "API unreachable") from e

        elapsed = time.perf_counter() - start
        logger.info(
            "API request completed",
            extra={
                "method": method,
                "path": path,
                "status": resp.status_code,
                "latency_seconds": elapsed,
            },
        )
        if not resp.is_success:
            raise TransportError(
                f"API Error: {resp.status_code} {resp.reason_phrase}".rstrip(),
                resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError("API returned invalid JSON", resp.status_code) from e

    async def _list(self, resource: str, model: Any, search: str, page: int) -> Any:
        key = make_cache_key(resource, page=page, search=search)
        cached = self._cache.get(key, _MISS)
        if cached is not _MISS:
            return _parse(model, cached)
        params: dict[str, Any] = {"page": page}
        if search:
            params["search"] = search
        body = await self._request("GET", f"/{resource}", params=params)
        result = _parse(model, body)
        # Raw JSON is stored so every hit yields fresh model instances.
        self._cache.set(key, body)
        return result

    async def list_users(self, search: str = "", page: int = 1) -> PagedData[User]:
        """GET /users?search=&page= (cache-aware)."""
        return await self._list(USERS_RESOURCE, PagedData[User], search, page)

    async def list_roles(self, search: str = "", page: int = 1) -> PagedData[Role]:
        """GET /roles?search=&page= (cache-aware)."""
        return await self._list(ROLES_RESOURCE, PagedData[Role], search, page)

    async def delete_user(self, user_id: str) -> User:
        """DELETE /users/{id}; returns the deleted user and drops every cached users page."""
        body = await self._request("DELETE", f"/{USERS_RESOURCE}/{_segment(user_id)}")
        self._cache.invalidate(f"{USERS_RESOURCE}:")
        return _parse(User, body)

    async def update_role(self, role_id: str, updates: RoleUpdate) -> Role:
        """PATCH /roles/{id} with only the set fields; returns the updated role and drops every cached roles page."""
        body = await self._request(
            "PATCH", f"/{ROLES_RESOURCE}/{_segment(role_id)}", json=updates.to_payload()
        )
        self._cache.invalidate(f"{ROLES_RESOURCE}:")
        return _parse(Role, body)


def _segment(value: str) -> str:
    """Percent-encode one path segment so ids with "/", "?" or "#" stay inside it."""
    return quote(value, safe="")


def _parse(model: Any, body: Any) -> Any:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise TransportError(f"API returned an unexpected payload: {e.error_count()} validation error(s)") from e
