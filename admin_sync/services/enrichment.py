"""Cross-enrichment of users with their roles: pure derivations used by the sync controller."""

from collections.abc import Iterable, Mapping, Sequence

from admin_sync.schemas.role import Role
from admin_sync.schemas.user import EnrichedUser, User


def build_roles_map(roles: Iterable[Role]) -> dict[str, Role]:
    """Index roles by id."""
    return {role.id: role for role in roles}


def join_users_with_roles(
    users: Iterable[User], roles_map: Mapping[str, Role]
) -> list[EnrichedUser]:
    """Attach the role matching each user's role_id (None when the role is not loaded)."""
    enriched = []
    for user in users:
        fields = user.model_dump(exclude={"role"})
        enriched.append(EnrichedUser(**fields, role=roles_map.get(user.role_id)))
    return enriched


def _role_display(user: EnrichedUser | None) -> tuple[str | None, str | None]:
    if user is None or user.role is None:
        return (None, None)
    return (user.role.name, user.role.description)


def role_display_changed(
    before: Sequence[EnrichedUser], after: Sequence[EnrichedUser]
) -> bool:
    """
    True when at least one user's attached role name or description differs between the two
    lists (compared by value, position by position).
    """
    if len(before) != len(after):
        return True
    return any(
        _role_display(old) != _role_display(new) for old, new in zip(before, after)
    )


def count_defaults(roles: Iterable[Role]) -> int:
    return sum(1 for role in roles if role.is_default)
