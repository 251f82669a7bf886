"""
Print the users (or roles) page as the admin tool would display it. Run from project root:

  python -m admin_sync.console [--search QUERY] [--page N] [--roles]

Reads API_BASE_URL and friends from the environment or .env.
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from admin_sync.core.config import Settings, get_settings
from admin_sync.main import build_controller
from admin_sync.schemas.state import RolesState, UsersState
from admin_sync.services.display import display_name, format_date, get_initials

logger = logging.getLogger(__name__)


def render_users(state: UsersState) -> list[str]:
    lines = [f"Users (page {state.current_page} of {state.pages})"]
    for user in state.items:
        role_name = user.role.name if user.role else "-"
        lines.append(
            f"  [{get_initials(display_name(user)):>3}] {display_name(user):<30} "
            f"{role_name:<20} {format_date(user.created_at)}"
        )
    return lines


def render_roles(state: RolesState) -> list[str]:
    lines = [f"Roles (page {state.current_page} of {state.pages})"]
    for role in state.items:
        marker = "*" if role.is_default else " "
        lines.append(
            f"  {marker} [{get_initials(role.name):>3}] {role.name:<20} "
            f"{(role.description or ''):<40} {format_date(role.updated_at)}"
        )
    return lines


async def run(args: argparse.Namespace, settings: Settings) -> int:
    controller = build_controller(settings)
    try:
        await controller.start()
        if args.roles:
            if args.search or args.page != 1:
                await controller.fetch_roles(args.search, args.page)
            state = controller.roles
            lines = render_roles(state)
        else:
            if args.search or args.page != 1:
                await controller.fetch_users(args.search, args.page)
            state = controller.users
            lines = render_users(state)
    finally:
        await controller.aclose()

    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    print("\n".join(lines))
    return 0


def main() -> int:
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    parser = argparse.ArgumentParser(description="Show one page of users or roles from the admin API.")
    parser.add_argument("--search", default="", help="Search text (empty = unfiltered)")
    parser.add_argument("--page", type=int, default=1, help="1-based page number")
    parser.add_argument("--roles", action="store_true", help="List roles instead of users")
    args = parser.parse_args()
    if args.page < 1:
        print("Page must be at least 1.", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(args, settings))
    except Exception as e:
        logger.exception("Console run failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
