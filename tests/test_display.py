"""Unit tests for admin_sync.services.display and the console renderers."""

import unittest
from datetime import datetime, timezone

from admin_sync.console import render_roles, render_users
from admin_sync.schemas.role import Role
from admin_sync.schemas.state import RolesState, UsersState
from admin_sync.schemas.user import EnrichedUser, User
from admin_sync.services.display import display_name, format_date, get_initials


class TestGetInitials(unittest.TestCase):
    def test_two_words(self) -> None:
        self.assertEqual(get_initials("Jane Doe"), "JD")

    def test_lowercase_and_extra_spaces(self) -> None:
        self.assertEqual(get_initials("super  admin"), "SA")

    def test_empty(self) -> None:
        self.assertEqual(get_initials(""), "")


class TestFormatDate(unittest.TestCase):
    def setUp(self) -> None:
        self.value = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)

    def test_short(self) -> None:
        self.assertEqual(format_date(self.value), "Mar 5, 2024")

    def test_long(self) -> None:
        self.assertEqual(format_date(self.value, "long"), "March 5, 2024")

    def test_numeric(self) -> None:
        self.assertEqual(format_date(self.value, "numeric"), "03/05/2024")

    def test_missing(self) -> None:
        self.assertEqual(format_date(None), "")


class TestRenderers(unittest.TestCase):
    """Console tables show role names for users and the default marker for roles."""

    def test_render_users(self) -> None:
        admin = Role(id="r1", name="Admin", is_default=True)
        state = UsersState(
            items=[
                EnrichedUser(id="u1", first="Ada", last="Lovelace", role_id="r1", role=admin),
                EnrichedUser(id="u2", first="Alan", last="Turing", role_id="gone"),
            ],
            pages=2,
        )
        lines = render_users(state)
        self.assertEqual(lines[0], "Users (page 1 of 2)")
        self.assertIn("AL", lines[1])
        self.assertIn("Admin", lines[1])
        self.assertIn(" - ", lines[2])

    def test_render_roles_marks_default(self) -> None:
        state = RolesState(
            items=[
                Role(id="r1", name="Admin", is_default=True),
                Role(id="r2", name="Viewer"),
            ],
            pages=1,
        )
        lines = render_roles(state)
        self.assertTrue(lines[1].startswith("  * "))
        self.assertTrue(lines[2].startswith("    "))

    def test_display_name(self) -> None:
        self.assertEqual(
            display_name(User(id="u1", first="Grace", last="Hopper", role_id="r1")),
            "Grace Hopper",
        )


if __name__ == "__main__":
    unittest.main()
