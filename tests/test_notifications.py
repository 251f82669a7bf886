"""Unit tests for admin_sync.services.notifications: single slot, replacement and auto-dismiss."""

import asyncio
import unittest

from admin_sync.schemas.notification import Notification
from admin_sync.services.notifications import DEFAULT_DURATION_SECONDS, NotificationChannel


class TestShowHide(unittest.TestCase):
    """show() makes a notification visible; hide() dismisses it."""

    def test_initially_hidden(self) -> None:
        channel = NotificationChannel()
        self.assertFalse(channel.current.visible)
        self.assertEqual(channel.duration, DEFAULT_DURATION_SECONDS)

    def test_show_sets_fields_and_defaults_to_info(self) -> None:
        async def scenario() -> Notification:
            channel = NotificationChannel()
            channel.show("Saved", "All good")
            current = channel.current
            channel.hide()
            return current

        current = asyncio.run(scenario())
        self.assertEqual(current.title, "Saved")
        self.assertEqual(current.description, "All good")
        self.assertEqual(current.kind, "info")
        self.assertTrue(current.visible)

    def test_hide_marks_invisible_and_keeps_text(self) -> None:
        async def scenario() -> Notification:
            channel = NotificationChannel()
            channel.show("Oops", "Failed", "error")
            channel.hide()
            return channel.current

        current = asyncio.run(scenario())
        self.assertFalse(current.visible)
        self.assertEqual(current.kind, "error")

    def test_new_notification_replaces_visible_one(self) -> None:
        async def scenario() -> Notification:
            channel = NotificationChannel()
            channel.show("First", "one", "info")
            channel.show("Second", "two", "success")
            current = channel.current
            channel.hide()
            return current

        current = asyncio.run(scenario())
        self.assertEqual(current.title, "Second")
        self.assertEqual(current.kind, "success")

    def test_listeners_receive_each_change_until_unsubscribed(self) -> None:
        seen: list[Notification] = []

        async def scenario() -> None:
            channel = NotificationChannel()
            unsubscribe = channel.subscribe(seen.append)
            channel.show("A", "a")
            channel.hide()
            unsubscribe()
            channel.show("B", "b")
            channel.hide()

        asyncio.run(scenario())
        self.assertEqual([(n.title, n.visible) for n in seen], [("A", True), ("A", False)])

    def test_hide_when_already_hidden_does_not_notify(self) -> None:
        seen: list[Notification] = []
        channel = NotificationChannel()
        channel.subscribe(seen.append)
        channel.hide()
        self.assertEqual(seen, [])


class TestAutoDismiss(unittest.TestCase):
    """The dismissal timer fires after the duration and restarts on every show()."""

    def test_auto_dismiss_after_duration(self) -> None:
        async def scenario() -> tuple[bool, bool]:
            channel = NotificationChannel(duration=0.1)
            channel.show("Temp", "goes away")
            await asyncio.sleep(0.03)
            before = channel.current.visible
            await asyncio.sleep(0.15)
            return before, channel.current.visible

        before, after = asyncio.run(scenario())
        self.assertTrue(before)
        self.assertFalse(after)

    def test_show_restarts_the_timer(self) -> None:
        async def scenario() -> tuple[Notification, bool]:
            channel = NotificationChannel(duration=0.2)
            channel.show("First", "one")
            await asyncio.sleep(0.15)
            channel.show("Second", "two")
            # Past the first timer's deadline, before the second one's.
            await asyncio.sleep(0.15)
            mid = channel.current
            await asyncio.sleep(0.15)
            return mid, channel.current.visible

        mid, final_visible = asyncio.run(scenario())
        self.assertTrue(mid.visible)
        self.assertEqual(mid.title, "Second")
        self.assertFalse(final_visible)

    def test_hide_cancels_pending_timer(self) -> None:
        seen: list[Notification] = []

        async def scenario() -> None:
            channel = NotificationChannel(duration=0.05)
            channel.subscribe(seen.append)
            channel.show("A", "a")
            channel.hide()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        # show + hide only; the cancelled timer never fires a second hide.
        self.assertEqual(len(seen), 2)


if __name__ == "__main__":
    unittest.main()
