"""Single-slot notification channel with an auto-dismiss timer on the running event loop."""

import asyncio
import logging
from collections.abc import Callable

from admin_sync.schemas.notification import Notification, NotificationKind

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 5.0

NotificationListener = Callable[[Notification], None]


class NotificationChannel:
    """
    Holds at most one notification. show() replaces whatever is visible and restarts the
    dismissal timer, so a burst of notifications is lossy: only the latest survives.

    show() must be called from inside a running event loop (the timer is scheduled on it).
    """

    def __init__(self, duration: float = DEFAULT_DURATION_SECONDS) -> None:
        self._duration = duration
        self._current = Notification()
        self._timer: asyncio.TimerHandle | None = None
        self._listeners: list[NotificationListener] = []

    @property
    def current(self) -> Notification:
        return self._current.model_copy()

    @property
    def duration(self) -> float:
        return self._duration

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a callback invoked with the notification after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def show(self, title: str, description: str, kind: NotificationKind = "info") -> None:
        self._cancel_timer()
        self._current = Notification(title=title, description=description, kind=kind, visible=True)
        log = logger.warning if kind == "error" else logger.info
        log("Notification: %s - %s", title, description, extra={"kind": kind})
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._duration, self.hide)
        self._emit()

    def hide(self) -> None:
        self._cancel_timer()
        if not self._current.visible:
            return
        self._current = self._current.model_copy(update={"visible": False})
        self._emit()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self) -> None:
        snapshot = self.current
        for listener in list(self._listeners):
            listener(snapshot)
