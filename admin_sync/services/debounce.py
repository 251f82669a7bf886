"""Coalesce raw search keystrokes into a single controller search call."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.3

SearchCallback = Callable[[str], Awaitable[None]]


class SearchDebouncer:
    """
    Cancel-and-restart timer in front of a search coroutine.

    push() restarts the timer on every keystroke; only the last text is searched once the input
    has been quiet for `delay` seconds. When `current` is given, a text equal to the query already
    applied is not searched again. Must be used from inside a running event loop.
    """

    def __init__(
        self,
        on_search: SearchCallback,
        delay: float = DEFAULT_DELAY_SECONDS,
        current: Callable[[], str] | None = None,
    ) -> None:
        self._on_search = on_search
        self._delay = delay
        self._current = current
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        """Number of issued searches that have not finished yet."""
        return len(self._in_flight)

    @property
    def last_task(self) -> asyncio.Task | None:
        """Task of the most recently issued search, if any."""
        return self._task

    def push(self, text: str) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay, self._fire, text)

    def flush(self, text: str) -> asyncio.Task:
        """Search immediately (e.g. Enter key), dropping any pending timer."""
        self.cancel()
        return self._dispatch(text)

    def clear(self) -> asyncio.Task:
        """Drop any pending timer and search for the empty string."""
        self.cancel()
        return self._dispatch("")

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, text: str) -> None:
        self._timer = None
        if self._current is not None and self._current() == text:
            logger.debug("Debounced search skipped; query unchanged: %r", text)
            return
        self._dispatch(text)

    def _dispatch(self, text: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._on_search(text))
        self._in_flight.add(task)
        task.add_done_callback(self._finished)
        self._task = task
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Search failed: %s", exc, exc_info=exc)
