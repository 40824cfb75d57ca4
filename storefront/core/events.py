"""Custom browser-style events for a device session"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# Fired by the login/register flow right after a successful sign-in
USER_LOGIN = "userLogin"
# Fired after the wishlist changes so header badges can refresh
WISHLIST_UPDATED = "wishlist-updated"
# Fired on every local storage write or removal
STORAGE = "storage"

Listener = Callable[[dict], Any]


class EventBus:
    """
    Per-device event target.

    Listeners may be plain callables or coroutine functions. ``dispatch``
    awaits coroutine listeners in registration order; ``emit`` is the
    synchronous variant used from storage writes and schedules coroutine
    listeners on the running loop.
    """

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def add_listener(self, event: str, listener: Listener) -> None:
        """Register a listener (registering the same one twice is a no-op)"""
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        """Unregister a listener if present"""
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    async def dispatch(self, event: str, detail: Optional[dict] = None) -> None:
        """Dispatch an event and wait for every listener to finish"""
        detail = detail or {}
        logger.debug(f"Dispatching {event} to {self.listener_count(event)} listener(s)")
        for listener in list(self._listeners[event]):
            result = listener(detail)
            if inspect.isawaitable(result):
                await result

    def emit(self, event: str, detail: Optional[dict] = None) -> None:
        """Fire an event without awaiting coroutine listeners"""
        detail = detail or {}
        for listener in list(self._listeners[event]):
            result = listener(detail)
            if inspect.iscoroutine(result):
                try:
                    task = asyncio.get_running_loop().create_task(result)
                except RuntimeError:
                    result.close()
                    logger.warning(f"No running loop for async {event} listener; skipped")
                    continue
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Async event listener failed: {error!r}")

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for listeners started by ``emit`` to finish"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
