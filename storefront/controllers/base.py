"""Common page controller behaviour"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..core.events import EventBus
from ..services.lindo_client import LindoClientError

logger = logging.getLogger(__name__)


class PageState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    LOADED = "loaded"


class PageController:
    """
    A page with ``loading``/``error``/``loaded`` states.

    Subclasses implement ``_load``. Event listeners declared in
    ``listeners`` are attached by ``mount`` and removed by ``unmount``.
    """

    name = "page"
    load_error_message = "Failed to load page. Please try again."

    def __init__(self, events: EventBus):
        self.events = events
        self.state = PageState.LOADING
        self.error: Optional[str] = None
        self.toast: Optional[str] = None
        self.mounted = False

    def listeners(self) -> dict[str, Callable[[dict], Any]]:
        return {}

    def mount(self) -> None:
        if self.mounted:
            return
        for event, listener in self.listeners().items():
            self.events.add_listener(event, listener)
        self.mounted = True

    def unmount(self) -> None:
        for event, listener in self.listeners().items():
            self.events.remove_listener(event, listener)
        self.mounted = False

    async def _load(self) -> None:
        raise NotImplementedError

    async def load(self) -> PageState:
        self.state = PageState.LOADING
        self.error = None
        try:
            await self._load()
        except LindoClientError as e:
            logger.error(f"{self.name} page failed to load: {e}")
            self.error = self.load_error_message
            self.state = PageState.ERROR
            return self.state
        self.state = PageState.LOADED
        return self.state

    async def retry(self) -> PageState:
        return await self.load()

    async def optimistic(
        self,
        apply: Callable[[], Any],
        revert: Callable[[], Any],
        action: Callable[[], Awaitable[Any]],
        failure_message: str,
    ) -> bool:
        """
        Apply an in-memory change, run the remote action, and undo the change
        if the action fails. Returns whether the action succeeded.
        """
        apply()
        try:
            await action()
        except LindoClientError as e:
            logger.warning(f"{self.name}: {failure_message} ({e})")
            revert()
            self.toast = failure_message
            return False
        return True

    def snapshot(self) -> dict:
        return {
            "page": self.name,
            "state": self.state.value,
            "error": self.error,
            "toast": self.toast,
        }
