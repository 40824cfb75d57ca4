"""Browser-style key/value storage for a device"""

import json
import logging
import os
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class BrowserStorage:
    """
    String key/value store with the localStorage surface.

    When ``path`` is given the whole store is written to that JSON file after
    every change, so a device keeps its guest cart across restarts. Session
    storage is created without a path.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        self.path = path
        self.on_change = on_change
        self._items: dict[str, str] = {}

        if path and os.path.exists(path):
            self._load()

    def _load(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return

        if isinstance(data, dict):
            self._items = {str(k): str(v) for k, v in data.items()}

    def _persist(self) -> None:
        if not self.path:
            return
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._items, f)

    def _changed(self, key: str) -> None:
        self._persist()
        if self.on_change:
            self.on_change(key)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)
        self._changed(key)

    def remove_item(self, key: str) -> None:
        if key in self._items:
            del self._items[key]
            self._changed(key)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items = {}
        self._changed("")

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
