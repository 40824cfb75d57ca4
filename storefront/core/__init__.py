# Core modules

from .config import settings, get_settings, Settings
from .events import EventBus, USER_LOGIN, WISHLIST_UPDATED, STORAGE

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "EventBus",
    "USER_LOGIN",
    "WISHLIST_UPDATED",
    "STORAGE",
]
