"""Header badge counters"""

from ..core.events import EventBus, STORAGE, USER_LOGIN, WISHLIST_UPDATED
from ..services import cart as cart_ops
from ..services.auth_state import AuthState
from ..storage.local_store import LocalStore


class HeaderBadges:
    """Cart and wishlist counters kept fresh by storage and wishlist events"""

    def __init__(self, events: EventBus, auth: AuthState, local: LocalStore):
        self.events = events
        self.auth = auth
        self.local = local
        self.cart_count = 0
        self.wishlist_count = 0

    def mount(self) -> None:
        self.events.add_listener(STORAGE, self._on_storage)
        self.events.add_listener(WISHLIST_UPDATED, self._on_wishlist_updated)
        self.events.add_listener(USER_LOGIN, self._on_storage)
        self.refresh()

    def unmount(self) -> None:
        self.events.remove_listener(STORAGE, self._on_storage)
        self.events.remove_listener(WISHLIST_UPDATED, self._on_wishlist_updated)
        self.events.remove_listener(USER_LOGIN, self._on_storage)

    def refresh(self) -> None:
        self.cart_count = cart_ops.item_count(self.local.get_local_cart())
        self.wishlist_count = len(self.local.get_local_wishlist())

    def _on_storage(self, detail: dict) -> None:
        self.refresh()

    def _on_wishlist_updated(self, detail: dict) -> None:
        if "count" in detail:
            self.wishlist_count = int(detail["count"])
        else:
            self.refresh()

    def snapshot(self) -> dict:
        return {
            "logged_in": self.auth.is_logged_in(),
            "email": self.auth.user_email,
            "cart_count": self.cart_count,
            "wishlist_count": self.wishlist_count,
        }
