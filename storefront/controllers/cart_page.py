"""Cart page controller"""

import logging

from ..core.events import EventBus, STORAGE, USER_LOGIN
from ..models.cart import CartItem
from ..services import cart as cart_ops
from ..services.auth_state import AUTH_KEYS
from ..services.cart import CartService
from ..services.checkout import format_rwf
from ..services.reconciliation import CartReconciler
from ..storage.local_store import cart_key
from .base import PageController, PageState

logger = logging.getLogger(__name__)


class CartPage(PageController):
    """Shows the cart and applies add/remove/quantity changes"""

    name = "cart"
    load_error_message = "Failed to load your cart. Please try again."

    def __init__(
        self,
        events: EventBus,
        cart: CartService,
        reconciler: CartReconciler,
        free_shipping_threshold: int = 50000,
    ):
        super().__init__(events)
        self.cart = cart
        self.reconciler = reconciler
        self.free_shipping_threshold = free_shipping_threshold
        self.items: list[CartItem] = []
        self._seen_revision = -1

    def listeners(self):
        return {
            USER_LOGIN: self._on_user_login,
            STORAGE: self._on_storage,
        }

    async def _on_user_login(self, detail: dict) -> None:
        await self.reconciler.run()
        await self.load()

    def _on_storage(self, detail: dict) -> None:
        if self.cart.remote:
            return
        # Signing out also leaves the server cart behind
        if detail.get("key") in AUTH_KEYS or detail.get("key") == cart_key(self.cart.local.scope):
            self.items = self.cart.local.get_local_cart()
            self._seen_revision = self.cart.revision

    async def _load(self) -> None:
        revision = self.cart.revision
        self.items = await self.cart.load()
        self._seen_revision = revision

    async def _ensure_fresh(self) -> None:
        """Reload when the cart was changed from another page since the last load"""
        if self.state != PageState.LOADED or self._seen_revision != self.cart.revision:
            await self.load()

    async def _mutate(self, **kwargs) -> bool:
        ok = await self.optimistic(**kwargs)
        if ok:
            self._seen_revision = self.cart.revision
        return ok

    @property
    def subtotal(self) -> float:
        return cart_ops.subtotal(self.items)

    @property
    def item_count(self) -> int:
        return cart_ops.item_count(self.items)

    @property
    def free_shipping_remaining(self) -> float:
        return max(0, self.free_shipping_threshold - self.subtotal)

    @property
    def free_shipping_progress(self) -> float:
        if self.free_shipping_threshold <= 0:
            return 1.0
        return min(1.0, self.subtotal / self.free_shipping_threshold)

    async def _ready(self) -> bool:
        await self._ensure_fresh()
        if self.state != PageState.LOADED:
            self.toast = self.load_error_message
            return False
        return True

    async def add_to_cart(self, item: CartItem) -> bool:
        if not await self._ready():
            return False
        previous = self.items
        ok = await self._mutate(
            apply=lambda: setattr(self, "items", cart_ops.add_item(previous, item)),
            revert=lambda: setattr(self, "items", previous),
            action=lambda: self.cart.add(item),
            failure_message="Failed to add to cart. Please try again.",
        )
        if ok:
            self.toast = f"{item.name} added to cart!"
        return ok

    async def handle_remove(self, product_id: str) -> bool:
        if not await self._ready():
            return False
        previous = self.items
        if cart_ops.find_item(previous, product_id) is None:
            return True
        return await self._mutate(
            apply=lambda: setattr(self, "items", cart_ops.remove_item(previous, product_id)),
            revert=lambda: setattr(self, "items", previous),
            action=lambda: self.cart.remove(product_id),
            failure_message="Failed to remove item. Please try again.",
        )

    async def handle_quantity_change(self, product_id: str, delta: int) -> bool:
        """Change a line's quantity; the result never drops below 1"""
        if not await self._ready():
            return False
        previous = self.items
        current = cart_ops.find_item(previous, product_id)
        if current is None:
            return True
        return await self._mutate(
            apply=lambda: setattr(self, "items", cart_ops.change_quantity(previous, product_id, delta)),
            revert=lambda: setattr(self, "items", previous),
            action=lambda: self.cart.change_quantity(product_id, delta, current=current.quantity),
            failure_message="Failed to update quantity. Please try again.",
        )

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "items": [item.to_storage() for item in self.items],
                "item_count": self.item_count,
                "subtotal": self.subtotal,
                "subtotal_display": format_rwf(self.subtotal),
                "free_shipping_remaining": self.free_shipping_remaining,
                "free_shipping_progress": self.free_shipping_progress,
            }
        )
        return data
