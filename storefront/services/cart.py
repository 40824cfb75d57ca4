"""
Cart operations shared by every page.

The pure functions work on lists of ``CartItem`` and never mutate their
input. ``CartService`` picks the local or remote path from the auth state.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..models.cart import CartItem
from ..models.catalog import Product
from ..storage.local_store import LocalStore
from .auth_state import AuthState
from .lindo_client import LindoClient, LindoClientError

logger = logging.getLogger(__name__)


def add_item(items: list[CartItem], item: CartItem) -> list[CartItem]:
    """Add a line, or bump the quantity of the line with the same productId"""
    result = []
    found = False
    for existing in items:
        if existing.product_id == item.product_id:
            existing = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
            found = True
        result.append(existing)
    if not found:
        result.append(item.model_copy())
    return result


def remove_item(items: list[CartItem], product_id: str) -> list[CartItem]:
    return [item for item in items if item.product_id != str(product_id)]


def change_quantity(items: list[CartItem], product_id: str, delta: int) -> list[CartItem]:
    """Apply a quantity delta, clamped so no line drops below 1"""
    result = []
    for item in items:
        if item.product_id == str(product_id):
            item = item.model_copy(update={"quantity": max(1, item.quantity + delta)})
        result.append(item)
    return result


def merge_items(*collections: list[CartItem]) -> list[CartItem]:
    """Combine carts, summing quantities of repeated products"""
    merged: list[CartItem] = []
    for items in collections:
        for item in items:
            merged = add_item(merged, item)
    return merged


def find_item(items: list[CartItem], product_id: str) -> Optional[CartItem]:
    return next((item for item in items if item.product_id == str(product_id)), None)


def item_from_product(product: Product, quantity: int = 1) -> CartItem:
    return CartItem(
        productId=product.id,
        name=product.name,
        price=product.price,
        image=product.primary_image,
        quantity=quantity,
        category=product.category,
    )


def subtotal(items: list[CartItem]) -> float:
    return sum(item.line_total for item in items)


def item_count(items: list[CartItem]) -> int:
    return sum(item.quantity for item in items)


class CartService:
    """Reads and mutates the cart on the local or remote side"""

    def __init__(self, auth: AuthState, local: LocalStore, client: LindoClient):
        self.auth = auth
        self.local = local
        self.client = client
        # Bumped after every mutation attempt so pages can tell their copy is stale
        self.revision = 0

    @property
    def remote(self) -> bool:
        return self.auth.is_logged_in()

    async def load(self) -> list[CartItem]:
        """Current cart; remote reads prefer the product-joined listing"""
        if not self.remote:
            return self.local.get_local_cart()

        try:
            return await self.client.fetch_user_cart_with_products()
        except LindoClientError as e:
            logger.warning(f"Cart with products unavailable, falling back: {e}")
            return await self.client.fetch_user_cart()

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        try:
            yield
        finally:
            self.revision += 1

    async def add(self, item: CartItem) -> None:
        with self._mutation():
            if self.remote:
                await self.client.add_to_cart_server(item)
                return
            self.local.save_local_cart(add_item(self.local.get_local_cart(), item))

    async def remove(self, product_id: str) -> None:
        with self._mutation():
            if self.remote:
                await self.client.remove_from_cart_server(product_id)
                return
            items = self.local.get_local_cart()
            if find_item(items, product_id) is None:
                return
            self.local.save_local_cart(remove_item(items, product_id))

    async def change_quantity(self, product_id: str, delta: int, current: Optional[int] = None) -> None:
        """
        Change a line's quantity by ``delta``.

        ``current`` is the quantity the caller is showing; when given, remote
        decrements that would go below 1 are not sent.
        """
        if delta == 0:
            return

        with self._mutation():
            if not self.remote:
                items = self.local.get_local_cart()
                if find_item(items, product_id) is None:
                    return
                self.local.save_local_cart(change_quantity(items, product_id, delta))
                return

            if delta > 0:
                await self.client.increase_cart_item_quantity(product_id, delta)
                return

            steps = -delta
            if current is not None:
                steps = min(steps, max(0, current - 1))
            for _ in range(steps):
                await self.client.reduce_from_cart_server(product_id)

    async def clear(self) -> None:
        with self._mutation():
            if self.remote:
                await self.client.clear_cart_server()
            else:
                self.local.save_local_cart([])
