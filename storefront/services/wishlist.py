"""Wishlist operations shared by every page"""

import logging

from ..core.events import EventBus, WISHLIST_UPDATED
from ..models.catalog import Product
from ..storage.local_store import LocalStore
from .auth_state import AuthState
from .lindo_client import LindoClient

logger = logging.getLogger(__name__)


def toggle(ids: list[str], product_id: str) -> list[str]:
    """Remove ``product_id`` if present, else append it"""
    product_id = str(product_id)
    if product_id in ids:
        return [pid for pid in ids if pid != product_id]
    return [*ids, product_id]


def add(ids: list[str], product_id: str) -> list[str]:
    product_id = str(product_id)
    return ids if product_id in ids else [*ids, product_id]


def merge(*collections: list[str]) -> list[str]:
    merged: list[str] = []
    for ids in collections:
        for product_id in ids:
            merged = add(merged, product_id)
    return merged


class WishlistService:
    """Reads and toggles wishlist membership on the local or remote side"""

    def __init__(
        self,
        auth: AuthState,
        local: LocalStore,
        client: LindoClient,
        events: EventBus,
    ):
        self.auth = auth
        self.local = local
        self.client = client
        self.events = events

    @property
    def remote(self) -> bool:
        return self.auth.is_logged_in()

    async def load_products(self) -> list[Product]:
        """Wishlisted products from the server (signed-in only)"""
        return await self.client.fetch_user_wishlist()

    async def load_ids(self) -> list[str]:
        if not self.remote:
            return self.local.get_local_wishlist()
        return [p.id for p in await self.load_products()]

    async def toggle(self, product_id: str, current: list[str]) -> list[str]:
        """
        Toggle membership and return the new id list.

        Remote failures propagate to the caller and leave local storage
        untouched.
        """
        updated = toggle(current, product_id)
        if self.remote:
            await self.client.toggle_wishlist_product(str(product_id))
        else:
            self.local.save_local_wishlist(updated)

        await self.events.dispatch(WISHLIST_UPDATED, {"count": len(updated)})
        return updated
