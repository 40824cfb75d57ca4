"""Wishlist page controller"""

import logging

from ..core.events import EventBus, USER_LOGIN
from ..models.catalog import Product
from ..services.lindo_client import LindoClient
from ..services.reconciliation import WishlistReconciler
from ..services.wishlist import WishlistService
from .base import PageController
from .mixins import WishlistToggleMixin

logger = logging.getLogger(__name__)


class WishlistPage(WishlistToggleMixin, PageController):
    """Shows wishlisted products and toggles membership"""

    name = "wishlist"
    load_error_message = "Failed to fetch wishlist from server."

    def __init__(
        self,
        events: EventBus,
        wishlist: WishlistService,
        reconciler: WishlistReconciler,
        client: LindoClient,
    ):
        super().__init__(events)
        self.wishlist = wishlist
        self.reconciler = reconciler
        self.client = client
        self.wishlist_ids: list[str] = []
        self.products: list[Product] = []

    def listeners(self):
        return {USER_LOGIN: self._on_user_login}

    async def _on_user_login(self, detail: dict) -> None:
        await self.reconciler.run()
        await self.load()

    async def _load(self) -> None:
        if self.wishlist.remote:
            self.products = await self.wishlist.load_products()
            self.wishlist_ids = [p.id for p in self.products]
            return

        self.wishlist_ids = await self.wishlist.load_ids()
        catalog = await self.client.get_all_products() if self.wishlist_ids else []
        self.products = [p for p in catalog if p.id in self.wishlist_ids]

    async def toggle(self, product_id: str) -> bool:
        ok = await self.toggle_wishlist(product_id)
        if ok:
            self.products = [p for p in self.products if p.id in self.wishlist_ids]
        return ok

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "wishlist": list(self.wishlist_ids),
                "products": [p.model_dump(by_alias=True) for p in self.products],
            }
        )
        return data
