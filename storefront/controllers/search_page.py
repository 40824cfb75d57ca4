"""Search page controller"""

import json
import logging
from typing import Optional

from ..core.events import EventBus, USER_LOGIN
from ..models.catalog import Product
from ..services.auth_state import AuthState
from ..services.cart import CartService
from ..services.lindo_client import LindoClient
from ..services.reconciliation import WishlistReconciler
from ..services.wishlist import WishlistService
from ..storage.browser import BrowserStorage
from .base import PageController
from .mixins import AddToCartMixin, WishlistToggleMixin

logger = logging.getLogger(__name__)

HISTORY_KEY = "searchHistory"


def history_key(email: Optional[str]) -> str:
    return f"{HISTORY_KEY}_{email}" if email else HISTORY_KEY


class SearchPage(AddToCartMixin, WishlistToggleMixin, PageController):
    """Filters the catalog client-side and remembers recent queries"""

    name = "search"
    load_error_message = "Failed to load products. Please try again."

    def __init__(
        self,
        events: EventBus,
        auth: AuthState,
        storage: BrowserStorage,
        client: LindoClient,
        cart: CartService,
        wishlist: WishlistService,
        reconciler: WishlistReconciler,
        history_limit: int = 10,
    ):
        super().__init__(events)
        self.auth = auth
        self.storage = storage
        self.client = client
        self.cart = cart
        self.wishlist = wishlist
        self.reconciler = reconciler
        self.history_limit = history_limit
        self.catalog: list[Product] = []
        self.wishlist_ids: list[str] = []
        self.query = ""
        self.results: list[Product] = []

    def listeners(self):
        return {USER_LOGIN: self._on_user_login}

    async def _on_user_login(self, detail: dict) -> None:
        await self.reconciler.run()
        self.wishlist_ids = await self.load_wishlist_ids()

    async def _load(self) -> None:
        self.catalog = await self.client.get_all_products()
        self.wishlist_ids = await self.load_wishlist_ids()
        if self.query:
            self.results = self._filter(self.query)

    def _filter(self, query: str) -> list[Product]:
        return [p for p in self.catalog if p.matches(query)]

    async def search(self, query: str) -> list[Product]:
        self.query = query.strip()
        if not self.catalog:
            await self.load()
        self.results = self._filter(self.query) if self.query else []
        if self.query:
            self._remember(self.query)
        return self.results

    @property
    def history(self) -> list[str]:
        raw = self.storage.get_item(history_key(self.auth.user_email))
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError:
            return []
        return [str(e) for e in entries] if isinstance(entries, list) else []

    def _remember(self, query: str) -> None:
        entries = [query] + [e for e in self.history if e.lower() != query.lower()]
        self.storage.set_item(history_key(self.auth.user_email), json.dumps(entries[: self.history_limit]))

    def clear_history(self) -> None:
        self.storage.remove_item(history_key(self.auth.user_email))

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        product = next((p for p in self.catalog if p.id == str(product_id)), None)
        if product is None:
            self.toast = "Product not found."
            return False
        return await self.add_product_to_cart(product, quantity)

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "query": self.query,
                "results": [
                    {**p.model_dump(by_alias=True), "image": p.primary_image, "wishlisted": self.is_wishlisted(p.id)}
                    for p in self.results
                ],
                "history": self.history,
            }
        )
        return data
