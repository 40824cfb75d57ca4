"""Product and category page controllers"""

import logging
from typing import Optional

from ..core.events import EventBus
from ..models.catalog import Category, Product
from ..services.cart import CartService
from ..services.lindo_client import LindoClient
from ..services.wishlist import WishlistService
from .base import PageController
from .mixins import AddToCartMixin, WishlistToggleMixin

logger = logging.getLogger(__name__)

RELATED_PRODUCTS_LIMIT = 8


class _CatalogPage(AddToCartMixin, WishlistToggleMixin, PageController):
    def __init__(
        self,
        events: EventBus,
        client: LindoClient,
        cart: CartService,
        wishlist: WishlistService,
    ):
        super().__init__(events)
        self.client = client
        self.cart = cart
        self.wishlist = wishlist
        self.wishlist_ids: list[str] = []

    def product_card(self, product: Product) -> dict:
        return {
            **product.model_dump(by_alias=True),
            "image": product.primary_image,
            "wishlisted": self.is_wishlisted(product.id),
        }


class ProductPage(_CatalogPage):
    """Single product with related products from its category"""

    name = "product"
    load_error_message = "Failed to load product. Please try again."

    def __init__(
        self,
        events: EventBus,
        client: LindoClient,
        cart: CartService,
        wishlist: WishlistService,
        product_id: str,
    ):
        super().__init__(events, client, cart, wishlist)
        self.product_id = str(product_id)
        self.product: Optional[Product] = None
        self.related: list[Product] = []

    async def _load(self) -> None:
        self.product = await self.client.get_product(self.product_id)
        self.related = []
        if self.product.category:
            same_category = await self.client.get_products_by_category(self.product.category)
            self.related = [p for p in same_category if p.id != self.product.id][:RELATED_PRODUCTS_LIMIT]
        self.wishlist_ids = await self.load_wishlist_ids()

    async def add_to_cart(self, quantity: int = 1, product: Optional[Product] = None) -> bool:
        product = product or self.product
        if product is None:
            return False
        return await self.add_product_to_cart(product, quantity)

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "product": self.product_card(self.product) if self.product else None,
                "related": [self.product_card(p) for p in self.related],
            }
        )
        return data


class CategoryPage(_CatalogPage):
    """Products of one category plus the category navigation"""

    name = "category"
    load_error_message = "Failed to load products. Please try again."

    def __init__(
        self,
        events: EventBus,
        client: LindoClient,
        cart: CartService,
        wishlist: WishlistService,
        category: str,
    ):
        super().__init__(events, client, cart, wishlist)
        self.category = category
        self.products: list[Product] = []
        self.categories: list[Category] = []

    async def _load(self) -> None:
        self.categories = await self.client.get_all_categories()
        self.products = await self.client.get_products_by_category(self.category)
        self.wishlist_ids = await self.load_wishlist_ids()

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == str(product_id)), None)

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        product = self.find_product(product_id)
        if product is None:
            self.toast = "Product not found."
            return False
        return await self.add_product_to_cart(product, quantity)

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "category": self.category,
                "categories": [c.model_dump() for c in self.categories],
                "products": [self.product_card(p) for p in self.products],
            }
        )
        return data
