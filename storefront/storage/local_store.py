"""
Local Store Adapter

Reads and writes the guest cart and wishlist kept in device local storage.
Collections are namespaced per scope (the user email, or the guest bucket)
under ``cart:<scope>`` and ``wishlist:<scope>``. Older builds stored the
wishlist under ``wishlist_<email>`` or a bare ``wishlist`` key; those are
still read and are dropped on the next save.
"""

import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from ..models.cart import CartItem
from .browser import BrowserStorage

logger = logging.getLogger(__name__)

CART_PREFIX = "cart"
WISHLIST_PREFIX = "wishlist"
LEGACY_WISHLIST_KEY = "wishlist"


def cart_key(scope: str) -> str:
    return f"{CART_PREFIX}:{scope}"


def wishlist_key(scope: str) -> str:
    return f"{WISHLIST_PREFIX}:{scope}"


def legacy_wishlist_keys(scope: str, guest_scope: str) -> list[str]:
    if scope == guest_scope:
        return [LEGACY_WISHLIST_KEY]
    return [f"{WISHLIST_PREFIX}_{scope}"]


def _load_json_list(raw: Optional[str]) -> list:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        return []
    return parsed if isinstance(parsed, list) else []


def parse_cart(raw: Optional[str]) -> list[CartItem]:
    """Decode a stored cart, dropping malformed entries"""
    items: list[CartItem] = []
    for entry in _load_json_list(raw):
        if not isinstance(entry, dict):
            continue
        entry = dict(entry)
        if "productId" not in entry and "id" in entry:
            entry["productId"] = entry.pop("id")
        if not entry.get("name") or isinstance(entry.get("price"), bool):
            continue
        if not isinstance(entry.get("price"), (int, float)):
            continue
        if not entry.get("quantity"):
            entry["quantity"] = 1
        try:
            items.append(CartItem.model_validate(entry))
        except ValidationError:
            continue
    return items


def parse_wishlist(raw: Optional[str]) -> list[str]:
    """Decode a stored wishlist into unique product id strings"""
    ids: list[str] = []
    for entry in _load_json_list(raw):
        if entry is None or isinstance(entry, (dict, list)):
            continue
        value = str(entry)
        if value not in ids:
            ids.append(value)
    return ids


class LocalStore:
    """Cart and wishlist access for the current scope"""

    def __init__(
        self,
        storage: BrowserStorage,
        scope_provider: Callable[[], str],
        guest_scope: str = "guest",
    ):
        self.storage = storage
        self._scope_provider = scope_provider
        self.guest_scope = guest_scope

    @property
    def scope(self) -> str:
        return self._scope_provider()

    # ==================== Cart ====================

    def get_local_cart(self, scope: Optional[str] = None) -> list[CartItem]:
        return parse_cart(self.storage.get_item(cart_key(scope or self.scope)))

    def save_local_cart(self, items: list[CartItem], scope: Optional[str] = None) -> None:
        payload = json.dumps([item.to_storage() for item in items])
        self.storage.set_item(cart_key(scope or self.scope), payload)

    def clear_local_cart(self, scope: Optional[str] = None) -> None:
        self.storage.remove_item(cart_key(scope or self.scope))

    def take_local_cart(self, scope: Optional[str] = None) -> list[CartItem]:
        """Read the cart and remove it in the same step"""
        items = self.get_local_cart(scope)
        self.clear_local_cart(scope)
        return items

    # ==================== Wishlist ====================

    def get_local_wishlist(self, scope: Optional[str] = None) -> list[str]:
        scope = scope or self.scope
        ids = parse_wishlist(self.storage.get_item(wishlist_key(scope)))
        for key in legacy_wishlist_keys(scope, self.guest_scope):
            for product_id in parse_wishlist(self.storage.get_item(key)):
                if product_id not in ids:
                    ids.append(product_id)
        return ids

    def save_local_wishlist(self, ids: list[str], scope: Optional[str] = None) -> None:
        scope = scope or self.scope
        unique: list[str] = []
        for product_id in ids:
            if str(product_id) not in unique:
                unique.append(str(product_id))
        self.storage.set_item(wishlist_key(scope), json.dumps(unique))
        for key in legacy_wishlist_keys(scope, self.guest_scope):
            if key in self.storage:
                logger.info(f"Migrated legacy wishlist key {key} to {wishlist_key(scope)}")
                self.storage.remove_item(key)

    def clear_local_wishlist(self, scope: Optional[str] = None) -> None:
        scope = scope or self.scope
        self.storage.remove_item(wishlist_key(scope))
        for key in legacy_wishlist_keys(scope, self.guest_scope):
            self.storage.remove_item(key)

    def take_local_wishlist(self, scope: Optional[str] = None) -> list[str]:
        """Read the wishlist and remove it in the same step"""
        ids = self.get_local_wishlist(scope)
        self.clear_local_wishlist(scope)
        return ids
