"""Server-side wishlists for the mock backend"""


class WishlistDatabase:
    """In-memory wishlists keyed by user id (ordered, unique product ids)"""

    def __init__(self):
        self.wishlists: dict[str, list[str]] = {}

    def reset(self) -> None:
        self.wishlists = {}

    def get_wishlist(self, user_id: str) -> list[str]:
        return self.wishlists.setdefault(user_id, [])

    def add(self, user_id: str, product_id: str) -> bool:
        """Add a product; returns False when it was already present"""
        wishlist = self.get_wishlist(user_id)
        if product_id in wishlist:
            return False
        wishlist.append(product_id)
        return True

    def remove(self, user_id: str, product_id: str) -> bool:
        wishlist = self.get_wishlist(user_id)
        if product_id not in wishlist:
            return False
        wishlist.remove(product_id)
        return True

    def toggle(self, user_id: str, product_id: str) -> bool:
        """Flip membership; returns True when the product is now wishlisted"""
        if self.remove(user_id, product_id):
            return False
        return self.add(user_id, product_id)


# Singleton instance
wishlist_db = WishlistDatabase()
