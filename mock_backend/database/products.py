"""Mock catalog database"""

from typing import Optional

from ..models.product import Category, Product

CATEGORIES: dict[str, Category] = {
    "cat-001": Category(id="cat-001", name="Diapers", description="Diapers and training pants", image=["/images/categories/diapers.jpg"]),
    "cat-002": Category(id="cat-002", name="Feeding", description="Bottles, formula and feeding accessories", image=["/images/categories/feeding.jpg"]),
    "cat-003": Category(id="cat-003", name="Baby Care", description="Wipes, lotions and bath time", image=["/images/categories/baby-care.jpg"]),
    "cat-004": Category(id="cat-004", name="Clothing", description="Bodysuits, sleepwear and socks", image=["/images/categories/clothing.jpg"]),
    "cat-005": Category(id="cat-005", name="Toys", description="Soft toys and early learning", image=["/images/categories/toys.jpg"]),
}

# Mock product catalog (prices in RWF)
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Huggies Natural Care Baby Wipes",
        description="Fragrance-free wipes for sensitive skin, pack of 56.",
        price=5000,
        category="Baby Care",
        image=["/images/products/huggies-wipes.jpg"],
        rating=4.7,
        reviews=128,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Pampers Baby-Dry Diapers Size 3",
        description="Up to 12 hours of dryness, 52 diapers.",
        price=15000,
        old_price=17500,
        category="Diapers",
        image=["/images/products/pampers-size3.jpg"],
        rating=4.8,
        reviews=342,
    ),
    "prod-003": Product(
        id="prod-003",
        name="Philips Avent Anti-colic Bottle 260ml",
        description="Anti-colic valve reduces fussing and colic.",
        price=3000,
        category="Feeding",
        image=["/images/products/avent-bottle.jpg"],
        rating=4.6,
        reviews=87,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Cerelac Infant Cereal Wheat 400g",
        description="Iron-fortified infant cereal from 6 months.",
        price=7000,
        category="Feeding",
        image=["/images/products/cerelac-wheat.jpg"],
        rating=4.5,
        reviews=64,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Johnson's Baby Lotion 500ml",
        description="Clinically proven mild, 24-hour moisture.",
        price=6500,
        category="Baby Care",
        image=["/images/products/johnsons-lotion.jpg"],
        rating=4.4,
        reviews=51,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Cotton Bodysuit Set (3 pack)",
        description="Short-sleeve organic cotton bodysuits, 6-12 months.",
        price=12000,
        old_price=14000,
        category="Clothing",
        image=["/images/products/bodysuit-set.jpg"],
        rating=4.9,
        reviews=39,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Soft Plush Elephant",
        description="Machine-washable plush toy with crinkle ears.",
        price=8000,
        category="Toys",
        image=["/images/products/plush-elephant.jpg"],
        rating=4.8,
        reviews=22,
    ),
    "prod-008": Product(
        id="prod-008",
        name="Pampers Premium Care Newborn",
        description="Softest Pampers for newborn skin, 44 diapers.",
        price=18000,
        category="Diapers",
        image=["/images/products/pampers-newborn.jpg"],
        rating=4.9,
        reviews=210,
    ),
}

ICONS = [
    {"_id": "icon-001", "title": "Free delivery over 50,000 RWF", "image": ["/images/icons/delivery.svg"]},
    {"_id": "icon-002", "title": "Mobile Money accepted", "image": ["/images/icons/momo.svg"]},
    {"_id": "icon-003", "title": "Genuine brands", "image": ["/images/icons/genuine.svg"]},
]

BANNERS = [
    {"_id": "banner-001", "title": "Back to basics", "subTitle": "Diapers from 15,000 RWF", "image": ["/images/banners/diapers.jpg"]},
    {"_id": "banner-002", "title": "Feeding time", "subTitle": "Bottles and cereals", "image": ["/images/banners/feeding.jpg"]},
]

ADS = [
    {"_id": "ad-001", "title": "New arrivals", "content": "Organic cotton clothing is here", "image": ["/images/ads/clothing.jpg"]},
]


class ProductDatabase:
    """In-memory catalog for the mock backend"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.products = PRODUCTS.copy()
        self.categories = CATEGORIES.copy()

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def list_products(self, category: Optional[str] = None) -> list[Product]:
        """All products, optionally limited to one category (case-insensitive)"""
        results = list(self.products.values())
        if category:
            results = [p for p in results if p.category.lower() == category.lower()]
        return results

    def list_categories(self) -> list[Category]:
        return list(self.categories.values())

    def add_product(self, product: Product) -> Product:
        self.products[product.id] = product
        return product


# Singleton instance
product_db = ProductDatabase()
