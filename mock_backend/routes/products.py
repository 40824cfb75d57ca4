"""Catalog routes for the mock backend"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..database.products import ADS, BANNERS, ICONS, product_db

router = APIRouter(tags=["Catalog"])


@router.get("/product/getAllProduct")
async def get_all_products():
    return {"products": [p.to_api() for p in product_db.list_products()]}


@router.get("/product/getProductById/{product_id}")
async def get_product(product_id: str):
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"product": product.to_api()}


@router.get("/product/getProductsByCategory")
async def get_products_by_category(category: Optional[str] = Query(None)):
    return {"products": [p.to_api() for p in product_db.list_products(category)]}


@router.get("/category/getAllCategories")
async def get_all_categories():
    return {"categories": [c.to_api() for c in product_db.list_categories()]}


@router.get("/icons/getIcons")
async def get_icons():
    return {"icons": ICONS}


@router.get("/banner/getAllBanners")
async def get_banners():
    return {"banners": BANNERS}


@router.get("/adds/getAds")
async def get_ads():
    return {"ads": ADS}
