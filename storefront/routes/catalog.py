"""Catalog routes: home, product, category and search pages"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from ..controllers import CategoryPage, ProductPage
from ..core.session import DeviceSession
from ..services.lindo_client import LindoClientError
from .deps import ensure_loaded, get_device_session, render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


class QuantityRequest(BaseModel):
    quantity: int = Field(1, ge=1)


def _product_page(session: DeviceSession, product_id: str) -> ProductPage:
    return ProductPage(session.events, session.client, session.cart, session.wishlist, product_id)


def _category_page(session: DeviceSession, name: str) -> CategoryPage:
    return CategoryPage(session.events, session.client, session.cart, session.wishlist, name)


@router.get("/home")
async def home(session: DeviceSession = Depends(get_device_session)):
    """Landing page content; sections that fail to load come back empty"""
    sections = {
        "categories": session.client.get_all_categories,
        "icons": session.client.get_icons,
        "banners": session.client.get_banners,
        "ads": session.client.get_ads,
    }
    data = {}
    for name, fetch in sections.items():
        try:
            items = await fetch()
        except LindoClientError as e:
            logger.warning(f"Home section {name} unavailable: {e}")
            items = []
        data[name] = [i.model_dump() if hasattr(i, "model_dump") else i for i in items]
    return data


# ==================== Product ====================

@router.get("/products/{product_id}")
async def get_product(
    product_id: str,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = _product_page(session, product_id)
    await page.load()
    return render(page, response)


@router.post("/products/{product_id}/cart")
async def add_product_to_cart(
    product_id: str,
    request: QuantityRequest,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = await ensure_loaded(_product_page(session, product_id))
    ok = await page.add_to_cart(request.quantity) if page.product else False
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok)


@router.post("/products/{product_id}/wishlist")
async def toggle_product_wishlist(
    product_id: str,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = await ensure_loaded(_product_page(session, product_id))
    ok = await page.toggle_wishlist(product_id)
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok, wishlisted=page.is_wishlisted(product_id))


# ==================== Category ====================

@router.get("/category/{name}")
async def get_category(
    name: str,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = _category_page(session, name)
    await page.load()
    return render(page, response)


@router.post("/category/{name}/cart/{product_id}")
async def add_category_product_to_cart(
    name: str,
    product_id: str,
    request: QuantityRequest,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = await ensure_loaded(_category_page(session, name))
    if page.find_product(product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    ok = await page.add_to_cart(product_id, request.quantity)
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok)


# ==================== Search ====================

@router.get("/search")
async def search(
    response: Response,
    q: Optional[str] = Query(None),
    session: DeviceSession = Depends(get_device_session),
):
    page = session.search_page
    if q is None:
        await page.load()
    else:
        await page.search(q)
    return render(page, response)


@router.delete("/search/history")
async def clear_search_history(session: DeviceSession = Depends(get_device_session)):
    session.search_page.clear_history()
    return {"history": []}
