"""Wishlist routes"""

from fastapi import APIRouter, Depends, Response

from ..core.session import DeviceSession
from .deps import ensure_loaded, get_device_session, render

router = APIRouter(prefix="/api/wishlist", tags=["Wishlist"])


@router.get("")
async def get_wishlist(response: Response, session: DeviceSession = Depends(get_device_session)):
    page = session.wishlist_page
    await page.load()
    return render(page, response)


@router.post("/{product_id}/toggle")
async def toggle(
    product_id: str,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    """Add or remove a product; a failed server toggle leaves the list unchanged"""
    page = await ensure_loaded(session.wishlist_page)
    ok = await page.toggle(product_id)
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok, wishlisted=page.is_wishlisted(product_id))
