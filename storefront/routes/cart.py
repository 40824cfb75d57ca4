"""Cart routes"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from ..core.session import DeviceSession
from ..services import cart as cart_ops
from .deps import ensure_loaded, get_device_session, render

router = APIRouter(prefix="/api/cart", tags=["Cart"])


class AddItemRequest(BaseModel):
    product_id: str = Field(..., alias="productId")
    quantity: int = Field(1, ge=1)

    class Config:
        populate_by_name = True


class QuantityChange(BaseModel):
    delta: int


@router.get("")
async def get_cart(response: Response, session: DeviceSession = Depends(get_device_session)):
    page = session.cart_page
    await page.load()
    return render(page, response)


@router.post("/items")
async def add_item(
    request: AddItemRequest,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    """Add a catalog product; a present product has its quantity increased"""
    page = await ensure_loaded(session.cart_page)
    product = await session.client.get_product(request.product_id)
    ok = await page.add_to_cart(cart_ops.item_from_product(product, request.quantity))
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok)


@router.patch("/items/{product_id}")
async def change_quantity(
    product_id: str,
    change: QuantityChange,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = await ensure_loaded(session.cart_page)
    ok = await page.handle_quantity_change(product_id, change.delta)
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok)


@router.delete("/items/{product_id}")
async def remove_item(
    product_id: str,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    page = await ensure_loaded(session.cart_page)
    ok = await page.handle_remove(product_id)
    if not ok:
        response.status_code = 502
    return render(page, response, ok=ok)


@router.delete("")
async def clear_cart(response: Response, session: DeviceSession = Depends(get_device_session)):
    await session.cart.clear()
    page = session.cart_page
    await page.load()
    return render(page, response)
