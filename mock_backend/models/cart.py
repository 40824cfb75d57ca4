"""Cart models for the mock backend"""

from typing import Optional

from pydantic import BaseModel, Field


class CartLine(BaseModel):
    """Item in a user's server-side cart"""
    product_id: str
    quantity: int = Field(gt=0)


class AddToCartRequest(BaseModel):
    """Body of ``/cart/addToCart``; extra display fields are accepted and ignored"""
    product_id: str = Field(alias="productId")
    quantity: int = Field(default=1, gt=0)
    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None

    class Config:
        populate_by_name = True


class CartItemRequest(BaseModel):
    """Body naming one cart line, with an optional quantity"""
    product_id: str = Field(alias="productId")
    quantity: Optional[int] = None

    class Config:
        populate_by_name = True


class WishlistRequest(BaseModel):
    product_id: str = Field(alias="productId")

    class Config:
        populate_by_name = True
