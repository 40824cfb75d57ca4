"""Cart models for the storefront"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_IMAGE = "/lindo.png"


class CartItem(BaseModel):
    """Line in a shopper's cart (local or server)"""
    product_id: str = Field(alias="productId")
    name: str = "Product"
    price: float = Field(default=0, ge=0)
    image: str = DEFAULT_IMAGE
    quantity: int = Field(default=1, ge=1)
    category: Optional[str] = None

    class Config:
        populate_by_name = True

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id_to_str(cls, value: Any) -> str:
        # Server carts sometimes embed the whole product document
        if isinstance(value, dict):
            value = value.get("_id") or value.get("id")
        if value is None or value == "":
            raise ValueError("productId is required")
        return str(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category_to_str(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, dict):
            return value.get("name") or value.get("_id")
        return str(value)

    @field_validator("image", mode="before")
    @classmethod
    def _first_image(cls, value: Any) -> str:
        if isinstance(value, list):
            value = value[0] if value else None
        return value or DEFAULT_IMAGE

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_storage(self) -> dict:
        """JSON layout used for local storage and server payloads"""
        return self.model_dump(by_alias=True, exclude_none=True)
