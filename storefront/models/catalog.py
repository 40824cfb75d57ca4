"""Catalog models for the storefront"""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from .cart import DEFAULT_IMAGE


def _document_id(data: dict) -> Optional[str]:
    value = data.get("_id") or data.get("id")
    return str(value) if value is not None else None


class Product(BaseModel):
    """Product as returned by the Lindo backend"""
    id: str
    name: str = "Product"
    price: float = 0
    old_price: Optional[float] = Field(default=None, alias="oldPrice")
    images: list[str] = []
    description: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["id"] = _document_id(data)
        data.pop("_id", None)

        image = data.pop("image", None)
        if "images" not in data:
            if isinstance(image, list):
                data["images"] = [str(i) for i in image if i]
            elif image:
                data["images"] = [str(image)]

        category = data.get("category", data.get("categoryId"))
        if isinstance(category, dict):
            category = category.get("name") or _document_id(category)
        data["category"] = str(category) if category is not None else None
        return data

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else DEFAULT_IMAGE

    def matches(self, query: str) -> bool:
        """Case-insensitive match on name, description or category"""
        needle = query.strip().lower()
        if not needle:
            return False
        haystack = [self.name, self.description or "", self.category or ""]
        return any(needle in field.lower() for field in haystack)


class Category(BaseModel):
    """Product category"""
    id: str
    name: str
    image: Optional[str] = None
    description: Optional[str] = None

    class Config:
        extra = "allow"

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["id"] = _document_id(data) or data.get("name")
        data.pop("_id", None)
        image = data.get("image")
        if isinstance(image, list):
            data["image"] = image[0] if image else None
        return data
