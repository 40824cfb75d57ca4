"""Catalog models for the mock backend"""

from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product as the Lindo API serializes it"""
    id: str = Field(alias="_id")
    name: str
    description: str = ""
    price: float = Field(ge=0)
    old_price: Optional[float] = Field(default=None, alias="oldPrice")
    category: str
    image: list[str] = []
    rating: float = 0.0
    reviews: int = 0
    stock: int = Field(ge=0, default=100)

    class Config:
        populate_by_name = True

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)


class Category(BaseModel):
    """Product category"""
    id: str = Field(alias="_id")
    name: str
    description: str = ""
    image: list[str] = []

    class Config:
        populate_by_name = True

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)
