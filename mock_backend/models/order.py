"""Order and payment models for the mock backend"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    product_id: str = Field(alias="productId")
    quantity: int = Field(gt=0)
    price: float = Field(ge=0)

    class Config:
        populate_by_name = True


class OrderRequest(BaseModel):
    """Body of ``/orders/createOrder``"""
    payment_method: str = Field("dpo", alias="paymentMethod")
    province: str
    district: str
    sector: str
    cell: str
    village: str
    street: str
    customer_email: str = Field(alias="customerEmail")
    customer_phone: str = Field(alias="customerPhone")
    customer_name: str = Field(alias="customerName")
    items: list[OrderItem]
    total_amount: float = Field(alias="totalAmount", ge=0)

    class Config:
        populate_by_name = True


class Order(OrderRequest):
    """Stored order"""
    id: str = Field(alias="_id")
    user_id: Optional[str] = Field(default=None, alias="userId")
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(alias="createdAt")

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class DPOInitializeRequest(BaseModel):
    """Body of ``/dpo/initialize/dpoPayment``"""
    order_id: str = Field(alias="orderId")
    total_amount: float = Field(alias="totalAmount", ge=0)
    currency: str = "RWF"
    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    service_description: Optional[str] = Field(default=None, alias="serviceDescription")
    callback_url: Optional[str] = Field(default=None, alias="callbackUrl")

    class Config:
        populate_by_name = True


class DPOVerifyRequest(BaseModel):
    token: str


class Payment(BaseModel):
    """Gateway transaction opened for an order"""
    token: str
    order_id: str
    amount: float
    currency: str
    verified: bool = False
