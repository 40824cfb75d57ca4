"""Checkout models for the storefront"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from pydantic import BaseModel


class CheckoutForm(BaseModel):
    """Shipping and customer details entered on the checkout page"""
    province: str = ""
    district: str = ""
    sector: str = ""
    cell: str = ""
    village: str = ""
    street: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    customer_name: str = ""
    payment_method: str = "dpo"

    REQUIRED: ClassVar[tuple[str, ...]] = (
        "province",
        "district",
        "sector",
        "cell",
        "village",
        "street",
        "customer_phone",
        "customer_email",
        "customer_name",
    )

    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED if not getattr(self, name).strip()]

    def split_name(self) -> tuple[str, str]:
        """First and last name for the payment gateway"""
        parts = self.customer_name.strip().split()
        first = parts[0] if parts else "Customer"
        last = " ".join(parts[1:]) or first
        return first, last


class OrderItem(BaseModel):
    """Item sent to the order endpoint"""
    product_id: str
    quantity: int
    price: float


class OrderRequest(BaseModel):
    """Body of the order creation call"""
    payment_method: str
    province: str
    district: str
    sector: str
    cell: str
    village: str
    street: str
    customer_email: str
    customer_phone: str
    customer_name: str
    items: list[OrderItem]
    total_amount: float

    def to_payload(self) -> dict:
        return {
            "paymentMethod": self.payment_method,
            "province": self.province,
            "district": self.district,
            "sector": self.sector,
            "cell": self.cell,
            "village": self.village,
            "street": self.street,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "customerName": self.customer_name,
            "items": [
                {"productId": i.product_id, "quantity": i.quantity, "price": i.price}
                for i in self.items
            ],
            "totalAmount": self.total_amount,
        }


@dataclass
class CheckoutOutcome:
    """Result shown on the checkout page after submit"""
    success: Optional[str] = None
    error: Optional[str] = None
    order_id: Optional[str] = None
    redirect_url: Optional[str] = None
    manual_payment: Optional[str] = None  # shown when the gateway cannot be used
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None
