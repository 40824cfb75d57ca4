"""Order and payment storage for the mock backend"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.order import Order, OrderRequest, OrderStatus, Payment


class OrderDatabase:
    """In-memory orders and the DPO transactions opened for them"""

    def __init__(self):
        self.orders: dict[str, Order] = {}
        self.payments: dict[str, Payment] = {}

    def reset(self) -> None:
        self.orders = {}
        self.payments = {}

    def create_order(self, request: OrderRequest, user_id: Optional[str] = None) -> Order:
        """Create an order (guest orders have no user id)"""
        order = Order(
            **request.model_dump(),
            id=uuid.uuid4().hex[:24],
            user_id=user_id,
            created_at=datetime.utcnow(),
        )
        self.orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Update order status"""
        order = self.get_order(order_id)
        if not order:
            return None

        order.status = status
        return order

    def open_payment(self, order: Order, amount: float, currency: str) -> Payment:
        """Register a gateway transaction token for an order"""
        payment = Payment(
            token=uuid.uuid4().hex.upper()[:16],
            order_id=order.id,
            amount=amount,
            currency=currency,
        )
        self.payments[payment.token] = payment
        return payment

    def get_payment(self, token: str) -> Optional[Payment]:
        return self.payments.get(token)


# Singleton instance
order_db = OrderDatabase()
