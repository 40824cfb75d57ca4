"""Order and DPO payment routes for the mock backend"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..database.orders import order_db
from ..database.products import product_db
from ..models.order import DPOInitializeRequest, DPOVerifyRequest, OrderRequest, OrderStatus
from ..security.auth import TokenUser, optional_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])


@router.post("/orders/createOrder", status_code=201)
async def create_order(request: OrderRequest, user: Optional[TokenUser] = Depends(optional_user)):
    """Create an order; the bearer token is optional (guest checkout)"""
    if not request.items:
        raise HTTPException(status_code=400, detail="Order must contain at least one item")

    for item in request.items:
        if not product_db.get_product(item.product_id):
            raise HTTPException(status_code=404, detail=f"Product {item.product_id} not found")

    order = order_db.create_order(request, user_id=user.user_id if user else None)
    logger.info(f"Order {order.id} created for {order.customer_email} ({order.total_amount} RWF)")
    return {"message": "Order created successfully", "order": order.to_api()}


@router.post("/dpo/initialize/dpoPayment")
async def initialize_dpo_payment(request: DPOInitializeRequest):
    """Open a gateway transaction and return the hosted payment page URL"""
    order = order_db.get_order(request.order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    payment = order_db.open_payment(order, request.total_amount, request.currency)
    return {
        "success": True,
        "token": payment.token,
        "redirectUrl": f"{settings.payment_redirect_base}?ID={payment.token}",
    }


@router.post("/dpo/verify/dpoPayment")
async def verify_dpo_payment(request: DPOVerifyRequest):
    payment = order_db.get_payment(request.token)
    if not payment:
        raise HTTPException(status_code=404, detail="Invalid payment token")

    payment.verified = True
    order_db.update_status(payment.order_id, OrderStatus.PAID)
    return {
        "success": True,
        "orderId": payment.order_id,
        "paymentId": payment.token,
        "amount": payment.amount,
        "status": OrderStatus.PAID.value,
        "message": "Payment verified successfully",
    }
