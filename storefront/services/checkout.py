"""
Checkout composition.

Submitting an order is two calls: create the order, then (for the DPO
payment method) initialize the gateway. The order can already exist when the
gateway call fails, so that failure carries manual payment instructions
instead of a plain retry message.
"""

import logging
from typing import Optional

from ..models.cart import CartItem
from ..models.checkout import CheckoutForm, CheckoutOutcome, OrderItem, OrderRequest
from ..storage.browser import BrowserStorage
from . import cart as cart_ops
from .auth_state import AuthState
from .cart import CartService
from .lindo_client import LindoAPIError, LindoClient, LindoClientError, LindoNetworkError
from .payments import store_pending_order

logger = logging.getLogger(__name__)

DPO_METHOD = "dpo"


def format_rwf(amount: Optional[float]) -> str:
    """Thousands-grouped amount with no decimal places"""
    return f"{round(amount or 0):,}"


def format_price(amount: Optional[float], currency: str = "RWF") -> str:
    return f"{format_rwf(amount)} {currency}"


def build_order(items: list[CartItem], form: CheckoutForm) -> OrderRequest:
    return OrderRequest(
        payment_method=form.payment_method or DPO_METHOD,
        province=form.province,
        district=form.district,
        sector=form.sector,
        cell=form.cell,
        village=form.village,
        street=form.street,
        customer_email=form.customer_email,
        customer_phone=form.customer_phone,
        customer_name=form.customer_name,
        items=[OrderItem(product_id=i.product_id, quantity=i.quantity, price=i.price) for i in items],
        total_amount=cart_ops.subtotal(items),
    )


class CheckoutService:
    """Creates orders and starts DPO payments"""

    def __init__(
        self,
        auth: AuthState,
        cart: CartService,
        client: LindoClient,
        storage: BrowserStorage,
        callback_url: str,
        manual_payment_instructions: str,
        currency: str = "RWF",
    ):
        self.auth = auth
        self.cart = cart
        self.client = client
        self.storage = storage
        self.callback_url = callback_url
        self.manual_payment_instructions = manual_payment_instructions
        self.currency = currency

    async def load_cart(self) -> list[CartItem]:
        """Cart to check out; a failing remote cart falls back to the local copy"""
        try:
            return await self.cart.load()
        except LindoClientError as e:
            logger.warning(f"Remote cart unavailable at checkout, using local cart: {e}")
            return self.cart.local.get_local_cart()

    async def submit(self, items: list[CartItem], form: CheckoutForm) -> CheckoutOutcome:
        if not items:
            return CheckoutOutcome(error="Your cart is empty.")
        if form.missing_fields():
            return CheckoutOutcome(error="Please fill in all required fields.")

        order = build_order(items, form)
        bearer = self.auth.user_data_token or self.auth.token

        try:
            result = await self.client.create_order(order.to_payload(), bearer=bearer)
        except LindoAPIError as e:
            if e.status_code == 401:
                return CheckoutOutcome(
                    error="Authorization failed. Please log in and try again.",
                    status_code=401,
                )
            message = e.message
            if not message or message == "Failed to create order":
                message = f"Failed to create order ({e.status_code}). Please try again."
            return CheckoutOutcome(error=message, status_code=e.status_code)
        except LindoNetworkError:
            return CheckoutOutcome(error="Network error. Please try again.")

        order_section = result.get("order") if isinstance(result.get("order"), dict) else {}
        order_id = str(order_section.get("_id") or result.get("orderId") or "")
        logger.info(f"Order {order_id} created for {form.customer_email}")

        if order.payment_method != DPO_METHOD:
            return CheckoutOutcome(success="Order created successfully.", order_id=order_id)

        return await self._start_dpo_payment(order, form, order_id, len(items))

    async def _start_dpo_payment(
        self,
        order: OrderRequest,
        form: CheckoutForm,
        order_id: str,
        line_count: int,
    ) -> CheckoutOutcome:
        first_name, last_name = form.split_name()
        payload = {
            "orderId": order_id,
            "totalAmount": order.total_amount,
            "currency": self.currency,
            "email": form.customer_email,
            "phone": form.customer_phone,
            "firstName": first_name,
            "lastName": last_name,
            "serviceDescription": f"Payment for order {order_id} - {line_count} item(s) from Lindocare",
            "callbackUrl": self.callback_url,
        }

        try:
            data = await self.client.initialize_dpo_payment(payload)
        except LindoClientError as e:
            logger.error(f"Payment initialization failed for order {order_id}: {e}")
            return CheckoutOutcome(
                error="Payment initialization failed. Please try again.",
                order_id=order_id,
                manual_payment=self.manual_payment_instructions,
                status_code=getattr(e, "status_code", None),
            )

        redirect_url = data.get("redirectUrl") or data.get("paymentUrl")
        if not redirect_url:
            return CheckoutOutcome(
                success="Order created successfully. Proceed to payment from your orders page.",
                order_id=order_id,
                manual_payment=self.manual_payment_instructions,
            )

        try:
            await self.cart.clear()
        except LindoClientError as e:
            logger.warning(f"Could not clear cart after order {order_id}: {e}")

        if data.get("token"):
            store_pending_order(self.storage, order_id, order.total_amount, data["token"])

        return CheckoutOutcome(
            success="Order created! Redirecting to payment gateway...",
            order_id=order_id,
            redirect_url=redirect_url,
        )
