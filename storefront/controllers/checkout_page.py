"""Checkout page controller"""

import logging
from typing import Optional

from ..core.events import EventBus
from ..models.cart import CartItem
from ..models.checkout import CheckoutForm, CheckoutOutcome
from ..services import cart as cart_ops
from ..services.auth_state import AuthState
from ..services.checkout import CheckoutService, format_rwf
from ..storage.browser import BrowserStorage
from .base import PageController

logger = logging.getLogger(__name__)


class CheckoutPage(PageController):
    """Cart summary plus the order form"""

    name = "checkout"
    load_error_message = "Failed to load your cart. Please try again."

    def __init__(
        self,
        events: EventBus,
        auth: AuthState,
        storage: BrowserStorage,
        checkout: CheckoutService,
    ):
        super().__init__(events)
        self.auth = auth
        self.storage = storage
        self.checkout = checkout
        self.items: list[CartItem] = []
        self.outcome: Optional[CheckoutOutcome] = None
        self.submitting = False

    async def _load(self) -> None:
        self.items = await self.checkout.load_cart()

    @property
    def subtotal(self) -> float:
        return cart_ops.subtotal(self.items)

    def default_form(self) -> CheckoutForm:
        """Form prefilled from the signed-in profile"""
        email = self.auth.user_email or ""
        name = self.storage.get_item(f"userName:{email}") if email else None
        return CheckoutForm(customer_email=email, customer_name=name or "")

    async def submit(self, form: CheckoutForm) -> CheckoutOutcome:
        self.submitting = True
        try:
            self.outcome = await self.checkout.submit(self.items, form)
        finally:
            self.submitting = False

        if self.outcome.redirect_url:
            self.items = []
        return self.outcome

    def snapshot(self) -> dict:
        data = super().snapshot()
        data.update(
            {
                "items": [item.to_storage() for item in self.items],
                "subtotal": self.subtotal,
                "subtotal_display": format_rwf(self.subtotal),
                "shipping_display": format_rwf(0),
                "total_display": format_rwf(self.subtotal),
                "outcome": self.outcome.__dict__ if self.outcome else None,
            }
        )
        return data
