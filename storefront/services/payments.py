"""DPO payment bookkeeping and verification"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..storage.browser import BrowserStorage
from .lindo_client import LindoAPIError, LindoClient, LindoNetworkError

logger = logging.getLogger(__name__)

PENDING_ORDER_ID_KEY = "pendingOrderId"
PENDING_ORDER_AMOUNT_KEY = "pendingOrderAmount"
DPO_TOKEN_KEY = "dpoPaymentToken"

# Query parameters the gateway has been seen to use for its token
DPO_TOKEN_PARAMS = (
    "token",
    "dpo_token",
    "payment_token",
    "reference",
    "ref",
    "transaction_id",
    "txn_id",
)


@dataclass
class DPOVerificationResult:
    """Outcome of a payment verification"""
    success: bool
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[dict] = None


@dataclass
class PendingOrder:
    order_id: Optional[str]
    amount: Optional[str]
    dpo_token: Optional[str]


def extract_dpo_token(params: Mapping[str, Any]) -> Optional[str]:
    """Find the gateway token in callback query parameters"""
    for name in DPO_TOKEN_PARAMS:
        value = params.get(name)
        if value:
            return str(value)
    return None


def store_pending_order(
    storage: BrowserStorage,
    order_id: str,
    amount: float,
    dpo_token: Optional[str] = None,
) -> None:
    storage.set_item(PENDING_ORDER_ID_KEY, order_id)
    storage.set_item(PENDING_ORDER_AMOUNT_KEY, str(amount))
    if dpo_token:
        storage.set_item(DPO_TOKEN_KEY, dpo_token)


def get_pending_order(storage: BrowserStorage) -> PendingOrder:
    return PendingOrder(
        order_id=storage.get_item(PENDING_ORDER_ID_KEY),
        amount=storage.get_item(PENDING_ORDER_AMOUNT_KEY),
        dpo_token=storage.get_item(DPO_TOKEN_KEY),
    )


def clear_pending_order(storage: BrowserStorage) -> None:
    for key in (PENDING_ORDER_ID_KEY, PENDING_ORDER_AMOUNT_KEY, DPO_TOKEN_KEY):
        storage.remove_item(key)


async def verify_dpo_payment(
    client: LindoClient,
    token: str,
    storage: Optional[BrowserStorage] = None,
) -> DPOVerificationResult:
    """
    Verify a gateway token with the backend.

    On success the pending order bookkeeping is cleared from ``storage``.
    """
    try:
        data = await client.verify_dpo_payment(token)
    except LindoAPIError as e:
        return DPOVerificationResult(
            success=False,
            error=e.message or f"Verification failed ({e.status_code})",
        )
    except LindoNetworkError:
        return DPOVerificationResult(success=False, error="Network error during verification")

    result = DPOVerificationResult(
        success=True,
        order_id=data.get("orderId") or data.get("order_id"),
        payment_id=data.get("paymentId") or data.get("payment_id") or token,
        amount=data.get("amount"),
        status=data.get("status") or "verified",
        message=data.get("message") or "Payment verified successfully",
        details=data,
    )
    if storage is not None:
        clear_pending_order(storage)
    logger.info(f"Verified payment for order {result.order_id}")
    return result
