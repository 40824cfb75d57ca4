"""Checkout and payment verification routes"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from ..core.session import DeviceSession
from ..models.checkout import CheckoutForm
from ..services.payments import extract_dpo_token, get_pending_order, verify_dpo_payment
from .deps import ensure_loaded, get_device_session, render

router = APIRouter(prefix="/api", tags=["Checkout"])


class VerifyRequest(BaseModel):
    token: Optional[str] = None


@router.get("/checkout")
async def get_checkout(response: Response, session: DeviceSession = Depends(get_device_session)):
    page = session.checkout_page
    await page.load()
    return render(page, response, form=page.default_form().model_dump())


@router.post("/checkout")
async def submit_checkout(
    form: CheckoutForm,
    response: Response,
    session: DeviceSession = Depends(get_device_session),
):
    """
    Create the order and, for DPO, start the gateway payment.

    A gateway failure after the order exists still answers with the order id
    and manual payment instructions.
    """
    page = await ensure_loaded(session.checkout_page)
    outcome = await page.submit(form)
    if not outcome.ok:
        response.status_code = outcome.status_code if outcome.status_code == 401 else 400
    return render(page, response)


@router.get("/payment/pending")
async def pending_payment(session: DeviceSession = Depends(get_device_session)):
    return asdict(get_pending_order(session.storage))


@router.post("/payment/verify")
async def verify_payment(
    request: Request,
    body: Optional[VerifyRequest] = None,
    session: DeviceSession = Depends(get_device_session),
):
    """Verify the gateway token from the body, the callback query or the pending order"""
    token = (
        (body.token if body else None)
        or extract_dpo_token(request.query_params)
        or get_pending_order(session.storage).dpo_token
    )
    if not token:
        raise HTTPException(status_code=400, detail="No payment token found.")

    result = await verify_dpo_payment(session.client, token, storage=session.storage)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return asdict(result)
