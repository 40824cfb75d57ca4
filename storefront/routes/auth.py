"""Sign-in, registration and sign-out routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..core.session import DeviceSession
from .deps import get_device_session

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")

    class Config:
        populate_by_name = True


class OAuthCallbackRequest(BaseModel):
    params: dict[str, str] = {}
    fragment: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    email: Optional[str] = None
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")

    class Config:
        populate_by_name = True


class ProfileRequest(BaseModel):
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")

    class Config:
        populate_by_name = True


def _status(session: DeviceSession) -> dict:
    email = session.auth.user_email
    return {
        "device_id": session.device_id,
        "logged_in": session.auth.is_logged_in(),
        "email": email,
        "name": session.storage.get_item(f"userName:{email}") if email else None,
        "avatar": session.storage.get_item(f"userAvatar:{email}") if email else None,
        "cart_reconciliation": session.cart_reconciler.state.value,
        "wishlist_reconciliation": session.wishlist_reconciler.state.value,
        "header": session.header.snapshot(),
    }


@router.post("/login")
async def login(request: LoginRequest, session: DeviceSession = Depends(get_device_session)):
    """
    Sign in. A successful login dispatches ``userLogin``, which makes the
    open pages replay the guest cart and wishlist to the server.
    """
    outcome = await session.account.login(request.email, request.password)
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success, **_status(session)}


@router.post("/register")
async def register(request: RegisterRequest, session: DeviceSession = Depends(get_device_session)):
    outcome = await session.account.register(
        request.first_name,
        request.last_name,
        request.email,
        request.password,
        request.confirm_password,
    )
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success, **_status(session)}


@router.post("/logout")
async def logout(session: DeviceSession = Depends(get_device_session)):
    await session.account.logout()
    return {"message": "Logged out", **_status(session)}


@router.get("/status")
async def status(session: DeviceSession = Depends(get_device_session)):
    """Auth marker and header counters for this device"""
    return _status(session)


@router.put("/profile")
async def update_profile(request: ProfileRequest, session: DeviceSession = Depends(get_device_session)):
    outcome = await session.account.update_profile(request.first_name, request.last_name)
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success, **_status(session)}


@router.get("/google/callback")
async def google_callback(request: Request, session: DeviceSession = Depends(get_device_session)):
    """Redirect target of a Google sign-in; the profile arrives as query parameters"""
    outcome = await session.account.complete_oauth_login(dict(request.query_params))
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success, **_status(session)}


@router.post("/google/callback")
async def google_callback_relay(
    request: OAuthCallbackRequest, session: DeviceSession = Depends(get_device_session)
):
    """Same as the GET form, for clients relaying the URL fragment the server never sees"""
    outcome = await session.account.complete_oauth_login(request.params, request.fragment)
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success, **_status(session)}


@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest, session: DeviceSession = Depends(get_device_session)):
    outcome = await session.account.reset_password(
        request.token,
        request.email,
        request.password,
        request.confirm_password,
    )
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.error)
    return {"message": outcome.success}
