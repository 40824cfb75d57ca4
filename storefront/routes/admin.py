"""Vendor dashboard gate routes"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.session import DeviceSession
from .deps import get_device_session

router = APIRouter(prefix="/api/admin", tags=["Admin"])


class AdminLogin(BaseModel):
    username: str
    password: str


@router.post("/login")
async def admin_login(request: AdminLogin, session: DeviceSession = Depends(get_device_session)):
    if not session.admin.login(request.username, request.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return {"is_admin": True}


@router.post("/logout")
async def admin_logout(session: DeviceSession = Depends(get_device_session)):
    session.admin.logout()
    return {"is_admin": False}


@router.get("/status")
async def admin_status(session: DeviceSession = Depends(get_device_session)):
    return {"is_admin": session.admin.is_admin}
