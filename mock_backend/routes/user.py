"""User routes for the mock backend"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..database.users import EmailExistsError, user_db, verify_password
from ..models.user import LoginRequest
from ..security.auth import TokenUser, create_access_token, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])


@router.post("/Register", status_code=201)
async def register(
    firstName: str = Form(...),
    lastName: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    gender: str = Form("not_specified"),
    role: str = Form("customer"),
    image: Optional[UploadFile] = File(None),
):
    """Register a customer from a multipart form"""
    try:
        user = user_db.create_user(
            firstName,
            lastName,
            email,
            password,
            gender=gender,
            role=role,
            image=f"/uploads/{image.filename}" if image and image.filename else None,
        )
    except EmailExistsError:
        raise HTTPException(status_code=400, detail="Email already exists")

    logger.info(f"Registered {user.email}")
    return {"message": "User registered successfully", "user": user.to_api()}


@router.post("/Login")
async def login(request: LoginRequest):
    user = user_db.get_by_email(request.email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "message": "Login successful",
        "user": user.to_api(),
        "tokens": {"accessToken": create_access_token(user)},
    }


@router.put("/updateUserById/{user_id}")
async def update_user(
    user_id: str,
    firstName: Optional[str] = Form(None),
    lastName: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    token_user: TokenUser = Depends(require_user),
):
    if user_id != token_user.user_id:
        raise HTTPException(status_code=403, detail="Not allowed to update this user")

    user = user_db.update_user(
        user_id,
        {"first_name": firstName, "last_name": lastName, "gender": gender},
    )
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User updated successfully", "user": user.to_api()}
