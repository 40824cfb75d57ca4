"""Password reset routes for the mock backend"""

import logging

from fastapi import APIRouter, HTTPException

from ..database.users import user_db
from ..models.user import ForgotPasswordRequest, ResetPasswordRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/forgotPassword")
async def forgot_password(request: ForgotPasswordRequest):
    """
    Issue a reset token. No mail is sent, so the token comes back in the
    response for local testing.
    """
    token = user_db.issue_reset_token(request.email)
    if not token:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Issued reset token for {request.email}")
    return {"message": "Reset link sent", "token": token}


@router.post("/resetPassword")
async def reset_password(request: ResetPasswordRequest):
    user = user_db.reset_password(request.token, request.email, request.new_password)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    logger.info(f"Password reset for {user.email}")
    return {"message": "Password reset successfully"}
