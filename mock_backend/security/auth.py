"""
Bearer Token Authentication

Issues HS256 access tokens at login and checks the ``Authorization: Bearer``
header on protected routes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, Request

from ..config import settings
from ..models.user import User

logger = logging.getLogger(__name__)


@dataclass
class TokenUser:
    """Identity carried by a verified access token"""
    user_id: str
    email: str


def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.token_ttl_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class BearerAuth:
    """
    FastAPI dependency for bearer token verification.

    With ``required=False`` a missing header yields ``None``; a header that
    is present must still carry a valid token.
    """

    def __init__(self, required: bool = True):
        self.required = required

    async def __call__(self, request: Request) -> Optional[TokenUser]:
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")

        if scheme.lower() != "bearer" or not token:
            if self.required:
                raise HTTPException(status_code=401, detail="Not authorized, no token")
            return None

        try:
            claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise HTTPException(status_code=401, detail="Not authorized, token failed")

        return TokenUser(user_id=claims["userId"], email=claims.get("email", ""))


# Dependency instances
require_user = BearerAuth(required=True)
optional_user = BearerAuth(required=False)
