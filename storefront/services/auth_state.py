"""
Auth State Reader

A shopper counts as logged in when both a bearer token and an email are
present in local storage. Token freshness is not checked here; an expired
token shows up as a 401 from the backend on the next remote call.
"""

import json
import logging
from typing import Optional

import jwt

from ..storage.browser import BrowserStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
ACCESS_TOKEN_KEY = "accessToken"
USER_DATA_KEY = "userData"
USER_KEY = "user"
USER_EMAIL_KEY = "userEmail"

# Keys that make up the auth marker
AUTH_KEYS = (TOKEN_KEY, ACCESS_TOKEN_KEY, USER_KEY, USER_DATA_KEY, USER_EMAIL_KEY)

USER_ID_CLAIMS = ("userId", "sub", "id", "_id", "user")


class AuthState:
    """Derives the auth state of a device from its local storage"""

    def __init__(self, storage: BrowserStorage, guest_scope: str = "guest"):
        self.storage = storage
        self.guest_scope = guest_scope

    @property
    def token(self) -> Optional[str]:
        """Bearer token from ``token``, ``accessToken`` or ``userData``"""
        for key in (TOKEN_KEY, ACCESS_TOKEN_KEY):
            value = self.storage.get_item(key)
            if value:
                return value
        return self.user_data_token

    @property
    def user_data_token(self) -> Optional[str]:
        raw = self.storage.get_item(USER_DATA_KEY)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except ValueError:
            return None
        user = parsed.get("user") if isinstance(parsed, dict) else None
        tokens = user.get("tokens") if isinstance(user, dict) else None
        token = tokens.get("accessToken") if isinstance(tokens, dict) else None
        return token or None

    @property
    def user_email(self) -> Optional[str]:
        return self.storage.get_item(USER_EMAIL_KEY) or None

    @property
    def scope(self) -> str:
        """Storage namespace: the email when known, else the guest bucket"""
        return self.user_email or self.guest_scope

    def is_logged_in(self) -> bool:
        return bool(self.token and self.user_email)

    def token_claims(self) -> dict:
        """Unverified JWT payload of the current token ({} if undecodable)"""
        token = self.token
        if not token:
            return {}
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return {}

    @property
    def user_id(self) -> Optional[str]:
        claims = self.token_claims()
        for claim in USER_ID_CLAIMS:
            value = claims.get(claim)
            if value:
                return str(value)
        return None

    def record_login(self, token: str, email: str, user: Optional[dict] = None) -> None:
        """Store the auth marker written after a successful sign-in"""
        user = dict(user or {})
        user.setdefault("email", email)
        user["tokens"] = {**user.get("tokens", {}), "accessToken": token}

        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(ACCESS_TOKEN_KEY, token)
        self.storage.set_item(USER_KEY, json.dumps({k: v for k, v in user.items() if k != "tokens"}))
        self.storage.set_item(USER_DATA_KEY, json.dumps({"user": user}))
        self.storage.set_item(USER_EMAIL_KEY, email)
        logger.info(f"Recorded login for {email}")

    def clear(self) -> None:
        """Forget the auth marker (local cart/wishlist buckets are kept)"""
        for key in AUTH_KEYS:
            self.storage.remove_item(key)
