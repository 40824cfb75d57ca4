"""User accounts for the mock backend"""

import secrets
import uuid
from typing import Optional

import bcrypt

from ..config import settings
from ..models.user import User

DEMO_EMAIL = "demo@lindocare.rw"
DEMO_PASSWORD = "password123"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


class EmailExistsError(Exception):
    """Raised when registering an email that already has an account"""
    pass


class UserDatabase:
    """In-memory accounts keyed by id, seeded with one demo shopper"""

    def __init__(self):
        self._demo_user: Optional[User] = None
        self.reset()

    def reset(self) -> None:
        self.users: dict[str, User] = {}
        self.reset_tokens: dict[str, str] = {}
        # The demo account is hashed once and reused across resets
        if self._demo_user is None:
            self._demo_user = self.create_user("Demo", "Parent", DEMO_EMAIL, DEMO_PASSWORD, user_id="user-demo")
        else:
            self.users[self._demo_user.id] = self._demo_user

    def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: str = "not_specified",
        role: str = "customer",
        image: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> User:
        if self.get_by_email(email):
            raise EmailExistsError(email)

        user = User(
            id=user_id or uuid.uuid4().hex[:24],
            first_name=first_name,
            last_name=last_name,
            email=email.strip().lower(),
            gender=gender,
            role=role,
            image=image,
            password_hash=hash_password(password),
        )
        self.users[user.id] = user
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    def update_user(self, user_id: str, fields: dict) -> Optional[User]:
        user = self.get_user(user_id)
        if not user:
            return None
        updated = user.model_copy(update={k: v for k, v in fields.items() if v is not None})
        self.users[user_id] = updated
        return updated

    def issue_reset_token(self, email: str) -> Optional[str]:
        """Token for a password reset link (None for unknown emails)"""
        user = self.get_by_email(email)
        if not user:
            return None
        token = secrets.token_urlsafe(24)
        self.reset_tokens[token] = user.id
        return token

    def reset_password(self, token: str, email: str, new_password: str) -> Optional[User]:
        """Spend a reset token; None when it is unknown or issued for another email"""
        user_id = self.reset_tokens.get(token)
        user = self.get_user(user_id) if user_id else None
        if not user or user.email != email.strip().lower():
            return None
        del self.reset_tokens[token]
        updated = user.model_copy(update={"password_hash": hash_password(new_password)})
        self.users[user.id] = updated
        return updated


# Singleton instance
user_db = UserDatabase()
