"""Sign-in, registration, sign-out and password reset flows"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import unquote

from ..core.events import EventBus, USER_LOGIN
from ..storage.browser import BrowserStorage
from .auth_state import USER_EMAIL_KEY, AuthState
from .lindo_client import LindoAPIError, LindoClient, LindoNetworkError
from .reconciliation import Reconciler

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Reset links demand a stronger password than registration
RESET_PASSWORD_MIN_LENGTH = 8
RESET_PASSWORD_SPECIALS = "!@#$%^&*(),.?\":{}|<>"


@dataclass
class AuthOutcome:
    """Message shown by the login modal"""
    success: Optional[str] = None
    error: Optional[str] = None
    email: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class OAuthProfile:
    """Shopper details carried back by a Google sign-in redirect"""
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    token: Optional[str] = None
    user: Optional[dict] = None


def gravatar_url(email: str) -> str:
    digest = hashlib.sha256(email.strip().lower().encode()).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?d=identicon"


def password_meets_requirements(password: str) -> bool:
    return (
        len(password) >= RESET_PASSWORD_MIN_LENGTH
        and any(c.isupper() for c in password)
        and any(c.islower() for c in password)
        and any(c.isdigit() for c in password)
        and any(c in RESET_PASSWORD_SPECIALS for c in password)
    )


def _local_part(email: str) -> str:
    return email.split("@")[0]


def _fragment_json(fragment: Optional[str]) -> Optional[dict]:
    """User document the backend appends as ``#/<json>``, if any"""
    if not fragment:
        return None
    fragment = fragment.lstrip("#")
    if not fragment.startswith("/"):
        return None
    try:
        data = json.loads(unquote(fragment[1:]))
    except ValueError:
        logger.debug("OAuth callback fragment is not JSON")
        return None
    return data if isinstance(data, dict) else None


def parse_oauth_callback(
    params: Mapping[str, Any], fragment: Optional[str] = None
) -> Optional[OAuthProfile]:
    """
    Read the shopper out of a Google sign-in redirect.

    The backend either appends the user document as JSON after ``#/`` or
    passes the profile as query parameters. The fragment is preferred when
    it names an email. Returns None when neither does.
    """
    data = _fragment_json(fragment)
    email = str(data.get("email") or data.get("_id") or "") if data else ""
    if email:
        first, last = data.get("firstName"), data.get("lastName")
        name = (f"{first} {last}" if first and last else None) or first or data.get("name") or _local_part(email)
        image = data.get("image")
        if isinstance(image, list):
            image = image[0] if image else None
        tokens = data.get("tokens") if isinstance(data.get("tokens"), dict) else {}
        return OAuthProfile(
            email=email,
            name=name,
            avatar=image or data.get("avatar") or None,
            token=tokens.get("accessToken") or data.get("token") or data.get("accessToken") or None,
            user={k: v for k, v in data.items() if k != "tokens"},
        )

    email = params.get("email") or params.get("user")
    if not email:
        return None
    given, family = params.get("givenName"), params.get("familyName")
    name = (
        params.get("name")
        or params.get("displayName")
        or (f"{given} {family}" if given and family else None)
        or given
        or _local_part(email)
    )
    return OAuthProfile(
        email=email,
        name=name,
        avatar=params.get("avatar") or None,
        token=params.get("token") or params.get("accessToken") or None,
    )


class AccountService:
    """Signs a device in or out and announces it with ``userLogin``"""

    def __init__(
        self,
        auth: AuthState,
        client: LindoClient,
        storage: BrowserStorage,
        events: EventBus,
        reconcilers: list[Reconciler],
    ):
        self.auth = auth
        self.client = client
        self.storage = storage
        self.events = events
        self.reconcilers = reconcilers

    async def login(self, email: str, password: str) -> AuthOutcome:
        try:
            data = await self.client.login(email, password)
        except LindoAPIError as e:
            if e.status_code == 401:
                return AuthOutcome(error="Invalid credentials")
            if e.status_code == 404:
                return AuthOutcome(error="User not found")
            return AuthOutcome(error="Server error. Please try again later.")
        except LindoNetworkError:
            return AuthOutcome(error="Network error. Please try again.")

        tokens = data.get("tokens") or {}
        token = tokens.get("accessToken") or data.get("token")
        if not token:
            logger.error(f"Login response for {email} carried no access token")
            return AuthOutcome(error="Server error. Please try again later.")

        user = data.get("user") or {}
        was_logged_in = self.auth.is_logged_in()
        self.auth.record_login(token, email, user)
        self._store_profile(email, user)

        await self._announce_login(email, was_logged_in)
        return AuthOutcome(success="Login successful!", email=email)

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> AuthOutcome:
        """Create an account, then sign in with the same credentials"""
        if not all([first_name, last_name, email, password, confirm_password]):
            return AuthOutcome(error="All fields are required.")
        if password != confirm_password:
            return AuthOutcome(error="Passwords do not match.")
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthOutcome(error="Password must be at least 6 characters long.")

        try:
            await self.client.register(first_name, last_name, email, password)
        except LindoAPIError as e:
            if e.status_code == 400:
                return AuthOutcome(error="Email already exists")
            return AuthOutcome(error="Server error. Please try again later.")
        except LindoNetworkError:
            return AuthOutcome(error="Network error. Please try again.")

        outcome = await self.login(email, password)
        if outcome.ok:
            outcome.success = "Registration successful! You can now complete your order."
        return outcome

    async def complete_oauth_login(
        self, params: Mapping[str, Any], fragment: Optional[str] = None
    ) -> AuthOutcome:
        """Finish a Google sign-in from the redirect's query and fragment"""
        profile = parse_oauth_callback(params, fragment)
        if profile is None:
            logger.warning("OAuth callback carried no email")
            return AuthOutcome(error="Google sign-in failed. Please try again.")

        email = profile.email
        was_logged_in = self.auth.is_logged_in()
        if profile.token:
            self.auth.record_login(profile.token, email, profile.user)
        else:
            # Without a token the shopper stays a guest to the backend
            self.storage.set_item(USER_EMAIL_KEY, email)

        if profile.name and profile.name != email:
            self.storage.set_item(f"userName:{email}", profile.name)
        if profile.avatar:
            self.storage.set_item(f"userAvatar:{email}", profile.avatar)

        await self._announce_login(email, was_logged_in)
        return AuthOutcome(success="Login successful!", email=email)

    async def reset_password(
        self,
        token: Optional[str],
        email: Optional[str],
        password: str,
        confirm_password: str,
    ) -> AuthOutcome:
        """Set a new password with the token and email from a reset link"""
        if not token:
            return AuthOutcome(error="Invalid reset link")
        if password != confirm_password:
            return AuthOutcome(error="Passwords do not match")
        if not password_meets_requirements(password):
            return AuthOutcome(error="Password does not meet requirements")

        try:
            await self.client.reset_password(token, email or "", password)
        except LindoAPIError as e:
            return AuthOutcome(error=e.message or "Failed to reset password. Please try again.")
        except LindoNetworkError:
            return AuthOutcome(error="Network error. Please check your connection and try again.")

        logger.info(f"Password reset for {email or 'unknown email'}")
        return AuthOutcome(success="Password reset successfully", email=email or None)

    async def _announce_login(self, email: str, was_logged_in: bool) -> None:
        if not was_logged_in:
            for reconciler in self.reconcilers:
                reconciler.reset()

        await self.events.dispatch(
            USER_LOGIN,
            {
                "email": email,
                "name": self.storage.get_item(f"userName:{email}"),
                "avatar": self.storage.get_item(f"userAvatar:{email}"),
            },
        )

    async def logout(self) -> None:
        email = self.auth.user_email
        self.auth.clear()
        for reconciler in self.reconcilers:
            reconciler.reset()
        logger.info(f"Logged out {email or 'guest'}")

    def _store_profile(self, email: str, user: dict) -> None:
        first_name = user.get("firstName") or ""
        last_name = user.get("lastName") or ""
        name = " ".join(part for part in (first_name, last_name) if part) or email.split("@")[0]

        if first_name:
            self.storage.set_item(f"firstName:{email}", first_name)
        if last_name:
            self.storage.set_item(f"lastName:{email}", last_name)
        self.storage.set_item(f"userName:{email}", name)
        self.storage.set_item(f"userAvatar:{email}", user.get("image") or user.get("avatar") or gravatar_url(email))

    async def update_profile(self, first_name: str, last_name: str) -> AuthOutcome:
        """Save new names on the server and in the cached profile"""
        email = self.auth.user_email
        user_id = self.auth.user_id
        if not self.auth.is_logged_in() or not email or not user_id:
            return AuthOutcome(error="Please log in to update your profile.")

        try:
            data = await self.client.update_user(user_id, {"firstName": first_name, "lastName": last_name})
        except LindoAPIError as e:
            return AuthOutcome(error=e.message or "Failed to update profile")
        except LindoNetworkError:
            return AuthOutcome(error="Network error. Please try again.")

        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        self._store_profile(email, {"firstName": first_name, "lastName": last_name, **user})
        return AuthOutcome(success="Profile updated successfully.", email=email)
