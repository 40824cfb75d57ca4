"""Vendor dashboard gate (a session flag behind a configured credential pair)"""

import hmac
import logging

from ..storage.browser import BrowserStorage

logger = logging.getLogger(__name__)

ADMIN_FLAG_KEY = "isAdminLoggedIn"


class AdminGate:
    """
    Checks the dashboard username/password and keeps the result in session
    storage. This only hides the dashboard; the backend does its own auth.
    """

    def __init__(self, session_storage: BrowserStorage, username: str, password: str):
        self.session_storage = session_storage
        self._username = username
        self._password = password

    def login(self, username: str, password: str) -> bool:
        valid = hmac.compare_digest(username, self._username) and hmac.compare_digest(password, self._password)
        if valid:
            self.session_storage.set_item(ADMIN_FLAG_KEY, "true")
        else:
            logger.warning(f"Rejected dashboard login for {username!r}")
        return valid

    def logout(self) -> None:
        self.session_storage.remove_item(ADMIN_FLAG_KEY)

    @property
    def is_admin(self) -> bool:
        return self.session_storage.get_item(ADMIN_FLAG_KEY) == "true"
