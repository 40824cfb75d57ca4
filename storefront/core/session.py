"""Device sessions: one browser's storage, events, services and open pages"""

import logging
import os
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import httpx

from ..controllers import CartPage, CheckoutPage, HeaderBadges, SearchPage, WishlistPage
from ..services import (
    AccountService,
    AdminGate,
    AuthState,
    CartReconciler,
    CartService,
    CheckoutService,
    LindoClient,
    WishlistReconciler,
    WishlistService,
)
from ..storage import BrowserStorage, LocalStore
from .config import Settings, settings as default_settings
from .events import EventBus, STORAGE

logger = logging.getLogger(__name__)

DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass
class DeviceSession:
    """Everything a single browser would hold for the storefront"""
    device_id: str
    created_at: datetime
    updated_at: datetime
    storage: BrowserStorage
    session_storage: BrowserStorage
    events: EventBus
    auth: AuthState
    local: LocalStore
    client: LindoClient
    cart: CartService
    wishlist: WishlistService
    cart_reconciler: CartReconciler
    wishlist_reconciler: WishlistReconciler
    account: AccountService
    checkout: CheckoutService
    admin: AdminGate
    pages: dict = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        device_id: str,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[Settings] = None,
    ) -> "DeviceSession":
        config = config or default_settings
        events = EventBus()
        path = os.path.join(config.storage_dir, f"{device_id}.json") if config.storage_dir else None
        storage = BrowserStorage(path, on_change=lambda key: events.emit(STORAGE, {"key": key}))
        session_storage = BrowserStorage()

        auth = AuthState(storage, guest_scope=config.guest_scope)
        local = LocalStore(storage, lambda: auth.scope, guest_scope=config.guest_scope)
        client = LindoClient(
            base_url=config.api_base_url,
            auth=auth,
            http_client=http_client,
            timeout=config.request_timeout,
        )
        cart = CartService(auth, local, client)
        wishlist = WishlistService(auth, local, client, events)
        cart_reconciler = CartReconciler(auth, local, client)
        wishlist_reconciler = WishlistReconciler(auth, local, client)

        now = datetime.utcnow()
        session = cls(
            device_id=device_id,
            created_at=now,
            updated_at=now,
            storage=storage,
            session_storage=session_storage,
            events=events,
            auth=auth,
            local=local,
            client=client,
            cart=cart,
            wishlist=wishlist,
            cart_reconciler=cart_reconciler,
            wishlist_reconciler=wishlist_reconciler,
            account=AccountService(auth, client, storage, events, [cart_reconciler, wishlist_reconciler]),
            checkout=CheckoutService(
                auth,
                cart,
                client,
                storage,
                callback_url=config.payment_callback_url,
                manual_payment_instructions=config.manual_payment_instructions,
                currency=config.currency,
            ),
            admin=AdminGate(session_storage, config.admin_username, config.admin_password),
        )
        session._open_pages(config)
        return session

    def _open_pages(self, config: Settings) -> None:
        """Mount the pages that stay open for the whole session"""
        self.pages = {
            "header": HeaderBadges(self.events, self.auth, self.local),
            "cart": CartPage(
                self.events,
                self.cart,
                self.cart_reconciler,
                free_shipping_threshold=config.free_shipping_threshold,
            ),
            "wishlist": WishlistPage(self.events, self.wishlist, self.wishlist_reconciler, self.client),
            "search": SearchPage(
                self.events,
                self.auth,
                self.storage,
                self.client,
                self.cart,
                self.wishlist,
                self.wishlist_reconciler,
                history_limit=config.search_history_limit,
            ),
            "checkout": CheckoutPage(self.events, self.auth, self.storage, self.checkout),
        }
        for page in self.pages.values():
            page.mount()

    @property
    def header(self) -> HeaderBadges:
        return self.pages["header"]

    @property
    def cart_page(self) -> CartPage:
        return self.pages["cart"]

    @property
    def wishlist_page(self) -> WishlistPage:
        return self.pages["wishlist"]

    @property
    def search_page(self) -> SearchPage:
        return self.pages["search"]

    @property
    def checkout_page(self) -> CheckoutPage:
        return self.pages["checkout"]

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def close(self) -> None:
        for page in self.pages.values():
            page.unmount()


class SessionManager:
    """Manages device sessions keyed by the ``X-Device-Id`` header"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.sessions: dict[str, DeviceSession] = {}
        self.http_client: Optional[httpx.AsyncClient] = None

    @staticmethod
    def is_valid_device_id(device_id: Optional[str]) -> bool:
        return bool(device_id and DEVICE_ID_PATTERN.match(device_id))

    def create_session(self, device_id: Optional[str] = None) -> DeviceSession:
        """Create a session, reusing ``device_id`` when it is well formed"""
        if not self.is_valid_device_id(device_id):
            device_id = str(uuid.uuid4())
        session = DeviceSession.create(device_id, http_client=self.http_client, config=self.config)
        self.sessions[device_id] = session
        logger.debug(f"Created device session {device_id}")
        return session

    def get_session(self, device_id: str) -> Optional[DeviceSession]:
        return self.sessions.get(device_id)

    def get_or_create_session(self, device_id: Optional[str] = None) -> DeviceSession:
        """Get existing session or create new one"""
        if device_id and device_id in self.sessions:
            session = self.sessions[device_id]
            session.touch()
            return session
        return self.create_session(device_id)

    def delete_session(self, device_id: str) -> bool:
        session = self.sessions.pop(device_id, None)
        if session is None:
            return False
        session.close()
        return True

    def cleanup_old_sessions(self, max_age_hours: Optional[int] = None) -> int:
        """Remove sessions idle for longer than max_age_hours"""
        max_age_hours = max_age_hours or self.config.session_max_age_hours
        now = datetime.utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            self.delete_session(sid)
        return len(old_sessions)

    def clear(self) -> None:
        for sid in list(self.sessions):
            self.delete_session(sid)


# Singleton instance
session_manager = SessionManager()
