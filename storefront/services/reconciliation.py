"""
Guest-to-account reconciliation.

After a sign-in, whatever the shopper collected as a guest is replayed into
the server-side cart and wishlist. Each device session owns one reconciler
per domain, shared by every page, so several pages reacting to the same
``userLogin`` event replay the guest data exactly once.

The local collection is taken (read and removed) before any request is sent.
A second run in the same session therefore finds nothing to replay even if
the state machine were bypassed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from ..models.cart import CartItem
from ..storage.local_store import LocalStore
from . import cart as cart_ops
from . import wishlist as wishlist_ops
from .auth_state import AuthState
from .lindo_client import LindoClient, LindoClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReconcileState(str, Enum):
    """Progress of the guest data replay for one login"""
    PENDING = "pending"
    REPLAYING = "replaying"
    DONE = "done"


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation run"""
    replayed: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    skipped: bool = False

    @property
    def complete(self) -> bool:
        return not self.skipped and not self.failed


class Reconciler(Generic[T]):
    """Replays a local guest collection into the remote one"""

    domain = "collection"

    def __init__(self, auth: AuthState, local: LocalStore, client: LindoClient):
        self.auth = auth
        self.local = local
        self.client = client
        self.state = ReconcileState.PENDING

    def reset(self) -> None:
        """Arm the reconciler for the next login"""
        self.state = ReconcileState.PENDING

    def _scopes(self) -> list[str]:
        scopes = [self.auth.scope]
        if self.local.guest_scope not in scopes:
            scopes.append(self.local.guest_scope)
        return scopes

    def _take_local(self) -> list[T]:
        raise NotImplementedError

    def _restore_local(self, entries: list[T]) -> None:
        raise NotImplementedError

    async def _prepare(self) -> None:
        """Hook run before the replay loop"""

    async def _replay(self, entry: T) -> bool:
        """Send one entry; return False when it needed no request"""
        raise NotImplementedError

    async def run(self) -> ReconcileResult:
        if not self.auth.is_logged_in():
            logger.debug(f"Skipping {self.domain} reconciliation: not logged in")
            return ReconcileResult(skipped=True)

        if self.state != ReconcileState.PENDING:
            logger.info(f"Skipping {self.domain} reconciliation: already {self.state.value}")
            return ReconcileResult(skipped=True)

        self.state = ReconcileState.REPLAYING
        result = ReconcileResult()
        remaining: list[T] = []
        try:
            remaining = self._take_local()
            if remaining:
                await self._prepare()
            while remaining:
                entry = remaining.pop(0)
                try:
                    if await self._replay(entry):
                        result.replayed.append(entry)
                except LindoClientError as e:
                    logger.error(f"Failed to sync {self.domain} entry {_label(entry)}: {e}")
                    result.failed.append(entry)
        finally:
            # Entries never sent (the run was aborted) go back with the failed ones
            unsent = result.failed + remaining
            if unsent:
                self._restore_local(unsent)
            self.state = ReconcileState.DONE

        logger.info(
            f"{self.domain.capitalize()} reconciliation finished: "
            f"{len(result.replayed)} replayed, {len(result.failed)} failed"
        )
        return result


class CartReconciler(Reconciler[CartItem]):
    """Adds every guest cart line to the server cart with its quantity"""

    domain = "cart"

    def _take_local(self) -> list[CartItem]:
        return cart_ops.merge_items(*(self.local.take_local_cart(scope) for scope in self._scopes()))

    def _restore_local(self, entries: list[CartItem]) -> None:
        current = self.local.get_local_cart()
        self.local.save_local_cart(cart_ops.merge_items(current, entries))

    async def _replay(self, entry: CartItem) -> bool:
        await self.client.add_to_cart_server(entry)
        return True


class WishlistReconciler(Reconciler[str]):
    """Adds guest wishlist ids the server wishlist does not have yet"""

    domain = "wishlist"

    def __init__(self, auth: AuthState, local: LocalStore, client: LindoClient):
        super().__init__(auth, local, client)
        self._remote_ids: set[str] = set()

    def _take_local(self) -> list[str]:
        return wishlist_ops.merge(*(self.local.take_local_wishlist(scope) for scope in self._scopes()))

    def _restore_local(self, entries: list[str]) -> None:
        current = self.local.get_local_wishlist()
        self.local.save_local_wishlist(wishlist_ops.merge(current, entries))

    async def _prepare(self) -> None:
        try:
            self._remote_ids = {p.id for p in await self.client.fetch_user_wishlist()}
        except LindoClientError as e:
            logger.warning(f"Could not read server wishlist before sync: {e}")
            self._remote_ids = set()

    async def _replay(self, entry: str) -> bool:
        if entry in self._remote_ids:
            return False
        await self.client.add_to_wishlist_server(entry)
        self._remote_ids.add(entry)
        return True


def _label(entry: Any) -> str:
    return getattr(entry, "product_id", None) or str(entry)
