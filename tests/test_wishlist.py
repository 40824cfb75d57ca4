import pytest

from mock_backend.database import wishlist_db
from storefront.core.events import WISHLIST_UPDATED
from storefront.services import LindoNetworkError
from storefront.services import wishlist as wishlist_ops


def test_toggle_twice_restores_the_set() -> None:
    ids = ["p1", "p3"]

    assert wishlist_ops.toggle(wishlist_ops.toggle(ids, "p2"), "p2") == ids
    assert wishlist_ops.toggle(wishlist_ops.toggle(ids, "p1"), "p1") == ["p3", "p1"]


def test_add_present_id_is_noop() -> None:
    assert wishlist_ops.add(["p1"], "p1") == ["p1"]
    assert wishlist_ops.merge(["p1", "p2"], ["p2", "p3"]) == ["p1", "p2", "p3"]


@pytest.mark.anyio
async def test_guest_toggle_writes_local_storage_and_announces_count(device) -> None:
    counts = []
    device.events.add_listener(WISHLIST_UPDATED, lambda detail: counts.append(detail["count"]))

    ids = await device.wishlist.toggle("prod-002", [])
    ids = await device.wishlist.toggle("prod-005", ids)

    assert device.local.get_local_wishlist() == ["prod-002", "prod-005"]
    assert await device.wishlist.load_ids() == ids
    assert counts == [1, 2]
    assert device.header.wishlist_count == 2


@pytest.mark.anyio
async def test_signed_in_toggle_uses_server(device, credentials) -> None:
    await device.account.login(*credentials)

    ids = await device.wishlist.toggle("prod-007", [])

    assert ids == ["prod-007"]
    assert wishlist_db.get_wishlist("user-demo") == ["prod-007"]
    assert device.local.get_local_wishlist() == []
    assert [p.name for p in await device.wishlist.load_products()] == ["Soft Plush Elephant"]


@pytest.mark.anyio
async def test_failed_server_toggle_leaves_local_storage_alone(device, transport, credentials, storage_writes) -> None:
    await device.account.login(*credentials)
    storage_writes.clear()
    transport.fail_paths.add("/wishlist/toggleWishlistProduct")

    with pytest.raises(LindoNetworkError):
        await device.wishlist.toggle("prod-007", [])

    assert storage_writes == []
    assert wishlist_db.get_wishlist("user-demo") == []
