import pytest

from mock_backend.database import cart_db
from storefront.controllers import CategoryPage, PageState, ProductPage
from storefront.models.cart import CartItem

WIPES = CartItem(productId="prod-001", name="Huggies Natural Care Baby Wipes", price=5000)


@pytest.mark.anyio
async def test_wishlist_toggle_failure_reverts_without_storage_write(
    device, transport, credentials, storage_writes
) -> None:
    await device.account.login(*credentials)
    page = device.wishlist_page
    await page.load()
    storage_writes.clear()
    transport.fail_paths.add("/wishlist/toggleWishlistProduct")

    ok = await page.toggle("prod-002")

    assert not ok
    assert page.wishlist_ids == []
    assert page.toast == "Failed to update wishlist. Please try again."
    assert storage_writes == []


@pytest.mark.anyio
async def test_wishlist_page_for_guest_filters_catalog(device) -> None:
    device.local.save_local_wishlist(["prod-005", "prod-404"])
    page = device.wishlist_page

    assert await page.load() == PageState.LOADED
    assert [p.id for p in page.products] == ["prod-005"]

    assert await page.toggle("prod-005")
    assert page.products == []
    assert device.local.get_local_wishlist() == ["prod-404"]


@pytest.mark.anyio
async def test_cart_page_quantity_clamp_and_totals(device) -> None:
    page = device.cart_page
    await page.add_to_cart(WIPES.model_copy(update={"quantity": 2}))

    await page.handle_quantity_change("prod-001", -5)

    assert page.items[0].quantity == 1
    assert device.local.get_local_cart()[0].quantity == 1
    assert page.free_shipping_remaining == 45000
    assert page.snapshot()["subtotal_display"] == "5,000"


@pytest.mark.anyio
async def test_cart_page_reverts_failed_remote_remove(device, transport, credentials) -> None:
    await device.cart.add(WIPES)
    await device.account.login(*credentials)
    page = device.cart_page
    transport.fail_paths.add("/cart/removeFromCart")

    ok = await page.handle_remove("prod-001")

    assert not ok
    assert [i.product_id for i in page.items] == ["prod-001"]
    assert page.toast == "Failed to remove item. Please try again."


def _server_cart() -> list[tuple[str, int]]:
    return [(line.product_id, line.quantity) for line in cart_db.get_cart("user-demo")]


@pytest.mark.anyio
async def test_cart_page_removes_item_added_from_product_page(device, credentials) -> None:
    await device.account.login(*credentials)
    assert device.cart_page.state == PageState.LOADED
    product_page = ProductPage(device.events, device.client, device.cart, device.wishlist, "prod-001")
    await product_page.load()
    assert await product_page.add_to_cart(1)

    ok = await device.cart_page.handle_remove("prod-001")

    assert ok
    assert _server_cart() == []
    assert device.cart_page.items == []


@pytest.mark.anyio
async def test_cart_page_increases_item_added_from_category_page(device, credentials) -> None:
    await device.account.login(*credentials)
    category_page = CategoryPage(device.events, device.client, device.cart, device.wishlist, "Feeding")
    await category_page.load()
    assert await category_page.add_to_cart("prod-003")

    ok = await device.cart_page.handle_quantity_change("prod-003", 1)

    assert ok
    assert _server_cart() == [("prod-003", 2)]
    assert [(i.product_id, i.quantity) for i in device.cart_page.items] == [("prod-003", 2)]


@pytest.mark.anyio
async def test_cart_page_drops_server_items_on_logout(device, credentials) -> None:
    await device.account.login(*credentials)
    await device.cart_page.add_to_cart(WIPES)
    assert [i.product_id for i in device.cart_page.items] == ["prod-001"]

    await device.account.logout()

    assert device.cart_page.items == []
    assert device.header.snapshot()["logged_in"] is False
    assert _server_cart() == [("prod-001", 1)]


@pytest.mark.anyio
async def test_cart_page_reports_failure_when_reload_fails(device, transport, credentials) -> None:
    await device.account.login(*credentials)
    await device.cart.add(WIPES)
    transport.fail_paths.add("/cart/")

    ok = await device.cart_page.handle_remove("prod-001")

    assert not ok
    assert device.cart_page.state == PageState.ERROR
    assert transport.calls("/cart/removeFromCart") == 0


@pytest.mark.anyio
async def test_guest_cart_page_follows_storage_events(device) -> None:
    page = device.cart_page
    await page.load()

    await device.cart.add(WIPES)

    assert [i.product_id for i in page.items] == ["prod-001"]
    assert device.header.cart_count == 1


@pytest.mark.anyio
async def test_load_failure_sets_error_state_and_retry_recovers(device, transport) -> None:
    page = ProductPage(device.events, device.client, device.cart, device.wishlist, "prod-002")
    transport.fail_paths.add("/product/")

    assert await page.load() == PageState.ERROR
    assert page.error == "Failed to load product. Please try again."

    transport.fail_paths.clear()

    assert await page.retry() == PageState.LOADED
    assert page.product.name == "Pampers Baby-Dry Diapers Size 3"
    assert [p.id for p in page.related] == ["prod-008"]


@pytest.mark.anyio
async def test_product_page_add_to_cart(device) -> None:
    page = ProductPage(device.events, device.client, device.cart, device.wishlist, "prod-004")
    await page.load()

    assert await page.add_to_cart(quantity=2)
    assert page.toast == "Cerelac Infant Cereal Wheat 400g added to cart!"
    assert [(i.product_id, i.price, i.quantity) for i in device.local.get_local_cart()] == [("prod-004", 7000, 2)]


@pytest.mark.anyio
async def test_category_page(device) -> None:
    page = CategoryPage(device.events, device.client, device.cart, device.wishlist, "feeding")
    await page.load()

    assert {p.id for p in page.products} == {"prod-003", "prod-004"}
    assert len(page.categories) == 5
    assert not await page.add_to_cart("prod-001")
    assert page.toast == "Product not found."
    assert await page.toggle_wishlist("prod-003")
    assert page.is_wishlisted("prod-003")


@pytest.mark.anyio
async def test_search_filters_catalog_and_keeps_history(device) -> None:
    page = device.search_page

    results = await page.search("pampers")
    await page.search("BOTTLE")
    await page.search("Pampers")

    assert {p.id for p in results} == {"prod-002", "prod-008"}
    assert page.history == ["Pampers", "BOTTLE"]
    assert device.storage.get_item("searchHistory") is not None

    page.clear_history()
    assert page.history == []


@pytest.mark.anyio
async def test_search_history_is_bounded_and_per_user(device, credentials) -> None:
    page = device.search_page
    page.history_limit = 3
    for query in ["a", "b", "c", "d"]:
        await page.search(query)

    assert page.history == ["d", "c", "b"]

    await device.account.login(*credentials)

    assert page.history == []


@pytest.mark.anyio
async def test_checkout_page_prefills_and_clears_after_redirect(device, credentials) -> None:
    await device.cart.add(WIPES)
    await device.account.login(*credentials)
    page = device.checkout_page
    await page.load()

    form = page.default_form()
    assert form.customer_email == credentials[0]
    assert form.customer_name == "Demo Parent"

    form = form.model_copy(
        update=dict(
            province="Kigali",
            district="Kicukiro",
            sector="Niboye",
            cell="Gatare",
            village="Ituze",
            street="KK 15 Rd",
            customer_phone="+250788111222",
        )
    )
    outcome = await page.submit(form)

    assert outcome.redirect_url
    assert page.items == []
    assert page.snapshot()["total_display"] == "0"
