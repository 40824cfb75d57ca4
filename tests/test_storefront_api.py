import httpx
import pytest
from fastapi.testclient import TestClient

from mock_backend.database import cart_db, user_db
from mock_backend.security.auth import create_access_token
from storefront.core.session import session_manager
from storefront.main import app

FORM = {
    "province": "Kigali",
    "district": "Gasabo",
    "sector": "Kimironko",
    "cell": "Bibare",
    "village": "Imena",
    "street": "KG 9 Ave",
    "customer_email": "mama@example.com",
    "customer_phone": "+250788000000",
    "customer_name": "Aline Mukamana",
}


@pytest.fixture
def api(transport, settings):
    original_config = session_manager.config
    session_manager.clear()
    session_manager.config = settings
    session_manager.http_client = httpx.AsyncClient(transport=transport)
    with TestClient(app) as client:
        client.headers["X-Device-Id"] = "device-1"
        yield client
    session_manager.clear()
    session_manager.http_client = None
    session_manager.config = original_config


def test_health(api) -> None:
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_device_id_is_created_and_echoed(api) -> None:
    fresh = api.get("/api/auth/status", headers={"X-Device-Id": ""})
    device_id = fresh.headers["X-Device-Id"]

    assert device_id and device_id != "device-1"
    again = api.get("/api/auth/status", headers={"X-Device-Id": device_id})
    assert again.json()["device_id"] == device_id

    invalid = api.get("/api/auth/status", headers={"X-Device-Id": "../../etc/passwd"})
    assert invalid.headers["X-Device-Id"] != "../../etc/passwd"


def test_home_page_renders(api) -> None:
    response = api.get("/")

    assert response.status_code == 200
    assert "Lindocare Storefront" in response.text
    assert response.headers["X-Device-Id"] == "device-1"


def test_guest_cart_survives_login(api, credentials) -> None:
    added = api.post("/api/cart/items", json={"productId": "prod-001", "quantity": 2})
    assert added.status_code == 200
    assert added.json()["toast"] == "Huggies Natural Care Baby Wipes added to cart!"

    email, password = credentials
    login = api.post("/api/auth/login", json={"email": email, "password": password})

    assert login.status_code == 200
    assert login.json()["message"] == "Login successful!"
    assert login.json()["cart_reconciliation"] == "done"
    assert [(l.product_id, l.quantity) for l in cart_db.get_cart("user-demo")] == [("prod-001", 2)]

    cart = api.get("/api/cart").json()
    assert [(i["productId"], i["quantity"]) for i in cart["items"]] == [("prod-001", 2)]
    assert cart["subtotal_display"] == "10,000"


def test_login_error(api, credentials) -> None:
    response = api.post("/api/auth/login", json={"email": credentials[0], "password": "nope"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_quantity_change_is_clamped(api) -> None:
    api.post("/api/cart/items", json={"productId": "prod-003"})

    response = api.patch("/api/cart/items/prod-003", json={"delta": -4})

    assert response.json()["items"][0]["quantity"] == 1

    removed = api.delete("/api/cart/items/prod-003")
    assert removed.json()["items"] == []


def test_unknown_product_maps_to_404(api) -> None:
    response = api.post("/api/cart/items", json={"productId": "prod-404"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


def test_wishlist_toggle(api) -> None:
    toggled = api.post("/api/wishlist/prod-006/toggle")
    assert toggled.json()["wishlisted"] is True

    listing = api.get("/api/wishlist").json()
    assert listing["wishlist"] == ["prod-006"]
    assert [p["id"] for p in listing["products"]] == ["prod-006"]

    status = api.get("/api/auth/status").json()
    assert status["header"]["wishlist_count"] == 1


def test_product_page_error_state(api) -> None:
    response = api.get("/api/products/prod-404")

    assert response.status_code == 502
    assert response.json()["state"] == "error"
    assert response.json()["error"] == "Failed to load product. Please try again."


def test_product_and_category_pages(api) -> None:
    product = api.get("/api/products/prod-002").json()
    assert product["product"]["name"] == "Pampers Baby-Dry Diapers Size 3"
    assert [p["id"] for p in product["related"]] == ["prod-008"]

    category = api.get("/api/category/Toys").json()
    assert [p["id"] for p in category["products"]] == ["prod-007"]

    missing = api.post("/api/category/Toys/cart/prod-001", json={"quantity": 1})
    assert missing.status_code == 404


def test_search(api) -> None:
    response = api.get("/api/search", params={"q": "lotion"}).json()

    assert [p["id"] for p in response["results"]] == ["prod-005"]
    assert response["history"] == ["lotion"]

    cleared = api.delete("/api/search/history")
    assert cleared.json() == {"history": []}


def test_home_sections(api) -> None:
    data = api.get("/api/home").json()

    assert len(data["categories"]) == 5
    assert data["banners"]
    assert data["icons"]
    assert data["ads"]


def test_checkout_and_payment_verification(api) -> None:
    api.post("/api/cart/items", json={"productId": "prod-003", "quantity": 1})
    api.post("/api/cart/items", json={"productId": "prod-004", "quantity": 2})

    page = api.get("/api/checkout").json()
    assert page["subtotal_display"] == "17,000"

    incomplete = api.post("/api/checkout", json={**FORM, "street": ""})
    assert incomplete.status_code == 400
    assert incomplete.json()["outcome"]["error"] == "Please fill in all required fields."

    submitted = api.post("/api/checkout", json=FORM)
    assert submitted.status_code == 200
    outcome = submitted.json()["outcome"]
    assert outcome["success"] == "Order created! Redirecting to payment gateway..."
    assert submitted.json()["items"] == []

    pending = api.get("/api/payment/pending").json()
    assert pending["order_id"] == outcome["order_id"]

    verified = api.post("/api/payment/verify")
    assert verified.status_code == 200
    assert verified.json()["order_id"] == outcome["order_id"]

    again = api.post("/api/payment/verify")
    assert again.status_code == 400
    assert again.json()["detail"] == "No payment token found."


def test_admin_gate(api) -> None:
    assert api.post("/api/admin/login", json={"username": "admin", "password": "wrong"}).status_code == 401
    assert api.get("/api/admin/status").json() == {"is_admin": False}

    assert api.post("/api/admin/login", json={"username": "admin", "password": "admin123"}).status_code == 200
    assert api.get("/api/admin/status").json() == {"is_admin": True}

    api.post("/api/admin/logout")
    assert api.get("/api/admin/status").json() == {"is_admin": False}


def test_register_and_logout(api) -> None:
    registered = api.post(
        "/api/auth/register",
        json={
            "firstName": "Aline",
            "lastName": "Mukamana",
            "email": "aline@example.com",
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )
    assert registered.status_code == 200
    assert registered.json()["logged_in"] is True
    assert registered.json()["name"] == "Aline Mukamana"

    logged_out = api.post("/api/auth/logout").json()
    assert logged_out["logged_in"] is False
    assert logged_out["cart_reconciliation"] == "pending"


def test_cart_actions_see_items_added_from_product_page(api, credentials) -> None:
    email, password = credentials
    api.post("/api/auth/login", json={"email": email, "password": password})
    assert api.get("/api/cart").json()["items"] == []

    added = api.post("/api/products/prod-001/cart", json={"quantity": 1})
    assert added.status_code == 200

    increased = api.patch("/api/cart/items/prod-001", json={"delta": 1})
    assert [(i["productId"], i["quantity"]) for i in increased.json()["items"]] == [("prod-001", 2)]
    assert [(l.product_id, l.quantity) for l in cart_db.get_cart("user-demo")] == [("prod-001", 2)]

    api.post("/api/category/Toys/cart/prod-007", json={"quantity": 1})
    removed = api.delete("/api/cart/items/prod-007")
    assert [i["productId"] for i in removed.json()["items"]] == ["prod-001"]
    assert [l.product_id for l in cart_db.get_cart("user-demo")] == ["prod-001"]


def test_logout_leaves_server_cart_out_of_the_cart_page(api, credentials) -> None:
    email, password = credentials
    api.post("/api/auth/login", json={"email": email, "password": password})
    api.post("/api/cart/items", json={"productId": "prod-002"})

    api.post("/api/auth/logout")
    response = api.delete("/api/cart/items/prod-002")

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert [l.product_id for l in cart_db.get_cart("user-demo")] == ["prod-002"]


def test_google_callback_signs_in_and_replays_guest_cart(api, credentials) -> None:
    email = credentials[0]
    api.post("/api/cart/items", json={"productId": "prod-001"})
    token = create_access_token(user_db.get_by_email(email))

    response = api.get("/api/auth/google/callback", params={"email": email, "givenName": "Demo", "token": token})

    assert response.status_code == 200
    assert response.json()["logged_in"] is True
    assert response.json()["name"] == "Demo"
    assert response.json()["cart_reconciliation"] == "done"
    assert [l.product_id for l in cart_db.get_cart("user-demo")] == ["prod-001"]


def test_google_callback_relay_reads_fragment(api) -> None:
    fragment = '#/{"email": "keza@example.com", "firstName": "Keza", "lastName": "Ingabire"}'

    relayed = api.post("/api/auth/google/callback", json={"params": {}, "fragment": fragment})
    assert relayed.status_code == 200
    assert relayed.json()["email"] == "keza@example.com"
    assert relayed.json()["name"] == "Keza Ingabire"

    missing = api.get("/api/auth/google/callback")
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Google sign-in failed. Please try again."


def test_reset_password_route(api, credentials) -> None:
    email, _ = credentials
    body = {"token": user_db.issue_reset_token(email), "email": email, "password": "N3w!password"}

    mismatch = api.post("/api/auth/reset-password", json={**body, "confirmPassword": "other"})
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"

    reset = api.post("/api/auth/reset-password", json={**body, "confirmPassword": "N3w!password"})
    assert reset.json() == {"message": "Password reset successfully"}
    assert api.post("/api/auth/login", json={"email": email, "password": "N3w!password"}).status_code == 200
