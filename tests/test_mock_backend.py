import bcrypt
import pytest
from fastapi.testclient import TestClient

from mock_backend.database import order_db, reset_all, user_db
from mock_backend.database.users import DEMO_EMAIL, DEMO_PASSWORD, verify_password
from mock_backend.main import app
from mock_backend.models import OrderStatus

ORDER = {
    "paymentMethod": "dpo",
    "province": "Kigali",
    "district": "Gasabo",
    "sector": "Kimironko",
    "cell": "Bibare",
    "village": "Imena",
    "street": "KG 9 Ave",
    "customerEmail": "mama@example.com",
    "customerPhone": "+250788000000",
    "customerName": "Aline Mukamana",
    "items": [{"productId": "prod-003", "quantity": 2, "price": 3000}],
    "totalAmount": 6000,
}


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(client):
    response = client.post("/user/Login", json={"email": DEMO_EMAIL, "password": DEMO_PASSWORD})
    token = response.json()["tokens"]["accessToken"]
    return {"Authorization": f"Bearer {token}"}


def test_catalog(client) -> None:
    products = client.get("/product/getAllProduct").json()["products"]
    assert len(products) == 8
    assert products[0]["_id"] == "prod-001"

    diapers = client.get("/product/getProductsByCategory", params={"category": "diapers"}).json()
    assert [p["_id"] for p in diapers["products"]] == ["prod-002", "prod-008"]

    missing = client.get("/product/getProductById/prod-404")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Product not found"}


def test_cart_requires_token(client) -> None:
    response = client.get("/cart/getCartByUserId")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"

    forged = client.get("/cart/getCartByUserId", headers={"Authorization": "Bearer nope"})
    assert forged.status_code == 401
    assert forged.json()["message"] == "Not authorized, token failed"


def test_add_to_cart_increments(client, auth_headers) -> None:
    client.post("/cart/addToCart", json={"productId": "prod-002", "quantity": 1}, headers=auth_headers)
    response = client.post("/cart/addToCart", json={"productId": "prod-002", "quantity": 2}, headers=auth_headers)

    assert response.json()["cart"]["items"] == [{"productId": "prod-002", "quantity": 3}]

    embedded = client.get("/cart/getCartWithProducts", headers=auth_headers).json()
    assert embedded["cart"]["items"][0]["productId"]["name"] == "Pampers Baby-Dry Diapers Size 3"


def test_add_unknown_product(client, auth_headers) -> None:
    response = client.post("/cart/addToCart", json={"productId": "prod-404"}, headers=auth_headers)

    assert response.status_code == 404


def test_reduce_removes_line_at_zero(client, auth_headers) -> None:
    client.post("/cart/addToCart", json={"productId": "prod-007", "quantity": 2}, headers=auth_headers)

    once = client.put("/cart/reduceFromCart", json={"productId": "prod-007"}, headers=auth_headers)
    assert once.json()["cart"]["items"] == [{"productId": "prod-007", "quantity": 1}]

    twice = client.put("/cart/reduceFromCart", json={"productId": "prod-007"}, headers=auth_headers)
    assert twice.json()["cart"]["items"] == []


def test_update_and_remove_cart_item(client, auth_headers) -> None:
    client.post("/cart/addToCart", json={"productId": "prod-001"}, headers=auth_headers)

    invalid = client.put("/cart/updateCartItem", json={"productId": "prod-001", "quantity": 0}, headers=auth_headers)
    assert invalid.status_code == 400

    updated = client.put("/cart/updateCartItem", json={"productId": "prod-001", "quantity": 4}, headers=auth_headers)
    assert updated.json()["cart"]["items"] == [{"productId": "prod-001", "quantity": 4}]

    removed = client.request("DELETE", "/cart/removeFromCart", json={"productId": "prod-001"}, headers=auth_headers)
    assert removed.json()["cart"]["items"] == []


def test_wishlist(client, auth_headers) -> None:
    added = client.post("/wishlist/toggleWishlistProduct", json={"productId": "prod-006"}, headers=auth_headers)
    assert added.json()["added"] is True

    again = client.post("/wishlist/addToWishlist", json={"productId": "prod-006"}, headers=auth_headers)
    assert again.status_code == 200

    products = client.get("/wishlist/getUserWishlistProducts/user-demo", headers=auth_headers).json()
    assert [p["_id"] for p in products["products"]] == ["prod-006"]

    other = client.get("/wishlist/getUserWishlistProducts/someone-else", headers=auth_headers)
    assert other.status_code == 403


def test_login_errors(client) -> None:
    unknown = client.post("/user/Login", json={"email": "nobody@example.com", "password": "x"})
    assert unknown.status_code == 404

    wrong = client.post("/user/Login", json={"email": DEMO_EMAIL, "password": "wrong-password"})
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid credentials"


def test_register(client) -> None:
    form = {
        "firstName": "Aline",
        "lastName": "Mukamana",
        "email": "Aline@Example.com",
        "password": "secret1",
    }
    created = client.post("/user/Register", data=form)
    assert created.status_code == 201

    duplicate = client.post("/user/Register", data={**form, "email": "aline@example.com"})
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "Email already exists"


def test_validation_errors_use_message_body(client) -> None:
    response = client.post("/user/Login", json={"email": DEMO_EMAIL})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_order_and_payment(client) -> None:
    created = client.post("/orders/createOrder", json=ORDER)
    assert created.status_code == 201
    order_id = created.json()["order"]["_id"]

    started = client.post("/dpo/initialize/dpoPayment", json={"orderId": order_id, "totalAmount": 6000}).json()
    assert started["redirectUrl"].endswith(f"?ID={started['token']}")

    verified = client.post("/dpo/verify/dpoPayment", json={"token": started["token"]}).json()
    assert verified["orderId"] == order_id
    assert order_db.get_order(order_id).status == OrderStatus.PAID

    bogus = client.post("/dpo/verify/dpoPayment", json={"token": "not-a-token"})
    assert bogus.status_code == 404


def test_order_rejects_empty_items(client) -> None:
    response = client.post("/orders/createOrder", json={**ORDER, "items": []})

    assert response.status_code == 400


def test_passwords_are_stored_as_bcrypt_hashes() -> None:
    demo = user_db.get_by_email(DEMO_EMAIL)

    assert demo.password_hash.startswith("$2b$")
    assert bcrypt.checkpw(DEMO_PASSWORD.encode("utf-8"), demo.password_hash.encode("utf-8"))
    assert verify_password(DEMO_PASSWORD, demo.password_hash)
    assert not verify_password("wrong-password", demo.password_hash)
    assert not verify_password(DEMO_PASSWORD, "not-a-bcrypt-hash")


def test_demo_account_survives_reset() -> None:
    user_db.update_user("user-demo", {"first_name": "Changed"})
    reset_all()

    demo = user_db.get_by_email(DEMO_EMAIL)
    assert demo.first_name == "Demo"
    assert verify_password(DEMO_PASSWORD, demo.password_hash)


def test_password_reset(client) -> None:
    assert client.post("/auth/forgotPassword", json={"email": "nobody@example.com"}).status_code == 404
    token = client.post("/auth/forgotPassword", json={"email": DEMO_EMAIL}).json()["token"]

    wrong_email = client.post(
        "/auth/resetPassword", json={"token": token, "email": "other@example.com", "newPassword": "N3w!password"}
    )
    assert wrong_email.status_code == 400
    assert wrong_email.json() == {"message": "Invalid or expired reset token"}

    response = client.post("/auth/resetPassword", json={"token": token, "email": DEMO_EMAIL, "newPassword": "N3w!password"})
    assert response.json() == {"message": "Password reset successfully"}
    assert client.post("/user/Login", json={"email": DEMO_EMAIL, "password": "N3w!password"}).status_code == 200

    # Tokens are single use
    again = client.post("/auth/resetPassword", json={"token": token, "email": DEMO_EMAIL, "newPassword": "Other!pw1"})
    assert again.status_code == 400
