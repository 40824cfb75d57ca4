import json

import pytest

from mock_backend.database import cart_db, user_db
from mock_backend.security.auth import create_access_token
from storefront.core.events import USER_LOGIN
from storefront.models.cart import CartItem
from storefront.services import ReconcileState
from storefront.services.account import parse_oauth_callback


@pytest.mark.anyio
async def test_login_records_auth_and_profile(device, credentials) -> None:
    events = []
    device.events.add_listener(USER_LOGIN, events.append)
    email, password = credentials

    outcome = await device.account.login(email, password)

    assert outcome.ok
    assert device.auth.is_logged_in()
    assert device.auth.user_id == "user-demo"
    assert device.storage.get_item(f"userName:{email}") == "Demo Parent"
    assert device.storage.get_item(f"userAvatar:{email}").startswith("https://www.gravatar.com/avatar/")
    assert events == [{"email": email, "name": "Demo Parent", "avatar": device.storage.get_item(f"userAvatar:{email}")}]


@pytest.mark.anyio
async def test_login_error_messages(device, transport, credentials) -> None:
    email, _ = credentials

    assert (await device.account.login(email, "wrong-password")).error == "Invalid credentials"
    assert (await device.account.login("nobody@example.com", "whatever")).error == "User not found"

    transport.fail_paths.add("/user/Login")
    assert (await device.account.login(email, "whatever")).error == "Network error. Please try again."
    assert not device.auth.is_logged_in()


@pytest.mark.anyio
@pytest.mark.parametrize(
    "fields, message",
    [
        (("Aline", "", "aline@example.com", "secret1", "secret1"), "All fields are required."),
        (("Aline", "M", "aline@example.com", "secret1", "secret2"), "Passwords do not match."),
        (("Aline", "M", "aline@example.com", "abc", "abc"), "Password must be at least 6 characters long."),
    ],
)
async def test_register_validation(device, fields, message) -> None:
    outcome = await device.account.register(*fields)

    assert outcome.error == message


@pytest.mark.anyio
async def test_register_then_signed_in(device) -> None:
    outcome = await device.account.register("Aline", "Mukamana", "aline@example.com", "secret1", "secret1")

    assert outcome.success == "Registration successful! You can now complete your order."
    assert device.auth.user_email == "aline@example.com"
    assert user_db.get_by_email("aline@example.com").first_name == "Aline"


@pytest.mark.anyio
async def test_register_existing_email(device, credentials) -> None:
    outcome = await device.account.register("Demo", "Parent", credentials[0], "secret1", "secret1")

    assert outcome.error == "Email already exists"


@pytest.mark.anyio
async def test_logout_keeps_local_collections(device, credentials) -> None:
    await device.account.login(*credentials)
    device.local.save_local_wishlist(["prod-001"], scope="guest")

    await device.account.logout()

    assert not device.auth.is_logged_in()
    assert device.local.get_local_wishlist() == ["prod-001"]


@pytest.mark.anyio
async def test_update_profile(device, credentials) -> None:
    email = credentials[0]
    assert (await device.account.update_profile("A", "B")).error == "Please log in to update your profile."

    await device.account.login(*credentials)
    outcome = await device.account.update_profile("Grace", "Uwase")

    assert outcome.success == "Profile updated successfully."
    assert user_db.get_user("user-demo").first_name == "Grace"
    assert device.storage.get_item(f"userName:{email}") == "Grace Uwase"


def test_oauth_callback_query_parameters() -> None:
    profile = parse_oauth_callback({"user": "keza@example.com", "givenName": "Keza", "familyName": "Ingabire"})

    assert profile.email == "keza@example.com"
    assert profile.name == "Keza Ingabire"
    assert profile.token is None
    assert parse_oauth_callback({"email": "keza@example.com"}).name == "keza"
    assert parse_oauth_callback({"givenName": "Keza"}) is None


def test_oauth_callback_fragment_wins_over_query() -> None:
    document = {"_id": "keza@example.com", "firstName": "Keza", "image": ["https://img.test/k.png"]}

    profile = parse_oauth_callback({"email": "other@example.com"}, "#/" + json.dumps(document))

    assert profile.email == "keza@example.com"
    assert profile.name == "Keza"
    assert profile.avatar == "https://img.test/k.png"
    assert parse_oauth_callback({"email": "other@example.com"}, "#/not-json").email == "other@example.com"


@pytest.mark.anyio
async def test_oauth_login_with_token_replays_guest_cart(device, credentials) -> None:
    events = []
    device.events.add_listener(USER_LOGIN, events.append)
    await device.cart.add(CartItem(productId="prod-001", name="Huggies Natural Care Baby Wipes", price=5000))
    email = credentials[0]
    token = create_access_token(user_db.get_by_email(email))

    outcome = await device.account.complete_oauth_login(
        {"email": email, "name": "Demo Parent", "avatar": "https://img.test/d.png", "token": token}
    )

    assert outcome.success == "Login successful!"
    assert device.auth.is_logged_in()
    assert device.storage.get_item(f"userAvatar:{email}") == "https://img.test/d.png"
    assert events == [{"email": email, "name": "Demo Parent", "avatar": "https://img.test/d.png"}]
    assert [(line.product_id, line.quantity) for line in cart_db.get_cart("user-demo")] == [("prod-001", 1)]
    assert device.cart_reconciler.state == ReconcileState.DONE


@pytest.mark.anyio
async def test_oauth_login_without_token_records_email_only(device) -> None:
    outcome = await device.account.complete_oauth_login({"email": "keza@example.com"})

    assert outcome.ok
    assert device.auth.user_email == "keza@example.com"
    assert not device.auth.is_logged_in()
    assert device.storage.get_item("userName:keza@example.com") == "keza"


@pytest.mark.anyio
async def test_oauth_login_without_email_fails(device) -> None:
    events = []
    device.events.add_listener(USER_LOGIN, events.append)

    outcome = await device.account.complete_oauth_login({"token": "abc"})

    assert outcome.error == "Google sign-in failed. Please try again."
    assert events == []
    assert device.auth.user_email is None


@pytest.mark.anyio
@pytest.mark.parametrize(
    "token, password, confirm, message",
    [
        (None, "Str0ng!pw", "Str0ng!pw", "Invalid reset link"),
        ("t", "Str0ng!pw", "Str0ng!px", "Passwords do not match"),
        ("t", "Sh0rt!", "Sh0rt!", "Password does not meet requirements"),
        ("t", "nouppercase1!", "nouppercase1!", "Password does not meet requirements"),
        ("t", "NoSpecial123", "NoSpecial123", "Password does not meet requirements"),
    ],
)
async def test_reset_password_validation(device, transport, token, password, confirm, message) -> None:
    outcome = await device.account.reset_password(token, "demo@lindocare.rw", password, confirm)

    assert outcome.error == message
    assert transport.calls("/auth/resetPassword") == 0


@pytest.mark.anyio
async def test_reset_password_then_login(device, credentials) -> None:
    email, old_password = credentials
    token = user_db.issue_reset_token(email)

    outcome = await device.account.reset_password(token, email, "N3w!password", "N3w!password")

    assert outcome.success == "Password reset successfully"
    assert (await device.account.login(email, old_password)).error == "Invalid credentials"
    assert (await device.account.login(email, "N3w!password")).ok


@pytest.mark.anyio
async def test_reset_password_errors(device, transport, credentials) -> None:
    email = credentials[0]

    outcome = await device.account.reset_password("bogus", email, "N3w!password", "N3w!password")
    assert outcome.error == "Invalid or expired reset token"

    transport.fail_paths.add("/auth/resetPassword")
    outcome = await device.account.reset_password("bogus", email, "N3w!password", "N3w!password")
    assert outcome.error == "Network error. Please check your connection and try again."
