"""
Lindo API Client

HTTP client for the remote Lindo backend (catalog, cart, wishlist, orders,
payments and users). Authenticated calls carry the bearer token read from
the device's auth state at call time.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..models.cart import CartItem
from ..models.catalog import Category, Product
from .auth_state import AuthState

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://lindo-project.onrender.com"


class LindoClientError(Exception):
    """Base exception for Lindo client errors"""
    pass


class NotAuthenticatedError(LindoClientError):
    """Raised before sending an authenticated call without a token"""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class LindoNetworkError(LindoClientError):
    """The request never produced an HTTP response"""
    pass


class LindoAPIError(LindoClientError):
    """The backend answered with a non-success status"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def normalize_cart_items(items: list) -> list[CartItem]:
    """Convert server cart lines to ``CartItem`` objects"""
    result = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        product = item.get("productId")
        joined = product if isinstance(product, dict) else {}
        try:
            result.append(
                CartItem(
                    productId=product or item.get("_id"),
                    name=item.get("name") or joined.get("name") or "Product",
                    price=item.get("price") or joined.get("price") or 0,
                    image=item.get("image") or joined.get("image"),
                    quantity=item.get("quantity") or 1,
                    category=item.get("category") or joined.get("category"),
                )
            )
        except ValidationError:
            logger.warning(f"Skipping malformed cart line: {item}")
    return result


class LindoClient:
    """
    Client for the Lindo storefront backend.

    Each method is a single request/response cycle; non-success responses
    raise ``LindoAPIError`` and transport failures raise
    ``LindoNetworkError``. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        auth: Optional[AuthState] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize Lindo client.

        Args:
            base_url: Base URL of the Lindo backend
            auth: Auth state used to read the bearer token
            http_client: Shared HTTP client (one is created when omitted)
            timeout: Timeout for a client created here
        """
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client if this instance created it"""
        if self._owns_client:
            await self._http_client.aclose()

    def _token(self) -> Optional[str]:
        return self.auth.token if self.auth else None

    def _generate_headers(self, bearer: Optional[str] = None, json_body: bool = False) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        data: Optional[dict] = None,
        files: Optional[dict] = None,
        authenticated: bool = True,
        bearer: Optional[str] = None,
        error_message: str = "Request failed",
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body"""
        url = f"{self.base_url}{path}"

        if authenticated:
            bearer = bearer or self._token()
            if not bearer:
                raise NotAuthenticatedError()

        headers = self._generate_headers(bearer=bearer, json_body=body is not None)

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=headers,
                json=body,
                params=params,
                data=data,
                files=files,
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error on {method} {path}: {e}")
            raise LindoNetworkError(f"Network error: {e}") from e

        if response.status_code >= 400:
            message = error_message
            try:
                payload = response.json()
                if isinstance(payload, dict) and payload.get("message"):
                    message = str(payload["message"])
            except ValueError:
                if response.text:
                    message = response.text
            logger.error(f"Request failed: {method} {path} {response.status_code} - {message}")
            raise LindoAPIError(response.status_code, message)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    # ==================== Catalog APIs ====================

    async def get_all_products(self) -> list[Product]:
        data = await self._request(
            "GET", "/product/getAllProduct",
            authenticated=False, error_message="Failed to fetch products",
        )
        return [Product.model_validate(p) for p in _list_from(data, "products")]

    async def get_product(self, product_id: str) -> Product:
        data = await self._request(
            "GET", f"/product/getProductById/{product_id}",
            authenticated=False, error_message="Product not found",
        )
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            data = data["product"]
        return Product.model_validate(data)

    async def get_products_by_category(self, category: str) -> list[Product]:
        data = await self._request(
            "GET", "/product/getProductsByCategory",
            params={"category": category},
            authenticated=False, error_message="Failed to fetch products",
        )
        return [Product.model_validate(p) for p in _list_from(data, "products")]

    async def get_all_categories(self) -> list[Category]:
        data = await self._request(
            "GET", "/category/getAllCategories",
            authenticated=False, error_message="Failed to fetch categories",
        )
        return [Category.model_validate(c) for c in _list_from(data, "categories")]

    async def get_icons(self) -> list[dict]:
        data = await self._request("GET", "/icons/getIcons", authenticated=False)
        return _list_from(data, "icons")

    async def get_banners(self) -> list[dict]:
        data = await self._request("GET", "/banner/getAllBanners", authenticated=False)
        return _list_from(data, "banners")

    async def get_ads(self) -> list[dict]:
        data = await self._request("GET", "/adds/getAds", authenticated=False)
        return _list_from(data, "ads")

    # ==================== Cart APIs ====================

    async def fetch_user_cart(self) -> list[CartItem]:
        """Get the signed-in user's cart"""
        data = await self._request(
            "GET", "/cart/getCartByUserId",
            error_message="Failed to fetch cart from server",
        )
        cart = data.get("cart") if isinstance(data, dict) else None
        return normalize_cart_items((cart or {}).get("items", []))

    async def fetch_user_cart_with_products(self) -> list[CartItem]:
        """Get the cart with product name/price/image joined server-side"""
        data = await self._request(
            "GET", "/cart/getCartWithProducts",
            error_message="Failed to fetch cart with products",
        )
        cart = data.get("cart") if isinstance(data, dict) else None
        return normalize_cart_items((cart or {}).get("items", []))

    async def add_to_cart_server(self, item: CartItem) -> dict:
        """Add an item (with its quantity) to the server cart"""
        return await self._request(
            "POST", "/cart/addToCart",
            body=item.to_storage(),
            error_message="Failed to add item to cart",
        )

    async def update_cart_item_quantity(self, product_id: str, quantity: int) -> dict:
        """Set an item's quantity"""
        return await self._request(
            "PUT", "/cart/updateCartItem",
            body={"productId": product_id, "quantity": quantity},
            error_message="Failed to update cart item",
        )

    async def increase_cart_item_quantity(self, product_id: str, delta: int = 1) -> dict:
        """Raise an item's quantity by ``delta``"""
        return await self._request(
            "PUT", "/cart/increaseQuantity",
            body={"productId": product_id, "quantity": delta},
            error_message="Failed to increase item quantity",
        )

    async def reduce_from_cart_server(self, product_id: str) -> dict:
        """Lower an item's quantity by one"""
        return await self._request(
            "PUT", "/cart/reduceFromCart",
            body={"productId": product_id},
            error_message="Failed to reduce item quantity",
        )

    async def remove_from_cart_server(self, product_id: str) -> dict:
        return await self._request(
            "DELETE", "/cart/removeFromCart",
            body={"productId": product_id},
            error_message="Failed to remove item from cart",
        )

    async def clear_cart_server(self) -> dict:
        return await self._request(
            "DELETE", "/cart/clearCart",
            error_message="Failed to clear cart",
        )

    # ==================== Wishlist APIs ====================

    async def fetch_user_wishlist(self) -> list[Product]:
        """Get the products in the signed-in user's wishlist"""
        user_id = self.auth.user_id if self.auth else None
        if not self._token() or not user_id:
            raise NotAuthenticatedError()

        data = await self._request(
            "GET", f"/wishlist/getUserWishlistProducts/{user_id}",
            error_message="Failed to fetch wishlist from server",
        )
        products = data.get("products") if isinstance(data, dict) else None
        if not isinstance(products, list):
            raise LindoAPIError(200, "Unexpected response from server.")
        return [Product.model_validate(p) for p in products]

    async def toggle_wishlist_product(self, product_id: str) -> dict:
        return await self._request(
            "POST", "/wishlist/toggleWishlistProduct",
            body={"productId": product_id},
            error_message="Failed to toggle wishlist product",
        )

    async def add_to_wishlist_server(self, product_id: str) -> dict:
        return await self._request(
            "POST", "/wishlist/addToWishlist",
            body={"productId": product_id},
            error_message="Failed to add product to wishlist",
        )

    async def remove_from_wishlist_server(self, product_id: str) -> dict:
        return await self._request(
            "DELETE", "/wishlist/removeFromWishlist",
            body={"productId": product_id},
            error_message="Failed to remove product from wishlist",
        )

    # ==================== Order & Payment APIs ====================

    async def create_order(self, order: dict, bearer: Optional[str] = None) -> dict:
        """
        Create an order.

        The bearer header is sent only when a token is available; guest
        checkout is allowed by the backend.
        """
        bearer = bearer or self._token()
        return await self._request(
            "POST", "/orders/createOrder",
            body=order,
            authenticated=bearer is not None,
            bearer=bearer,
            error_message="Failed to create order",
        )

    async def initialize_dpo_payment(self, payload: dict) -> dict:
        return await self._request(
            "POST", "/dpo/initialize/dpoPayment",
            body=payload,
            authenticated=False,
            error_message="Payment initialization failed",
        )

    async def verify_dpo_payment(self, token: str) -> dict:
        return await self._request(
            "POST", "/dpo/verify/dpoPayment",
            body={"token": token},
            authenticated=False,
            error_message="Verification failed",
        )

    # ==================== User APIs ====================

    async def login(self, email: str, password: str) -> dict:
        return await self._request(
            "POST", "/user/Login",
            body={"email": email, "password": password},
            authenticated=False,
            error_message="Login failed",
        )

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: str = "not_specified",
        role: str = "customer",
        image: Optional[tuple[str, bytes, str]] = None,
    ) -> dict:
        """Register a customer (multipart form, optional avatar upload)"""
        form = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "gender": gender,
            "password": password,
            "role": role,
        }
        return await self._request(
            "POST", "/user/Register",
            data=form,
            files={"image": image} if image else None,
            authenticated=False,
            error_message="Registration failed",
        )

    async def update_user(self, user_id: str, fields: dict) -> dict:
        return await self._request(
            "PUT", f"/user/updateUserById/{user_id}",
            data={k: str(v) for k, v in fields.items() if v is not None},
            error_message="Failed to update profile",
        )

    async def reset_password(self, token: str, email: str, new_password: str) -> dict:
        """Set a new password with the token from a reset link"""
        return await self._request(
            "POST", "/auth/resetPassword",
            body={"token": token, "email": email, "newPassword": new_password},
            authenticated=False,
            error_message="Failed to reset password. Please try again.",
        )


def _list_from(data: Any, key: str) -> list:
    """Backend list endpoints return either a bare list or ``{key: [...]}``"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []
