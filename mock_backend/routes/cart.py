"""Cart routes for the mock backend (always the caller's own cart)"""

from fastapi import APIRouter, Depends, HTTPException

from ..database.carts import cart_db
from ..database.products import product_db
from ..models.cart import AddToCartRequest, CartItemRequest, CartLine
from ..security.auth import TokenUser, require_user

router = APIRouter(prefix="/cart", tags=["Cart"])


def _cart_body(user_id: str, lines: list[CartLine], with_products: bool = False) -> dict:
    items = []
    for line in lines:
        product = product_db.get_product(line.product_id)
        if with_products and product:
            items.append({"productId": product.to_api(), "quantity": line.quantity})
        else:
            items.append({"productId": line.product_id, "quantity": line.quantity})
    return {"cart": {"userId": user_id, "items": items}}


def _require_product(product_id: str) -> None:
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")


@router.get("/getCartByUserId")
async def get_cart(user: TokenUser = Depends(require_user)):
    return _cart_body(user.user_id, cart_db.get_cart(user.user_id))


@router.get("/getCartWithProducts")
async def get_cart_with_products(user: TokenUser = Depends(require_user)):
    """Cart lines with the product document embedded in ``productId``"""
    return _cart_body(user.user_id, cart_db.get_cart(user.user_id), with_products=True)


@router.post("/addToCart")
async def add_to_cart(request: AddToCartRequest, user: TokenUser = Depends(require_user)):
    _require_product(request.product_id)
    lines = cart_db.add_item(user.user_id, request.product_id, request.quantity)
    return {"message": "Product added to cart", **_cart_body(user.user_id, lines)}


@router.put("/updateCartItem")
async def update_cart_item(request: CartItemRequest, user: TokenUser = Depends(require_user)):
    if request.quantity is None or request.quantity < 1:
        raise HTTPException(status_code=400, detail="Quantity must be at least 1")
    lines = cart_db.update_item_quantity(user.user_id, request.product_id, request.quantity)
    if lines is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return {"message": "Cart updated", **_cart_body(user.user_id, lines)}


@router.put("/increaseQuantity")
async def increase_quantity(request: CartItemRequest, user: TokenUser = Depends(require_user)):
    line = cart_db.get_line(user.user_id, request.product_id)
    if not line:
        raise HTTPException(status_code=404, detail="Item not in cart")
    lines = cart_db.update_item_quantity(user.user_id, request.product_id, line.quantity + (request.quantity or 1))
    return {"message": "Quantity increased", **_cart_body(user.user_id, lines)}


@router.put("/reduceFromCart")
async def reduce_from_cart(request: CartItemRequest, user: TokenUser = Depends(require_user)):
    lines = cart_db.reduce_item(user.user_id, request.product_id)
    if lines is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return {"message": "Quantity reduced", **_cart_body(user.user_id, lines)}


@router.delete("/removeFromCart")
async def remove_from_cart(request: CartItemRequest, user: TokenUser = Depends(require_user)):
    lines = cart_db.remove_item(user.user_id, request.product_id)
    return {"message": "Item removed", **_cart_body(user.user_id, lines)}


@router.delete("/clearCart")
async def clear_cart(user: TokenUser = Depends(require_user)):
    lines = cart_db.clear_cart(user.user_id)
    return {"message": "Cart cleared", **_cart_body(user.user_id, lines)}
