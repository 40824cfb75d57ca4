"""Wishlist routes for the mock backend"""

from fastapi import APIRouter, Depends, HTTPException

from ..database.products import product_db
from ..database.wishlists import wishlist_db
from ..models.cart import WishlistRequest
from ..security.auth import TokenUser, require_user

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def _require_product(product_id: str) -> None:
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")


@router.get("/getUserWishlistProducts/{user_id}")
async def get_wishlist_products(user_id: str, user: TokenUser = Depends(require_user)):
    if user_id != user.user_id:
        raise HTTPException(status_code=403, detail="Not allowed to read this wishlist")

    products = [product_db.get_product(pid) for pid in wishlist_db.get_wishlist(user_id)]
    return {"products": [p.to_api() for p in products if p]}


@router.post("/toggleWishlistProduct")
async def toggle_wishlist_product(request: WishlistRequest, user: TokenUser = Depends(require_user)):
    _require_product(request.product_id)
    added = wishlist_db.toggle(user.user_id, request.product_id)
    return {
        "message": "Product added to wishlist" if added else "Product removed from wishlist",
        "added": added,
        "wishlist": wishlist_db.get_wishlist(user.user_id),
    }


@router.post("/addToWishlist")
async def add_to_wishlist(request: WishlistRequest, user: TokenUser = Depends(require_user)):
    _require_product(request.product_id)
    added = wishlist_db.add(user.user_id, request.product_id)
    message = "Product added to wishlist" if added else "Product already in wishlist"
    return {"message": message, "wishlist": wishlist_db.get_wishlist(user.user_id)}


@router.delete("/removeFromWishlist")
async def remove_from_wishlist(request: WishlistRequest, user: TokenUser = Depends(require_user)):
    if not wishlist_db.remove(user.user_id, request.product_id):
        raise HTTPException(status_code=404, detail="Product not in wishlist")
    return {"message": "Product removed from wishlist", "wishlist": wishlist_db.get_wishlist(user.user_id)}
