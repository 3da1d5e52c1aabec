from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from core.config import logger
from core.stores import get_store, get_local_store
from utils.cart import SessionBaskets
from utils.editor import toast

router = APIRouter(prefix="/api/sessions/{session_id}", tags=["cart"])


def _baskets() -> SessionBaskets:
    return SessionBaskets(get_local_store())


def _product(payload: dict):
    """Resolve the product being added; the snapshot comes from the catalog record."""
    product_id = str(payload.get("product_id") or payload.get("id") or "").strip()
    if not product_id:
        return None
    return get_store("books").get(product_id)


def _cart_body(cart) -> dict:
    return {
        "items": cart.to_list(),
        "total": cart.total(),
        "item_count": cart.item_count(),
        "empty_message": None if cart.entries else "Your cart is empty",
    }


@router.get("/cart")
async def get_cart(session_id: str):
    return _cart_body(_baskets().cart(session_id))


@router.post("/cart")
async def add_to_cart(session_id: str, payload: dict = Body(...)):
    product = _product(payload)
    if product is None:
        return JSONResponse({"ok": False, "error": "Product not found", "toast": toast("Error", "Product not found", "destructive")}, status_code=404)
    try:
        quantity = max(1, int(payload.get("quantity") or 1))
    except (TypeError, ValueError):
        return JSONResponse({"ok": False, "error": "quantity must be an integer"}, status_code=400)
    cart = _baskets().change_cart(session_id, lambda c: c.add(product, quantity))
    logger.info(f"[cart] {session_id}: added {product['id']} x{quantity}")
    return {"ok": True, **_cart_body(cart), "toast": toast("Added to cart", f"{product.get('title')} has been added to your cart")}


@router.put("/cart/{product_id}")
async def update_cart_quantity(session_id: str, product_id: str, payload: dict = Body(...)):
    try:
        quantity = int(payload.get("quantity"))
    except (TypeError, ValueError):
        return JSONResponse({"ok": False, "error": "quantity must be an integer"}, status_code=400)
    cart = _baskets().change_cart(session_id, lambda c: c.update_quantity(product_id, quantity))
    return {"ok": True, **_cart_body(cart)}


@router.delete("/cart/{product_id}")
async def remove_from_cart(session_id: str, product_id: str):
    cart = _baskets().change_cart(session_id, lambda c: c.remove(product_id))
    return {"ok": True, **_cart_body(cart), "toast": toast("Removed from cart", "Item has been removed from your cart")}


@router.delete("/cart")
async def clear_cart(session_id: str):
    cart = _baskets().change_cart(session_id, lambda c: c.clear())
    return {"ok": True, **_cart_body(cart), "toast": toast("Cart cleared", "All items have been removed from your cart")}


@router.get("/wishlist")
async def get_wishlist(session_id: str):
    wl = _baskets().wishlist(session_id)
    return {"items": wl.to_list(), "count": len(wl.entries), "empty_message": None if wl.entries else "Your wishlist is empty"}


@router.get("/wishlist/{product_id}")
async def wishlist_contains(session_id: str, product_id: str):
    return {"in_wishlist": _baskets().wishlist(session_id).contains(product_id)}


@router.post("/wishlist")
async def add_to_wishlist(session_id: str, payload: dict = Body(...)):
    product = _product(payload)
    if product is None:
        return JSONResponse({"ok": False, "error": "Product not found", "toast": toast("Error", "Product not found", "destructive")}, status_code=404)
    wl = _baskets().change_wishlist(session_id, lambda w: w.add(product))
    return {"ok": True, "items": wl.to_list(), "toast": toast("Added to wishlist", f"{product.get('title')} has been added to your wishlist")}


@router.post("/wishlist/{product_id}/toggle")
async def toggle_wishlist(session_id: str, product_id: str):
    product = get_store("books").get(product_id)
    if product is None:
        return JSONResponse({"ok": False, "error": "Product not found"}, status_code=404)
    state = {}

    def _toggle(w):
        state["in_wishlist"] = w.toggle(product)

    wl = _baskets().change_wishlist(session_id, _toggle)
    verb = "added to" if state["in_wishlist"] else "removed from"
    return {"ok": True, "in_wishlist": state["in_wishlist"], "items": wl.to_list(), "toast": toast("Wishlist updated", f"{product.get('title')} {verb} your wishlist")}


@router.delete("/wishlist/{product_id}")
async def remove_from_wishlist(session_id: str, product_id: str):
    wl = _baskets().change_wishlist(session_id, lambda w: w.remove(product_id))
    return {"ok": True, "items": wl.to_list(), "toast": toast("Removed from wishlist", "Item has been removed from your wishlist")}
