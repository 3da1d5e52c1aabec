import uuid
from datetime import datetime, timezone
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional, Dict, Any
from core.auth import optional_uid, require_uid, require_admin_user
from core.config import logger, TAX_RATE, SHIPPING_FLAT_RATE, CURRENCY
from core.stores import get_store, get_local_store, get_ledger
from routers.cms import listing, editor_for, update_record
from utils.cart import SessionBaskets
from utils.editor import toast
from utils.validation import validate_email, validate_order_status, ORDER_STATUSES

router = APIRouter(prefix="/api/orders", tags=["orders"])

PAYMENT_METHODS = ("card", "paypal", "bank_transfer")
DIGITAL_TYPES = ("digital",)


class CheckoutRequest(BaseModel):
    session_id: str
    email: str
    name: str = ""
    payment_method: str = "card"
    shipping_address: Dict[str, Any] = {}
    billing_address: Dict[str, Any] = {}
    notes: Optional[str] = None


def new_order_number() -> str:
    return f"ORD-{datetime.now(timezone.utc).strftime('%Y%m%d')}-{uuid.uuid4().hex[:6].upper()}"


def price_order(items: list) -> dict:
    """Totals from cart snapshots: configured tax rate, flat shipping when anything ships."""
    subtotal = round(sum(float(i["price"]) * int(i["quantity"]) for i in items), 2)
    ships = any((i.get("product_type") or "book") not in DIGITAL_TYPES for i in items)
    shipping = round(SHIPPING_FLAT_RATE, 2) if ships else 0.0
    tax = round(subtotal * TAX_RATE, 2)
    return {"subtotal": subtotal, "tax": tax, "shipping": shipping, "discount": 0.0, "total": round(subtotal + tax + shipping, 2)}


@router.post("/checkout")
async def checkout(req: CheckoutRequest, uid: Optional[str] = Depends(optional_uid)):
    ok, err = validate_email(req.email)
    if not ok:
        return JSONResponse({"ok": False, "error": err, "toast": toast("Error", err, "destructive")}, status_code=400)
    if req.payment_method not in PAYMENT_METHODS:
        return JSONResponse({"ok": False, "error": f"Unsupported payment method: {req.payment_method}"}, status_code=400)

    baskets = SessionBaskets(get_local_store())
    cart = baskets.cart(req.session_id)
    if not cart.entries:
        return JSONResponse({"ok": False, "error": "Your cart is empty", "toast": toast("Error", "Your cart is empty", "destructive")}, status_code=400)

    items = cart.to_list()
    totals = price_order(items)
    # Simulated payment: card/PayPal settle immediately, bank transfer waits
    paid = req.payment_method in ("card", "paypal")
    order = get_store("orders").create({
        "order_number": new_order_number(),
        "user_id": uid,
        "user_email": req.email.strip().lower(),
        "user_name": req.name,
        "status": "processing" if paid else "pending",
        "payment_status": "paid" if paid else "pending",
        "payment_method": req.payment_method,
        "currency": CURRENCY,
        "items": items,
        "shipping_address": req.shipping_address,
        "billing_address": req.billing_address or req.shipping_address,
        "notes": req.notes,
        **totals,
    })
    baskets.change_cart(req.session_id, lambda c: c.clear())
    logger.info(f"[orders] {order['order_number']} placed ({totals['total']} {CURRENCY})")
    return {"ok": True, "order": order, "toast": toast("Order placed", f"Order {order['order_number']} has been placed")}


@router.get("/mine")
async def my_orders(uid: str = Depends(require_uid)):
    items = sorted(get_store("orders").load(where={"user_id": uid}), key=lambda o: str(o.get("created_at") or ""), reverse=True)
    return listing(items, len(items), "orders")


@router.get("/stats")
async def order_stats(_: str = Depends(require_admin_user)):
    return dashboard_stats()


@router.get("")
async def list_orders(status: Optional[str] = None, search: str = "", _: str = Depends(require_admin_user)):
    orders = sorted(get_store("orders").load(), key=lambda o: str(o.get("created_at") or ""), reverse=True)
    items = orders
    if status and status != "all":
        items = [o for o in items if o.get("status") == status]
    term = search.strip().lower()
    if term:
        items = [o for o in items if term in str(o.get("order_number") or "").lower() or term in str(o.get("user_email") or "").lower()]
    return listing(items, len(orders), "orders")


@router.get("/{order_id}")
async def get_order(order_id: str, _: str = Depends(require_admin_user)):
    order = get_store("orders").get(order_id)
    if order is None:
        return JSONResponse({"error": "Order not found"}, status_code=404)
    return order


@router.put("/{order_id}/status")
async def update_order_status(order_id: str, payload: dict = Body(...), admin_uid: str = Depends(require_admin_user)):
    patch = {k: payload[k] for k in ("status", "payment_status", "notes") if k in payload}
    if not patch:
        return JSONResponse({"ok": False, "error": "Nothing to update"}, status_code=400)
    logger.info(f"[orders] {admin_uid} updating {order_id}: {patch}")
    return update_record(editor_for("orders", validate_order_status, "Order"), order_id, patch)


def _today(value) -> bool:
    return str(value or "").startswith(datetime.now(timezone.utc).strftime("%Y-%m-%d"))


def dashboard_stats() -> dict:
    profiles = get_store("profiles").load()
    roles = get_store("user_roles").load()
    orders = get_store("orders").load()
    coin_users = get_ledger().users_with_coins()
    purchases = get_store("coin_purchases").load(where={"status": "completed"})
    transactions = get_ledger().all_transactions(limit=1000)

    revenue = round(sum(float(o.get("total") or 0) for o in orders if o.get("status") != "cancelled"), 2)
    circulation = sum(int(u.get("balance") or 0) for u in coin_users)
    return {
        "total_users": len(profiles),
        "active_users": len([p for p in profiles if p.get("is_active", True)]),
        "admin_users": len({r.get("user_id") for r in roles if r.get("role") == "admin"}),
        "new_users_today": len([p for p in profiles if _today(p.get("created_at"))]),
        "total_orders": len(orders),
        "pending_orders": len([o for o in orders if o.get("status") in ("pending", "processing")]),
        "completed_orders": len([o for o in orders if o.get("status") == "delivered"]),
        "total_revenue": revenue,
        "average_order_value": round(revenue / len(orders), 2) if orders else 0.0,
        "orders_today": len([o for o in orders if _today(o.get("created_at"))]),
        "order_statuses": {s: len([o for o in orders if o.get("status") == s]) for s in ORDER_STATUSES},
        "total_users_with_coins": len(coin_users),
        "total_coins_in_circulation": circulation,
        "total_revenue_from_coins": round(sum(float(p.get("price") or 0) for p in purchases), 2),
        "average_coins_per_user": circulation // len(coin_users) if coin_users else 0,
        "coins_transactions_today": len([t for t in transactions if _today(t.get("timestamp"))]),
    }
