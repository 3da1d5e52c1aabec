from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional
from core.auth import require_uid, require_admin_user
from core.config import logger
from core.stores import get_store, get_ledger
from routers.cms import add_collection_routes
from utils.coins import SpendResult
from utils.editor import toast
from utils.validation import validate_coin_package

router = APIRouter(prefix="/api/coins", tags=["coins"])


class SpendRequest(BaseModel):
    amount: int
    description: str = ""
    reference: Optional[str] = None


class UnlockRequest(BaseModel):
    content_type: str
    content_id: str


class PurchaseRequest(BaseModel):
    package_id: str
    payment_method: str = "stripe"


class GrantRequest(BaseModel):
    user_id: str
    amount: int
    type: str = "earn"
    description: str = "Admin adjustment"


def _spend_response(result: SpendResult, ok_title: str, ok_message: str):
    body = result.to_dict()
    if not result.success:
        body["toast"] = toast("Error", result.error or "Transaction failed", "destructive")
        return JSONResponse(body, status_code=400)
    body["toast"] = toast(ok_title, ok_message)
    return body


def _chapter_price(chapter_id: str) -> Optional[int]:
    chapter = get_store("book_chapters").get(chapter_id)
    if chapter is None:
        return None
    if chapter.get("is_preview"):
        return 0
    return int(chapter.get("coin_price") or 0)


def _book_price(book_id: str) -> Optional[int]:
    book = get_store("books").get(book_id)
    if book is None or not book.get("can_unlock_with_coins"):
        return None
    return int(book.get("coins") or 0)


# content type -> stored price lookup; None means nothing to unlock
_UNLOCK_PRICES = {
    "chapter": _chapter_price,
    "book": _book_price,
}


add_collection_routes(router, "coin_packages", "/packages", validate_coin_package, label="Coin package")


@router.get("/balance")
async def coin_balance(uid: str = Depends(require_uid)):
    return get_ledger().stats(uid)


@router.get("/history")
async def coin_history(limit: int = 20, uid: str = Depends(require_uid)):
    items = get_ledger().history(uid, limit=max(1, min(limit, 200)))
    return {"items": items, "count": len(items), "empty_message": None if items else "No transactions yet"}


@router.post("/spend")
async def spend_coins(req: SpendRequest, uid: str = Depends(require_uid)):
    result = get_ledger().spend_coins(uid, req.amount, req.description, req.reference)
    return _spend_response(result, "Coins spent", f"{req.amount} coins spent")


@router.get("/can-afford/{cost}")
async def can_afford(cost: int, uid: str = Depends(require_uid)):
    return {"can_afford": get_ledger().can_afford(uid, cost)}


@router.post("/unlock")
async def unlock_content(req: UnlockRequest, uid: str = Depends(require_uid)):
    """Unlock a chapter or book at its stored coin price."""
    price_of = _UNLOCK_PRICES.get(req.content_type)
    if price_of is None:
        return JSONResponse({"success": False, "error": f"{req.content_type} cannot be unlocked with coins"}, status_code=400)
    cost = price_of(req.content_id)
    if cost is None:
        return JSONResponse({"success": False, "error": "Content not found"}, status_code=404)
    result = get_ledger().unlock_content(uid, req.content_type, req.content_id, cost)
    return _spend_response(result, "Content unlocked", f"Unlocked for {cost} coins")


@router.get("/unlock/{content_type}/{content_id}")
async def unlock_status(content_type: str, content_id: str, uid: str = Depends(require_uid)):
    return {"unlocked": get_ledger().is_unlocked(uid, content_type, content_id)}


@router.post("/purchase")
async def purchase_package(req: PurchaseRequest, uid: str = Depends(require_uid)):
    package = get_store("coin_packages").get(req.package_id)
    if package is None or not package.get("is_active", True):
        return JSONResponse({"success": False, "error": "Coin package not found"}, status_code=404)
    result = get_ledger().purchase_package(uid, package, req.payment_method, get_store("coin_purchases"))
    if not result.get("success"):
        return JSONResponse({**result, "toast": toast("Purchase failed", result.get("error") or "", "destructive")}, status_code=400)
    logger.info(f"[coins] {uid} purchased {req.package_id} via {req.payment_method} ({result['status']})")
    if result["status"] == "pending":
        msg = "Your purchase is pending until the bank transfer is received"
    else:
        msg = f"{int(package.get('coins') or 0) + int(package.get('bonus') or 0)} coins added to your balance"
    return {**result, "toast": toast("Purchase successful", msg)}


# Admin

@router.get("/admin/transactions")
async def all_transactions(limit: int = 50, _: str = Depends(require_admin_user)):
    items = get_ledger().all_transactions(limit=max(1, min(limit, 500)))
    return {"items": items, "count": len(items), "empty_message": None if items else "No transactions yet"}


@router.get("/admin/users")
async def users_with_coins(_: str = Depends(require_admin_user)):
    items = get_ledger().users_with_coins()
    return {"items": items, "count": len(items), "empty_message": None if items else "No users with coins yet"}


@router.post("/admin/grant")
async def grant_coins(req: GrantRequest, admin_uid: str = Depends(require_admin_user)):
    logger.info(f"[coins] {admin_uid} granting {req.amount} coins to {req.user_id}")
    result = get_ledger().add_coins(req.user_id, req.amount, req.type, req.description)
    return _spend_response(result, "Coins added", f"{req.amount} coins added")


@router.get("/admin/purchases")
async def coin_purchases(_: str = Depends(require_admin_user)):
    items = get_store("coin_purchases").load()
    return {"items": items, "count": len(items), "empty_message": None if items else "No purchases yet"}
