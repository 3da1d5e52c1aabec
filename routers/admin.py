from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from core.auth import require_uid, require_admin_user, is_admin, get_user_email_from_uid
from core.config import logger
from core.stores import get_store
from routers.cms import listing
from routers.orders import dashboard_stats
from utils.editor import toast
from utils.validation import validate_user_role

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _roles_by_user() -> dict:
    roles = {}
    for r in get_store("user_roles").load():
        # admin wins when a user has several rows
        if roles.get(r.get("user_id")) != "admin":
            roles[r.get("user_id")] = r.get("role") or "user"
    return roles


@router.get("/me")
async def whoami(uid: str = Depends(require_uid)):
    return {"uid": uid, "is_admin": is_admin(uid)}


@router.post("/profile")
async def sync_profile(payload: dict = Body(default={}), uid: str = Depends(require_uid)):
    """Create or refresh the caller's profile row after sign-in."""
    email = get_user_email_from_uid(uid) or str(payload.get("email") or "").strip().lower()
    if not email:
        return JSONResponse({"ok": False, "error": "Email is required"}, status_code=400)
    record = {"id": uid, "email": email, "is_active": True}
    for key in ("full_name", "avatar_url"):
        if payload.get(key):
            record[key] = payload[key]
    profile = get_store("profiles").upsert(record)
    return {"ok": True, "profile": profile}


@router.get("/users")
async def list_users(search: Optional[str] = None, _: str = Depends(require_admin_user)):
    roles = _roles_by_user()
    profiles = get_store("profiles").load()
    users = [{**p, "role": roles.get(p.get("id"), "user")} for p in profiles]
    term = (search or "").strip().lower()
    if term:
        users = [u for u in users if term in str(u.get("email") or "").lower() or term in str(u.get("full_name") or "").lower()]
    users.sort(key=lambda u: str(u.get("created_at") or ""), reverse=True)
    return listing(users, len(profiles), "users")


@router.put("/users/{user_id}/role")
async def set_user_role(user_id: str, payload: dict = Body(...), admin_uid: str = Depends(require_admin_user)):
    role = str(payload.get("role") or "").strip()
    ok, err = validate_user_role({"user_id": user_id, "role": role})
    if not ok:
        return JSONResponse({"ok": False, "error": err, "toast": toast("Error", err, "destructive")}, status_code=400)
    if get_store("profiles").get(user_id) is None:
        return JSONResponse({"ok": False, "error": "User not found", "toast": toast("Error", "User not found", "destructive")}, status_code=404)

    store = get_store("user_roles")
    rows = store.load(where={"user_id": user_id})
    if rows:
        saved = store.update(rows[0]["id"], {"role": role})
        for extra in rows[1:]:
            store.delete(extra["id"])
    else:
        saved = store.create({"user_id": user_id, "role": role})
    logger.info(f"[admin] {admin_uid} set role of {user_id} to {role}")
    return {"ok": True, "item": saved, "toast": toast("Success", f"User role updated to {role}")}


@router.get("/stats")
async def admin_stats(_: str = Depends(require_admin_user)):
    return dashboard_stats()
