from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from typing import Optional
from core import stores
from core.auth import require_admin_user
from core.stores import get_store
from routers.cms import add_collection_routes, listing
from utils import featured_templates
from utils.editor import toast
from utils.fallback_store import NotFoundError
from utils.validation import validate_featured_config, validate_badge, validate_template

router = APIRouter(prefix="/api/featured-series", tags=["featured-series"])

FEATURED_COLLECTIONS = ["featured_series_configs", "featured_series_badges", "featured_series_templates", "featured_series_template_history"]


def _stores():
    return (
        get_store("featured_series_templates"),
        get_store("featured_series_configs"),
        get_store("featured_series_badges"),
        get_store("featured_series_template_history"),
    )


@router.get("/templates")
async def list_templates(_: str = Depends(require_admin_user)):
    items = featured_templates.list_templates(get_store("featured_series_templates"))
    return listing(items, len(items), "templates")


@router.get("/templates/history")
async def template_history(template_id: Optional[str] = None, limit: int = 50, _: str = Depends(require_admin_user)):
    items = featured_templates.template_history(get_store("featured_series_template_history"), template_id, limit)
    return listing(items, len(items), "history entries")


@router.get("/templates/{template_id}")
async def get_template(template_id: str, _: str = Depends(require_admin_user)):
    template = get_store("featured_series_templates").get(template_id)
    if template is None:
        return JSONResponse({"error": "Template not found"}, status_code=404)
    return template


@router.post("/templates")
async def save_template(payload: dict = Body(...), uid: str = Depends(require_admin_user)):
    ok, err = validate_template({"name": "Untitled Template", **payload})
    if not ok:
        return JSONResponse({"ok": False, "error": err, "toast": toast("Error", err, "destructive")}, status_code=400)
    saved = featured_templates.save_template(get_store("featured_series_templates"), payload, created_by=uid)
    return {"ok": True, "item": saved, "toast": toast("Success", f"Template '{saved['name']}' saved")}


@router.post("/templates/before")
async def save_before_template(uid: str = Depends(require_admin_user)):
    templates, configs, badges, _ = _stores()
    saved = featured_templates.save_before_template(templates, configs, badges, created_by=uid)
    return {"ok": True, "item": saved, "toast": toast("Success", "Current state saved as 'Before Template'")}


@router.post("/templates/{template_id}/apply")
async def apply_template(template_id: str, uid: str = Depends(require_admin_user)):
    templates, configs, badges, history = _stores()
    try:
        applied = featured_templates.apply_template(templates, configs, badges, history, template_id, applied_by=uid)
    except NotFoundError:
        return JSONResponse({"ok": False, "error": "Template not found", "toast": toast("Error", "Template not found", "destructive")}, status_code=404)
    return {"ok": True, **applied, "toast": toast("Template applied", f"{len(applied['configs'])} configurations and {len(applied['badges'])} badges restored")}


@router.delete("/templates/{template_id}")
async def delete_template(template_id: str, _: str = Depends(require_admin_user)):
    try:
        get_store("featured_series_templates").delete(template_id)
    except NotFoundError:
        return JSONResponse({"ok": False, "error": "Template not found", "toast": toast("Error", "Template not found", "destructive")}, status_code=404)
    return {"ok": True, "toast": toast("Success", "Template deleted")}


@router.get("/storage-mode")
async def storage_mode(_: str = Depends(require_admin_user)):
    return {"local_only": {c: stores.is_local_only(c) for c in FEATURED_COLLECTIONS}}


@router.put("/storage-mode")
async def set_storage_mode(payload: dict = Body(...), _: str = Depends(require_admin_user)):
    """Switch the featured-series collections to (or back from) local-only mode."""
    enabled = bool(payload.get("local_only"))
    stores.set_local_only(FEATURED_COLLECTIONS, enabled)
    return {"ok": True, "local_only": enabled, "toast": toast("Storage mode updated", "Using local storage only" if enabled else "Using the database with local fallback")}


@router.post("/cache/clear")
async def clear_local_cache(_: str = Depends(require_admin_user)):
    for name in FEATURED_COLLECTIONS:
        get_store(name).clear_local()
    return {"ok": True, "toast": toast("Cache cleared", "Local featured-series data removed")}


add_collection_routes(router, "featured_series_configs", "/configs", validate_featured_config, label="Configuration")
add_collection_routes(router, "featured_series_badges", "/badges", validate_badge, label="Badge")
