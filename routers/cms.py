"""
Shared CMS endpoints: one list/get/create/update/delete set per collection,
each mutation driven through a CollectionEditor.
"""
from typing import Callable, Optional
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from core.auth import require_admin_user
from core.config import logger
from core.stores import get_store
from utils.catalog_filter import empty_message
from utils.editor import CollectionEditor, toast
from utils.fallback_store import NotFoundError
from utils.validation import ValidationFailure


def editor_for(collection: str, validator=None, label: str = "Item", before_save=None) -> CollectionEditor:
    return CollectionEditor(get_store(collection), validator, label, before_save=before_save)


def rejected(ex: Exception, label: str) -> JSONResponse:
    """Map editor/store errors to the toast payload the admin UI shows."""
    if isinstance(ex, ValidationFailure):
        return JSONResponse({"ok": False, "error": ex.message, "field": ex.field, "toast": toast("Error", ex.message, "destructive")}, status_code=400)
    if isinstance(ex, NotFoundError):
        msg = f"{label} not found"
        return JSONResponse({"ok": False, "error": msg, "toast": toast("Error", msg, "destructive")}, status_code=404)
    raise ex


def listing(items: list, total: int, label: str) -> dict:
    return {"items": items, "count": len(items), "empty_message": empty_message(total, len(items), label)}


def create_record(editor: CollectionEditor, payload: dict):
    try:
        editor.open_create()
        saved = editor.submit(payload)
    except (ValidationFailure, NotFoundError) as ex:
        return rejected(ex, editor.label)
    return {"ok": True, "item": saved, "toast": editor.last_toast}


def update_record(editor: CollectionEditor, record_id: str, payload: dict):
    try:
        editor.open_edit(record_id)
        saved = editor.submit(payload)
    except (ValidationFailure, NotFoundError) as ex:
        return rejected(ex, editor.label)
    return {"ok": True, "item": saved, "toast": editor.last_toast}


def delete_record(editor: CollectionEditor, record_id: str):
    try:
        editor.delete(record_id)
    except NotFoundError as ex:
        return rejected(ex, editor.label)
    return {"ok": True, "toast": editor.last_toast}


def add_collection_routes(
    router: APIRouter,
    collection: str,
    path: str,
    validator: Optional[Callable] = None,
    label: str = "Item",
    plural: Optional[str] = None,
    before_save: Optional[Callable] = None,
    public: bool = True,
    with_list: bool = True,
):
    """Mount GET {path}, GET {path}/all, GET {path}/{id}, POST {path},
    PUT {path}/{id} and DELETE {path}/{id} for one collection.

    The list endpoint returns active records only; /all (admin) returns everything.
    Pass with_list=False when the router serves its own filtered list at {path}.
    """
    plural = plural or f"{label.lower()}s"
    list_deps = [] if public else [Depends(require_admin_user)]

    if with_list:
        @router.get(path, name=f"list_{collection}", dependencies=list_deps)
        async def list_records():
            items = get_store(collection).load(active_only=True)
            return listing(items, len(items), plural)

    @router.get(f"{path}/all", name=f"list_all_{collection}")
    async def list_all_records(_: str = Depends(require_admin_user)):
        items = get_store(collection).load()
        return listing(items, len(items), plural)

    @router.get(f"{path}/{{record_id}}", name=f"get_{collection}", dependencies=list_deps)
    async def get_record(record_id: str):
        item = get_store(collection).get(record_id)
        if item is None:
            return JSONResponse({"error": f"{label} not found"}, status_code=404)
        return item

    @router.post(path, name=f"create_{collection}")
    async def create(payload: dict = Body(...), uid: str = Depends(require_admin_user)):
        logger.info(f"[cms] {uid} creating {collection}")
        return create_record(editor_for(collection, validator, label, before_save), payload)

    @router.put(f"{path}/{{record_id}}", name=f"update_{collection}")
    async def update(record_id: str, payload: dict = Body(...), _: str = Depends(require_admin_user)):
        return update_record(editor_for(collection, validator, label, before_save), record_id, payload)

    @router.delete(f"{path}/{{record_id}}", name=f"delete_{collection}")
    async def delete(record_id: str, uid: str = Depends(require_admin_user)):
        logger.info(f"[cms] {uid} deleting {collection}/{record_id}")
        return delete_record(editor_for(collection, validator, label), record_id)

    return router


def singleton_routes(router: APIRouter, collection: str, path: str, validator: Optional[Callable] = None, label: str = "Section"):
    """GET/PUT for a single-record page section (About Us hero, Our Journey header)."""

    @router.get(path, name=f"get_{collection}")
    async def get_active():
        items = get_store(collection).load(active_only=True)
        return {"item": items[0] if items else None}

    @router.put(path, name=f"save_{collection}")
    async def save(payload: dict = Body(...), _: str = Depends(require_admin_user)):
        existing = get_store(collection).load(active_only=True)
        editor = editor_for(collection, validator, label)
        if existing:
            return update_record(editor, existing[0]["id"], payload)
        return create_record(editor, {"is_active": True, "display_order": 1, **payload})

    return router

