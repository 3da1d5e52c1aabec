from fastapi import APIRouter, Query, Body, Depends
from fastapi.responses import JSONResponse
from typing import Optional, List
from core.auth import require_admin_user
from core.stores import get_store
from routers.cms import add_collection_routes, listing, editor_for, create_record, delete_record
from utils import catalog_filter
from utils.validation import validate_series, validate_series_creator, slugify, ValidationFailure

router = APIRouter(prefix="/api/series", tags=["series"])


def _slug_taken(slug: str, exclude_id: Optional[str]) -> bool:
    for s in get_store("comic_series").load():
        if s.get("slug") == slug and str(s.get("id")) != str(exclude_id or ""):
            return True
    return False


def assign_slug(values: dict, editing_id: Optional[str]) -> dict:
    """Fill a missing slug from the title; explicit slugs must be unique."""
    slug = (values.get("slug") or "").strip()
    if slug:
        if _slug_taken(slug, editing_id):
            raise ValidationFailure(f"Slug '{slug}' is already used by another series", "slug")
        return values
    base = slugify(values.get("title") or "")
    slug, n = base, 2
    while _slug_taken(slug, editing_id):
        slug = f"{base}-{n}"
        n += 1
    return {**values, "slug": slug}


def creators_for(series_id: str) -> list:
    """Creators of a series joined with their role assignment, primary creators first."""
    creators = {str(c["id"]): c for c in get_store("creators").load()}
    out = []
    for a in get_store("series_creators").load(where={"series_id": series_id}):
        creator = creators.get(str(a.get("creator_id")))
        if creator is None:
            continue
        out.append({**creator, "assignment_id": a["id"], "role": a.get("role"), "is_primary": bool(a.get("is_primary"))})
    out.sort(key=lambda c: not c["is_primary"])
    return out


@router.get("")
async def list_series(
    search: str = "",
    genres: Optional[List[str]] = Query(None),
    sort: Optional[str] = None,
    featured: bool = False,
):
    series = get_store("comic_series").load(active_only=True)
    if featured:
        series = [s for s in series if s.get("is_featured")]
    selected = [g.strip() for v in (genres or []) for g in v.split(",") if g.strip()]
    items = catalog_filter.apply(series, search, selected, sort, facets=catalog_filter.SERIES_FACETS)
    return listing(items, len(series), "series")


@router.get("/slug/{slug}")
async def series_by_slug(slug: str):
    matches = get_store("comic_series").load(where={"slug": slug})
    if not matches:
        return JSONResponse({"error": "Series not found"}, status_code=404)
    series = matches[0]
    return {**series, "creators": creators_for(series["id"])}


@router.get("/{series_id}/creators")
async def series_creators(series_id: str):
    items = creators_for(series_id)
    return listing(items, len(items), "creators")


@router.post("/{series_id}/creators")
async def assign_creator(series_id: str, payload: dict = Body(...), _: str = Depends(require_admin_user)):
    if get_store("comic_series").get(series_id) is None:
        return JSONResponse({"error": "Series not found"}, status_code=404)
    if get_store("creators").get(str(payload.get("creator_id") or "")) is None:
        return JSONResponse({"error": "Creator not found"}, status_code=404)
    editor = editor_for("series_creators", validate_series_creator, "Creator assignment")
    return create_record(editor, {"is_primary": False, **payload, "series_id": series_id})


@router.delete("/{series_id}/creators/{assignment_id}")
async def unassign_creator(series_id: str, assignment_id: str, _: str = Depends(require_admin_user)):
    return delete_record(editor_for("series_creators", label="Creator assignment"), assignment_id)


add_collection_routes(router, "comic_series", "", validate_series, label="Series", plural="series", before_save=assign_slug, with_list=False)
