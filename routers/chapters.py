from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from core.auth import optional_uid
from core.stores import get_store, get_ledger
from routers.cms import add_collection_routes, listing
from utils.validation import validate_chapter, validate_chapter_page

router = APIRouter(prefix="/api/chapters", tags=["chapters"])
pages_router = APIRouter(prefix="/api/chapter-pages", tags=["chapters"])


def _by(field: str):
    return lambda r: (r.get(field) is None, r.get(field) or 0)


@router.get("/book/{book_id}")
async def chapters_for_book(book_id: str):
    chapters = sorted(get_store("book_chapters").load(active_only=True, where={"book_id": book_id}), key=_by("chapter_number"))
    return listing(chapters, len(chapters), "chapters")


@router.get("/{chapter_id}/pages")
async def chapter_pages(chapter_id: str, uid: Optional[str] = Depends(optional_uid)):
    """Reader pages. Paid chapters need a coin unlock unless marked as preview."""
    chapter = get_store("book_chapters").get(chapter_id)
    if chapter is None:
        return JSONResponse({"error": "Chapter not found"}, status_code=404)
    price = int(chapter.get("coin_price") or 0)
    if price > 0 and not chapter.get("is_preview"):
        if not uid or not get_ledger().is_unlocked(uid, "chapter", chapter_id):
            return JSONResponse({"error": "Chapter is locked", "locked": True, "coin_price": price}, status_code=402)
    pages = sorted(get_store("chapter_pages").load(active_only=True, where={"chapter_id": chapter_id}), key=_by("page_number"))
    return {**listing(pages, len(pages), "pages"), "chapter": chapter}


add_collection_routes(router, "book_chapters", "", validate_chapter, label="Chapter")
add_collection_routes(pages_router, "chapter_pages", "", validate_chapter_page, label="Page", public=False)
