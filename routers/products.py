from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional, List
from core.stores import get_store
from routers.cms import add_collection_routes, listing
from utils import catalog_filter
from utils.fuzzy_search import fuzzy_search_items, get_search_suggestions
from utils.validation import validate_product

router = APIRouter(prefix="/api/products", tags=["products"])

SEARCH_FIELDS = ["title", "author", "category", "description"]


def _split(values: Optional[List[str]]) -> List[str]:
    out = []
    for v in values or []:
        out.extend(p.strip() for p in v.split(",") if p.strip())
    return out


@router.get("")
async def list_products(
    search: str = "",
    filters: Optional[List[str]] = Query(None),
    sort: Optional[str] = None,
    product_type: Optional[str] = None,
    section: Optional[str] = None,
    fuzzy: bool = False,
):
    """Storefront grid: type/section narrowing, then search, facet filter and sort."""
    products = [p for p in get_store("books").load(active_only=True) if not p.get("parent_id")]
    narrowed = catalog_filter.narrow_products(products, product_type, section)
    selected = _split(filters)
    if fuzzy and search.strip():
        ranked = fuzzy_search_items(narrowed, search, SEARCH_FIELDS)
        items = catalog_filter.apply(ranked, "", selected, sort)
    else:
        items = catalog_filter.apply(narrowed, search, selected, sort)
    return listing(items, len(narrowed), "products")


@router.get("/suggestions")
async def product_suggestions(q: str = "", limit: int = 5):
    products = get_store("books").load(active_only=True)
    return {"suggestions": get_search_suggestions(products, q, "title", max_suggestions=limit)}


@router.get("/{product_id}/volumes")
async def product_volumes(product_id: str):
    store = get_store("books")
    if store.get(product_id) is None:
        return JSONResponse({"error": "Product not found"}, status_code=404)
    volumes = catalog_filter.volumes_of(store.load(active_only=True), product_id)
    return listing(volumes, len(volumes), "volumes")


add_collection_routes(router, "books", "", validate_product, label="Product", with_list=False)
