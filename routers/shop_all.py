from fastapi import APIRouter
from core.stores import get_store
from routers.cms import add_collection_routes
from utils.validation import validate_shop_all_hero, validate_shop_all_filter, validate_shop_all_sort

router = APIRouter(prefix="/api/shop-all", tags=["shop-all"])


@router.get("")
async def shop_all_page():
    """Everything the Shop All page needs in one call."""
    heroes = get_store("shop_all_heroes").load(active_only=True)
    return {
        "hero": heroes[0] if heroes else None,
        "filters": get_store("shop_all_filters").load(active_only=True),
        "sorts": get_store("shop_all_sorts").load(active_only=True),
    }


add_collection_routes(router, "shop_all_heroes", "/heroes", validate_shop_all_hero, label="Hero section")
add_collection_routes(router, "shop_all_filters", "/filters", validate_shop_all_filter, label="Filter")
add_collection_routes(router, "shop_all_sorts", "/sorts", validate_shop_all_sort, label="Sort option")
