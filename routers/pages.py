from fastapi import APIRouter
from core.stores import get_store
from routers.cms import add_collection_routes, singleton_routes, listing
from utils.validation import (
    validate_hero_banner,
    validate_announcement,
    validate_page_section,
    validate_about_us_hero,
    validate_about_us_section,
    validate_our_journey_section,
    validate_timeline_item,
)

router = APIRouter(prefix="/api/pages", tags=["pages"])


@router.get("/sections/page/{page_name}")
async def sections_for_page(page_name: str):
    items = get_store("page_sections").load(active_only=True, where={"page_name": page_name})
    return listing(items, len(items), "sections")


@router.get("/about-us")
async def about_us_page():
    heroes = get_store("about_us_hero").load(active_only=True)
    sections = {}
    for s in get_store("about_us_sections").load(active_only=True):
        sections.setdefault(s.get("section_key"), s)
    return {"hero": heroes[0] if heroes else None, "sections": sections}


@router.get("/our-journey")
async def our_journey_page():
    headers = get_store("our_journey_section").load(active_only=True)
    timeline = get_store("our_journey_timeline").load(active_only=True)
    return {"section": headers[0] if headers else None, "timeline": timeline, "empty_message": None if timeline else "No timeline entries yet"}


add_collection_routes(router, "hero_banners", "/hero-banners", validate_hero_banner, label="Hero banner")
add_collection_routes(router, "announcements", "/announcements", validate_announcement, label="Announcement")
add_collection_routes(router, "page_sections", "/sections", validate_page_section, label="Page section")
singleton_routes(router, "about_us_hero", "/about-us/hero", validate_about_us_hero, label="About Us hero")
add_collection_routes(router, "about_us_sections", "/about-us/sections", validate_about_us_section, label="About Us section")
singleton_routes(router, "our_journey_section", "/our-journey/section", validate_our_journey_section, label="Our Journey section")
add_collection_routes(router, "our_journey_timeline", "/our-journey/timeline", validate_timeline_item, label="Timeline item")
