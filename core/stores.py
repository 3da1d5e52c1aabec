"""
Store registry: one FallbackStore per named collection.

The local store and the session factory are injected here once, so tests and
tools can swap them (configure()) without touching module globals elsewhere.
"""
from typing import Optional

from core import seeds
from core.config import LOCAL_STORE_DIR, STORE_LOCAL_ONLY, WELCOME_BONUS_COINS, logger
from core.database import SessionLocal
from models.catalog import Book
from models.series import ComicSeries, Creator, SeriesCreator, BookChapter, ChapterPage
from models.coins import CoinPackage, CoinPurchase
from models.orders import Order
from models.featured import FeaturedSeriesConfig, FeaturedSeriesBadge, FeaturedSeriesTemplate, FeaturedSeriesTemplateHistory
from models.shop_all import ShopAllHero, ShopAllFilter, ShopAllSort
from models.pages import HeroBanner, Announcement, PageSection, AboutUsHero, AboutUsSection, OurJourneySection, OurJourneyTimelineItem
from models.user import Profile, UserRole
from utils.fallback_store import FallbackStore
from utils.storage import LocalJsonStore
from utils.coins import CoinLedger

# name -> (model, seed, id prefix)
COLLECTIONS = {
    "books": (Book, None, "book"),
    "comic_series": (ComicSeries, None, "series"),
    "creators": (Creator, seeds.CREATORS, "creator"),
    "series_creators": (SeriesCreator, None, "series-creator"),
    "book_chapters": (BookChapter, None, "chapter"),
    "chapter_pages": (ChapterPage, None, "page"),
    "coin_packages": (CoinPackage, seeds.COIN_PACKAGES, "package"),
    "coin_purchases": (CoinPurchase, None, "purchase"),
    "orders": (Order, None, "order"),
    "featured_series_configs": (FeaturedSeriesConfig, seeds.FEATURED_SERIES_CONFIGS, "config"),
    "featured_series_badges": (FeaturedSeriesBadge, seeds.FEATURED_SERIES_BADGES, "badge"),
    "featured_series_templates": (FeaturedSeriesTemplate, seeds.FEATURED_SERIES_TEMPLATES, "template"),
    "featured_series_template_history": (FeaturedSeriesTemplateHistory, None, "history"),
    "shop_all_heroes": (ShopAllHero, seeds.SHOP_ALL_HEROES, "hero"),
    "shop_all_filters": (ShopAllFilter, seeds.SHOP_ALL_FILTERS, "filter"),
    "shop_all_sorts": (ShopAllSort, seeds.SHOP_ALL_SORTS, "sort"),
    "hero_banners": (HeroBanner, None, "banner"),
    "announcements": (Announcement, None, "announcement"),
    "page_sections": (PageSection, None, "section"),
    "about_us_hero": (AboutUsHero, seeds.ABOUT_US_HERO, "about-hero"),
    "about_us_sections": (AboutUsSection, None, "about-section"),
    "our_journey_section": (OurJourneySection, seeds.OUR_JOURNEY_SECTION, "journey"),
    "our_journey_timeline": (OurJourneyTimelineItem, None, "timeline"),
    "profiles": (Profile, None, "profile"),
    "user_roles": (UserRole, None, "role"),
}

_LOCAL_ONLY_KEY = "store_local_only"

_local = None
_session_factory = SessionLocal
_local_only = STORE_LOCAL_ONLY
_stores: dict[str, FallbackStore] = {}
_ledger: Optional[CoinLedger] = None


def configure(local=None, session_factory=SessionLocal, local_only: Optional[bool] = None):
    """Swap the backing stores. Drops every cached FallbackStore."""
    global _local, _session_factory, _local_only, _ledger
    _local = local
    _session_factory = session_factory
    if local_only is not None:
        _local_only = local_only
    _stores.clear()
    _ledger = None


def get_local_store():
    global _local
    if _local is None:
        _local = LocalJsonStore(LOCAL_STORE_DIR)
    return _local


def _local_only_collections() -> set:
    flags = get_local_store().read(_LOCAL_ONLY_KEY)
    return set(flags) if isinstance(flags, list) else set()


def set_local_only(collections, enabled: bool) -> list:
    """Toggle local-only mode for the given collections (persisted)."""
    names = [c for c in collections if c in COLLECTIONS]

    def _apply(current):
        current = set(current or [])
        if enabled:
            current.update(names)
        else:
            current.difference_update(names)
        return sorted(current)

    flags = get_local_store().mutate(_LOCAL_ONLY_KEY, _apply, default=[])
    for name in names:
        _stores.pop(name, None)
    logger.info(f"[store] local-only mode {'enabled' if enabled else 'disabled'} for {', '.join(names)}")
    return flags


def is_local_only(collection: str) -> bool:
    return _local_only or collection in _local_only_collections()


def get_store(collection: str) -> FallbackStore:
    store = _stores.get(collection)
    if store is not None:
        return store
    if collection not in COLLECTIONS:
        raise KeyError(f"Unknown collection: {collection}")
    model, seed, prefix = COLLECTIONS[collection]
    store = FallbackStore(
        collection,
        local=get_local_store(),
        model=model,
        session_factory=_session_factory,
        seed=seed,
        id_prefix=prefix,
        local_only=is_local_only(collection),
    )
    _stores[collection] = store
    return store


def get_ledger() -> CoinLedger:
    global _ledger
    if _ledger is None:
        _ledger = CoinLedger(
            local=get_local_store(),
            session_factory=_session_factory,
            welcome_bonus=WELCOME_BONUS_COINS,
            local_only=_local_only,
        )
    return _ledger
