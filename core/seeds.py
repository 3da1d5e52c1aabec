"""
Default datasets written to a collection's local fallback the first time it is read
"""

FEATURED_SERIES_CONFIGS = [
    {
        "id": "config-1",
        "title": "Featured Series",
        "description": "Discover our most popular and trending series",
        "background_image_url": "",
        "primary_button_text": "View All Series",
        "primary_button_link": "/our-series",
        "secondary_button_text": "Start Reading",
        "secondary_button_link": "/digital-reader",
        "is_active": True,
        "display_order": 1,
    },
]

FEATURED_SERIES_BADGES = [
    {"id": "badge-1", "name": "New Chapter", "color": "bg-red-600", "text_color": "text-white", "is_active": True, "display_order": 1},
    {"id": "badge-2", "name": "Trending", "color": "bg-blue-600", "text_color": "text-white", "is_active": True, "display_order": 2},
    {"id": "badge-3", "name": "Updated", "color": "bg-green-600", "text_color": "text-white", "is_active": True, "display_order": 3},
    {"id": "badge-4", "name": "Popular", "color": "bg-purple-600", "text_color": "text-white", "is_active": True, "display_order": 4},
]

SHOP_ALL_HEROES = [
    {
        "id": "hero-1",
        "title": "Explore Series",
        "description": "Discover new series through manga and anime stories. Read stories, discover new characters, and learn lore through the life cycle.",
        "background_image_url": "/static/shop/shop-hero-bg.jpg",
        "primary_button_text": "Popular Series",
        "primary_button_link": "/our-series",
        "secondary_button_text": "Browse All",
        "secondary_button_link": "/shop-all",
        "is_active": True,
        "display_order": 1,
    },
]

SHOP_ALL_FILTERS = [
    {"id": "filter-1", "name": "Types", "type": "type", "options": ["Manga", "Webtoon", "Light Novel", "Anthology"], "is_active": True, "display_order": 1},
    {"id": "filter-2", "name": "Price", "type": "price", "options": ["Free", "Under $5", "$5-$10", "$10-$20", "$20+"], "is_active": True, "display_order": 2},
    {"id": "filter-3", "name": "Status", "type": "status", "options": ["Ongoing", "Completed", "Upcoming", "On Hold"], "is_active": True, "display_order": 3},
]

SHOP_ALL_SORTS = [
    {"id": "sort-1", "name": "Newest First", "value": "newest-first", "is_active": True, "display_order": 1},
    {"id": "sort-2", "name": "Oldest First", "value": "oldest-first", "is_active": True, "display_order": 2},
    {"id": "sort-3", "name": "A-Z", "value": "a-z", "is_active": True, "display_order": 3},
    {"id": "sort-4", "name": "Z-A", "value": "z-a", "is_active": True, "display_order": 4},
    {"id": "sort-5", "name": "Price: Low to High", "value": "price-low-high", "is_active": True, "display_order": 5},
    {"id": "sort-6", "name": "Price: High to Low", "value": "price-high-low", "is_active": True, "display_order": 6},
]

COIN_PACKAGES = [
    {"id": "starter", "name": "Starter Pack", "coins": 100, "bonus": 0, "price": 0.99, "popular": False, "best_value": False, "is_active": True, "display_order": 1},
    {"id": "popular", "name": "Popular Pack", "coins": 500, "bonus": 50, "price": 4.99, "popular": True, "best_value": False, "is_active": True, "display_order": 2},
    {"id": "best-value", "name": "Best Value", "coins": 1200, "bonus": 200, "price": 9.99, "popular": False, "best_value": True, "is_active": True, "display_order": 3},
    {"id": "premium", "name": "Premium Pack", "coins": 2500, "bonus": 500, "price": 19.99, "popular": False, "best_value": False, "is_active": True, "display_order": 4},
    {"id": "ultimate", "name": "Ultimate Pack", "coins": 6000, "bonus": 1500, "price": 49.99, "popular": False, "best_value": False, "is_active": True, "display_order": 5},
]

CREATORS = [
    {
        "id": "creator-1",
        "name": "Alex Chen",
        "bio": "Award-winning comic book writer and artist known for fantasy and adventure stories.",
        "avatar_url": "",
        "website_url": "",
        "social_links": {"twitter": "@alexchen"},
        "specialties": ["writer", "artist"],
        "is_active": True,
        "display_order": 1,
    },
    {
        "id": "creator-2",
        "name": "Sarah Johnson",
        "bio": "Colorist and digital artist specializing in sci-fi and cyberpunk themes.",
        "avatar_url": "",
        "website_url": "",
        "social_links": {"instagram": "@sarahjohnson_art"},
        "specialties": ["colorist", "artist"],
        "is_active": True,
        "display_order": 2,
    },
]

ABOUT_US_HERO = [
    {
        "id": "about-hero-1",
        "title": "About Us",
        "subtitle": "Stories, art and the people who make them.",
        "background_image_url": "",
        "is_active": True,
        "display_order": 1,
    },
]

OUR_JOURNEY_SECTION = [
    {
        "id": "journey-1",
        "title": "Our Journey",
        "subtitle": "From a single sketchbook to a growing library of series.",
        "is_active": True,
        "display_order": 1,
    },
]

FEATURED_SERIES_TEMPLATES = [
    {
        "id": "default-before",
        "name": "Before Template",
        "description": "Template capturing the current state before any changes. Use this to restore the original configuration.",
        "template_type": "combined",
        "config_data": {"configs": FEATURED_SERIES_CONFIGS},
        "badge_data": {"badges": FEATURED_SERIES_BADGES},
        "is_default": True,
        "is_active": True,
        "created_by": "system",
        "display_order": 0,
    },
]
