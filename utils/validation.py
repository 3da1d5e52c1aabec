"""
Validation for CMS form submissions.

Every validator takes the full form values (a dict) and
returns (is_valid, error_message). Nothing here touches a store.
"""
import re
from typing import Optional, Tuple

from utils.catalog_filter import SECTION_TYPES, PRODUCT_TYPES

SERIES_STATUSES = ("ongoing", "completed", "hiatus", "cancelled")
AGE_RATINGS = ("all", "teen", "mature")
CREATOR_ROLES = ("writer", "artist", "colorist", "letterer", "editor", "publisher")
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")
ABOUT_US_SECTION_KEYS = ("about", "mission", "team")
USER_ROLES = ("admin", "user")

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationFailure(Exception):
    """A form was rejected; carries the message shown to the admin."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def _blank(values: dict, key: str) -> bool:
    v = values.get(key)
    return v is None or (isinstance(v, str) and not v.strip())


def _number(values: dict, key: str) -> Optional[float]:
    v = values.get(key)
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return float("nan")


def _require(values: dict, *keys: str) -> Tuple[bool, str]:
    for key in keys:
        if _blank(values, key):
            return False, f"{key.replace('_', ' ').capitalize()} is required"
    return True, ""


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or "series"


def validate_email(email: str) -> Tuple[bool, str]:
    trimmed = (email or "").strip().lower()
    if not trimmed:
        return False, "Email is required"
    if not _EMAIL_RE.match(trimmed):
        return False, "Invalid email format"
    return True, ""


def validate_product(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "title", "category")
    if not ok:
        return ok, err
    price = _number(values, "price")
    if price is None or not price > 0:
        return False, "Price must be greater than 0"
    original = _number(values, "original_price")
    if original is not None and not original >= 0:
        return False, "Original price cannot be negative"
    if values.get("section_type") and values["section_type"] not in SECTION_TYPES:
        return False, f"Section must be one of: {', '.join(SECTION_TYPES)}"
    if values.get("product_type") and values["product_type"] not in PRODUCT_TYPES:
        return False, f"Product type must be one of: {', '.join(PRODUCT_TYPES)}"
    if values.get("can_unlock_with_coins"):
        coins = _number(values, "coins")
        if coins is None or not coins > 0:
            return False, "Coin price is required when the item can be unlocked with coins"
    if values.get("parent_id"):
        vol = _number(values, "volume_number")
        if vol is None or not vol >= 1:
            return False, "Volume number must be 1 or greater"
        if str(values.get("parent_id")) == str(values.get("id") or ""):
            return False, "A product cannot be a volume of itself"
    stock = _number(values, "stock_quantity")
    if stock is not None and not stock >= 0:
        return False, "Stock quantity cannot be negative"
    return True, ""


def validate_series(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "title")
    if not ok:
        return ok, err
    slug = values.get("slug")
    if slug and not _SLUG_RE.match(slug):
        return False, "Slug may only contain lowercase letters, numbers and single dashes"
    if values.get("status") and values["status"] not in SERIES_STATUSES:
        return False, f"Status must be one of: {', '.join(SERIES_STATUSES)}"
    if values.get("age_rating") and values["age_rating"] not in AGE_RATINGS:
        return False, f"Age rating must be one of: {', '.join(AGE_RATINGS)}"
    return True, ""


def validate_creator(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "name")
    if not ok:
        return ok, err
    url = values.get("website_url")
    if url and not str(url).startswith(("http://", "https://")):
        return False, "Website URL must start with http:// or https://"
    return True, ""


def validate_series_creator(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "series_id", "creator_id", "role")
    if not ok:
        return ok, err
    if values["role"] not in CREATOR_ROLES:
        return False, f"Role must be one of: {', '.join(CREATOR_ROLES)}"
    return True, ""


def validate_chapter(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "book_id", "chapter_title")
    if not ok:
        return ok, err
    num = _number(values, "chapter_number")
    if num is None or not num >= 1:
        return False, "Chapter number must be 1 or greater"
    price = _number(values, "coin_price")
    if price is not None and not price >= 0:
        return False, "Coin price cannot be negative"
    return True, ""


def validate_chapter_page(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "chapter_id")
    if not ok:
        return ok, err
    num = _number(values, "page_number")
    if num is None or not num >= 1:
        return False, "Page number must be 1 or greater"
    return True, ""


def validate_coin_package(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "name")
    if not ok:
        return ok, err
    coins = _number(values, "coins")
    if coins is None or not coins > 0:
        return False, "Coins must be greater than 0"
    bonus = _number(values, "bonus")
    if bonus is not None and not bonus >= 0:
        return False, "Bonus coins cannot be negative"
    price = _number(values, "price")
    if price is None or not price > 0:
        return False, "Price must be greater than 0"
    return True, ""


def validate_order_status(values: dict) -> Tuple[bool, str]:
    status = values.get("status")
    if status and status not in ORDER_STATUSES:
        return False, f"Order status must be one of: {', '.join(ORDER_STATUSES)}"
    payment = values.get("payment_status")
    if payment and payment not in PAYMENT_STATUSES:
        return False, f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}"
    return True, ""


def validate_featured_config(values: dict) -> Tuple[bool, str]:
    return _require(values, "title")


def validate_badge(values: dict) -> Tuple[bool, str]:
    return _require(values, "name", "color")


def validate_template(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "name")
    if not ok:
        return ok, err
    if values.get("template_type") and values["template_type"] not in ("config", "badge", "combined"):
        return False, "Template type must be config, badge or combined"
    return True, ""


def validate_shop_all_hero(values: dict) -> Tuple[bool, str]:
    return _require(values, "title")


def validate_shop_all_filter(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "name", "type")
    if not ok:
        return ok, err
    if not isinstance(values.get("options") or [], list):
        return False, "Options must be a list"
    return True, ""


def validate_shop_all_sort(values: dict) -> Tuple[bool, str]:
    return _require(values, "name", "value")


def validate_hero_banner(values: dict) -> Tuple[bool, str]:
    return _require(values, "title", "image_url")


def validate_announcement(values: dict) -> Tuple[bool, str]:
    return _require(values, "title")


def validate_page_section(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "page_name", "section_name")
    if not ok:
        return ok, err
    if not isinstance(values.get("content") or {}, dict):
        return False, "Content must be an object"
    return True, ""


def validate_about_us_hero(values: dict) -> Tuple[bool, str]:
    return _require(values, "title")


def validate_about_us_section(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "section_key", "title")
    if not ok:
        return ok, err
    if values["section_key"] not in ABOUT_US_SECTION_KEYS:
        return False, f"Section must be one of: {', '.join(ABOUT_US_SECTION_KEYS)}"
    return True, ""


def validate_our_journey_section(values: dict) -> Tuple[bool, str]:
    return _require(values, "title")


def validate_timeline_item(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "header")
    if not ok:
        return ok, err
    year = _number(values, "year")
    if year is None or not 1900 <= year <= 2100:
        return False, "Year must be between 1900 and 2100"
    return True, ""


def validate_user_role(values: dict) -> Tuple[bool, str]:
    ok, err = _require(values, "user_id", "role")
    if not ok:
        return ok, err
    if values["role"] not in USER_ROLES:
        return False, f"Role must be one of: {', '.join(USER_ROLES)}"
    return True, ""
