"""
Catalog search / facet filter / sort for product and series grids.

Pure functions over lists of record dicts. Input lists are never mutated, and
running apply() again on its own output with the same arguments returns the
same sequence.
"""
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional


class Match(Enum):
    EXACT = "exact"
    SUBSTRING = "substring"
    BIDIRECTIONAL = "bidirectional"


@dataclass(frozen=True)
class FacetPolicy:
    """How a selected facet value is compared with a record's genre/category and tags."""
    category: Match = Match.EXACT
    tags: Match = Match.BIDIRECTIONAL


# Products match tags loosely ("Fantasy" <-> "High Fantasy"), series match exactly
PRODUCT_FACETS = FacetPolicy(category=Match.EXACT, tags=Match.BIDIRECTIONAL)
SERIES_FACETS = FacetPolicy(category=Match.EXACT, tags=Match.EXACT)

SECTION_TYPES = ("new-releases", "best-sellers", "leaving-soon", "featured", "trending")
PRODUCT_TYPES = ("book", "merchandise", "print", "digital", "other")


def _as_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(v) for v in value if v is not None]


def category_tokens(record: dict) -> List[str]:
    """Genre (series) and category (products) values of a record."""
    return _as_list(record.get("genre")) + _as_list(record.get("category"))


def _matches(selected: str, value: str, how: Match) -> bool:
    a, b = selected.casefold(), value.casefold()
    if how is Match.EXACT:
        return a == b
    if how is Match.SUBSTRING:
        return a in b
    return a in b or b in a


def matches_search(record: dict, term: str) -> bool:
    needle = term.strip().casefold()
    if not needle:
        return True
    haystack = [record.get("title") or "", record.get("description") or ""]
    haystack += category_tokens(record)
    haystack += _as_list(record.get("tags"))
    return any(needle in str(h).casefold() for h in haystack)


def matches_filters(record: dict, selected: Iterable[str], facets: FacetPolicy = PRODUCT_FACETS) -> bool:
    selected = [s for s in selected if s]
    if not selected:
        return True
    categories = category_tokens(record)
    tags = _as_list(record.get("tags"))
    for value in selected:
        if any(_matches(value, c, facets.category) for c in categories):
            return True
        if any(_matches(value, t, facets.tags) for t in tags):
            return True
    return False


def _price(record: dict) -> float:
    try:
        return float(record.get("price") or 0)
    except (TypeError, ValueError):
        return 0.0


def _title_key(record: dict) -> tuple:
    title = str(record.get("title") or "").casefold()
    # accents collate with their base letter: "Émile" sorts among the e's
    base = "".join(ch for ch in unicodedata.normalize("NFKD", title) if not unicodedata.combining(ch))
    return base, title


def _created_at(record: dict) -> Optional[datetime]:
    value = record.get("created_at")
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _created_key(missing: datetime):
    return lambda record: _created_at(record) or missing


_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
_LATEST = datetime.max.replace(tzinfo=timezone.utc)


# sort key -> (key function, reverse); display labels and slug values both accepted.
# Records without a usable created_at go last in both date orders.
SORTS = {
    "a-z": (_title_key, False),
    "z-a": (_title_key, True),
    "newest first": (_created_key(_EARLIEST), True),
    "newest-first": (_created_key(_EARLIEST), True),
    "oldest first": (_created_key(_LATEST), False),
    "oldest-first": (_created_key(_LATEST), False),
    "price: low to high": (_price, False),
    "price-low-high": (_price, False),
    "price: high to low": (_price, True),
    "price-high-low": (_price, True),
}


def sort_records(records: List[dict], sort_key: Optional[str]) -> List[dict]:
    spec = SORTS.get((sort_key or "").strip().lower())
    if spec is None:
        return list(records)
    key, reverse = spec
    # sorted() stays stable with reverse=True, so equal keys keep their input order
    return sorted(records, key=key, reverse=reverse)


def apply(
    collection: Iterable[dict],
    search_term: Optional[str] = "",
    selected_filters: Optional[Iterable[str]] = None,
    sort_key: Optional[str] = None,
    facets: FacetPolicy = PRODUCT_FACETS,
) -> List[dict]:
    """Search AND facet-filter a collection, then sort it.

    Args:
        collection: product or series records
        search_term: case-insensitive substring of title, description, genre/category or tag
        selected_filters: facet values; a record passes if any one of them matches
        sort_key: "A-Z", "Z-A", "Newest First", "Oldest First", price sorts or their slug forms
        facets: match policy for the filter step

    Returns:
        New list; unknown sort keys keep the filtered order.
    """
    term = search_term or ""
    selected = list(selected_filters or [])
    kept = [r for r in collection if matches_search(r, term) and matches_filters(r, selected, facets)]
    return sort_records(kept, sort_key)


def narrow_products(products: Iterable[dict], product_type: Optional[str] = None, section: Optional[str] = None) -> List[dict]:
    """Grid narrowing: product type first, then section.

    When the section has no products of the type, all products of the type are returned.
    """
    typed = [p for p in products if not product_type or (p.get("product_type") or "book") == product_type]
    if not section:
        return typed
    in_section = [p for p in typed if p.get("section_type") == section]
    return in_section or typed


def volumes_of(products: Iterable[dict], parent_id: str) -> List[dict]:
    vols = [p for p in products if str(p.get("parent_id") or "") == str(parent_id)]
    return sorted(vols, key=lambda p: (p.get("volume_number") is None, p.get("volume_number") or 0))


def empty_message(total: int, filtered: int, label: str = "items") -> Optional[str]:
    """List-view empty state: 'no records' differs from 'nothing matches the filter'."""
    if filtered:
        return None
    if not total:
        return f"No {label} yet"
    return f"No {label} match the current filters"
