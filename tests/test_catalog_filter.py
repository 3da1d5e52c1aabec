from utils import catalog_filter
from utils.catalog_filter import apply, Match, FacetPolicy, PRODUCT_FACETS, SERIES_FACETS
from utils.fuzzy_search import levenshtein_distance, similarity, fuzzy_match, fuzzy_search_items, get_search_suggestions

SERIES = [
    {"id": "1", "title": "One Piece", "genre": ["Adventure"], "created_at": "2024-01-01T00:00:00+00:00"},
    {"id": "2", "title": "Attack on Titan", "genre": ["Action"], "created_at": "2024-03-01T00:00:00+00:00"},
]

PRODUCTS = [
    {"id": "p1", "title": "Demon Slayer Vol. 1", "category": "Manga", "tags": ["High Fantasy"], "price": 9.99,
     "created_at": "2024-02-01T00:00:00+00:00", "description": "Blades and demons"},
    {"id": "p2", "title": "attack art book", "category": "Art Book", "tags": ["Action"], "price": 29.0,
     "created_at": "2024-05-01T00:00:00+00:00"},
    {"id": "p3", "title": "Zodiac Poster", "category": "Merch", "tags": ["fantasy"], "price": 4.5,
     "created_at": "2023-12-01T00:00:00+00:00"},
]


def titles(items):
    return [i["title"] for i in items]


def test_search_scenario():
    assert apply(SERIES, "piece", [], None) == [SERIES[0]]


def test_filter_scenario():
    assert apply(SERIES, "", ["Action"], None, facets=SERIES_FACETS) == [SERIES[1]]
    assert apply(SERIES, "", ["Action"], None) == [SERIES[1]]


def test_sort_z_a_scenario():
    items = [{"title": "One Piece"}, {"title": "Attack on Titan"}, {"title": "Demon Slayer"}]
    assert titles(apply(items, "", [], "Z-A")) == ["One Piece", "Demon Slayer", "Attack on Titan"]


def test_search_matches_description_category_and_tags():
    assert titles(apply(PRODUCTS, "BLADES", [], None)) == ["Demon Slayer Vol. 1"]
    assert titles(apply(PRODUCTS, "merch", [], None)) == ["Zodiac Poster"]
    assert titles(apply(PRODUCTS, "high fan", [], None)) == ["Demon Slayer Vol. 1"]


def test_blank_search_and_empty_filters_keep_everything():
    assert apply(PRODUCTS, "   ", [], "unknown sort") == PRODUCTS


def test_product_tags_match_in_both_directions():
    # "Fantasy" is inside "High Fantasy", and "fantasy" equals it ignoring case
    assert titles(apply(PRODUCTS, "", ["Fantasy"], None)) == ["Demon Slayer Vol. 1", "Zodiac Poster"]
    assert titles(apply(PRODUCTS, "", ["High Fantasy Epic"], None)) == ["Demon Slayer Vol. 1", "Zodiac Poster"]
    assert apply(PRODUCTS, "", ["Epic Saga"], None) == []


def test_series_facets_match_tags_exactly():
    assert apply(PRODUCTS, "", ["Fantasy"], None, facets=SERIES_FACETS) == [PRODUCTS[2]]


def test_category_match_is_exact_ignoring_case():
    assert titles(apply(PRODUCTS, "", ["manga"], None)) == ["Demon Slayer Vol. 1"]
    assert apply(PRODUCTS, "", ["Man"], None) == []


def test_substring_policy():
    policy = FacetPolicy(category=Match.SUBSTRING, tags=Match.EXACT)
    assert titles(apply(PRODUCTS, "", ["Book"], None, facets=policy)) == ["attack art book"]


def test_any_selected_filter_is_enough():
    assert titles(apply(PRODUCTS, "", ["Merch", "Manga"], None)) == ["Demon Slayer Vol. 1", "Zodiac Poster"]


def test_filter_and_search_compose_as_and():
    both = apply(PRODUCTS, "o", ["Fantasy"], "A-Z")
    only_search = apply(PRODUCTS, "o", [], "A-Z")
    only_filter = apply(PRODUCTS, "", ["Fantasy"], "A-Z")
    assert all(r in only_search and r in only_filter for r in both)
    assert titles(both) == ["Demon Slayer Vol. 1", "Zodiac Poster"]


def test_a_z_is_case_insensitive():
    assert titles(apply(PRODUCTS, "", [], "A-Z")) == ["attack art book", "Demon Slayer Vol. 1", "Zodiac Poster"]


def test_date_sorts():
    newest = apply(PRODUCTS, "", [], "Newest First")
    assert [r["created_at"] for r in newest] == sorted((r["created_at"] for r in PRODUCTS), reverse=True)
    assert titles(apply(PRODUCTS, "", [], "oldest-first")) == ["Zodiac Poster", "Demon Slayer Vol. 1", "attack art book"]


def test_price_sorts():
    assert [r["price"] for r in apply(PRODUCTS, "", [], "price-low-high")] == [4.5, 9.99, 29.0]
    assert [r["price"] for r in apply(PRODUCTS, "", [], "Price: High to Low")] == [29.0, 9.99, 4.5]


def test_equal_keys_keep_input_order_in_both_directions():
    items = [{"id": i, "title": "Same"} for i in range(4)]
    assert [r["id"] for r in apply(items, "", [], "A-Z")] == [0, 1, 2, 3]
    assert [r["id"] for r in apply(items, "", [], "Z-A")] == [0, 1, 2, 3]


def test_title_sort_collates_accents_with_base_letter():
    items = [{"title": "Zorro"}, {"title": "Émile"}, {"title": "eden"}, {"title": "Fable"}]
    assert titles(apply(items, "", [], "A-Z")) == ["eden", "Émile", "Fable", "Zorro"]
    assert titles(apply(items, "", [], "Z-A")) == ["Zorro", "Fable", "Émile", "eden"]


def test_date_sorts_compare_instants_not_strings():
    items = [
        {"title": "A", "created_at": "2024-06-01T12:00:00+05:00"},  # 07:00Z
        {"title": "B", "created_at": "2024-06-01T08:00:00+00:00"},
        {"title": "C", "created_at": "2024-06-01T07:30:00"},  # naive, read as UTC
        {"title": "D", "created_at": "2024-06-01T06:00:00Z"},
    ]
    assert titles(apply(items, "", [], "Newest First")) == ["B", "C", "A", "D"]
    assert titles(apply(items, "", [], "oldest-first")) == ["D", "A", "C", "B"]


def test_records_without_dates_sort_last():
    items = [{"title": "Undated"}, {"title": "Garbled", "created_at": "last tuesday"}, {"title": "Dated", "created_at": "2024-01-01"}]
    assert titles(apply(items, "", [], "Newest First")) == ["Dated", "Undated", "Garbled"]
    assert titles(apply(items, "", [], "Oldest First")) == ["Dated", "Undated", "Garbled"]


def test_apply_is_idempotent_and_pure():
    snapshot = [dict(p) for p in PRODUCTS]
    for args in [("a", ["Fantasy"], "Z-A"), ("", [], "Newest First"), ("art", [], "bogus"), ("", ["Action"], "A-Z")]:
        once = apply(PRODUCTS, *args)
        assert apply(once, *args) == once
        assert apply(PRODUCTS, *args) == once
    assert PRODUCTS == snapshot


def test_narrow_products_falls_back_to_type_when_section_empty():
    products = [
        {"id": "a", "product_type": "book", "section_type": "new-releases"},
        {"id": "b", "product_type": "book", "section_type": "trending"},
        {"id": "c", "product_type": "merchandise", "section_type": "trending"},
        {"id": "d"},
    ]
    assert [p["id"] for p in catalog_filter.narrow_products(products, "book", "trending")] == ["b"]
    assert [p["id"] for p in catalog_filter.narrow_products(products, "book", "leaving-soon")] == ["a", "b", "d"]
    assert [p["id"] for p in catalog_filter.narrow_products(products, "merchandise")] == ["c"]


def test_volumes_sorted_by_number():
    products = [
        {"id": "v3", "parent_id": "p", "volume_number": 3},
        {"id": "v1", "parent_id": "p", "volume_number": 1},
        {"id": "x", "parent_id": "other", "volume_number": 2},
    ]
    assert [p["id"] for p in catalog_filter.volumes_of(products, "p")] == ["v1", "v3"]


def test_empty_message_tells_no_records_from_no_matches():
    assert catalog_filter.empty_message(0, 0, "products") == "No products yet"
    assert catalog_filter.empty_message(5, 0, "products") == "No products match the current filters"
    assert catalog_filter.empty_message(5, 2, "products") is None


# ---- fuzzy search ----

def test_levenshtein_and_similarity():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert similarity("", "") == 1.0
    assert similarity("Naruto", "naruto") == 1.0


def test_fuzzy_match_tolerates_typos():
    assert fuzzy_match("narutp", "Naruto Vol. 1")
    assert fuzzy_match("vol", "Naruto Vol. 1")
    assert not fuzzy_match("zzzz", "Naruto")
    assert not fuzzy_match("", "Naruto")


def test_fuzzy_search_ranks_substring_hits_first():
    items = [{"title": "Bleach"}, {"title": "Blaech Stories"}, {"title": "Bleach Colors"}]
    out = fuzzy_search_items(items, "bleach", ["title"])
    assert titles(out)[:2] == ["Bleach", "Bleach Colors"]
    assert "Blaech Stories" in titles(out)
    assert fuzzy_search_items(items, "  ", ["title"]) == items


def test_search_suggestions():
    items = [{"title": "Naruto"}, {"title": "Naruto"}, {"title": "Nana"}, {"title": "One Piece"}]
    assert get_search_suggestions(items, "na", "title") == ["Naruto", "Nana"]
    assert get_search_suggestions(items, "", "title") == []
    assert len(get_search_suggestions([{"title": f"Na {i}"} for i in range(10)], "na", "title")) == 5
