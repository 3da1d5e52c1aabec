import pytest

from models.coins import CoinPackage
from models.featured import FeaturedSeriesBadge
from utils.fallback_store import FallbackStore, NotFoundError
from utils.storage import MemoryJsonStore

SEED = [
    {"id": "b-2", "name": "Second", "display_order": 2, "is_active": True},
    {"id": "b-1", "name": "First", "display_order": 1, "is_active": True},
    {"id": "b-3", "name": "Hidden", "display_order": 3, "is_active": False},
]


def local_store(seed=None, local=None):
    return FallbackStore("badges", local=local or MemoryJsonStore(), seed=seed, id_prefix="badge")


def test_load_without_seed_returns_empty_and_writes_nothing():
    local = MemoryJsonStore()
    store = local_store(local=local)
    assert store.load() == []
    assert local.read("badges") is None


def test_first_load_seeds_once():
    local = MemoryJsonStore()
    store = local_store(SEED, local)
    first = store.load()
    assert [r["id"] for r in first] == ["b-1", "b-2", "b-3"]
    assert all(r["created_at"] for r in first)

    store.delete("b-1")
    # seed is not re-applied once the document exists
    assert [r["id"] for r in store.load()] == ["b-2", "b-3"]


def test_load_active_only_and_where():
    store = local_store(SEED)
    assert [r["id"] for r in store.load(active_only=True)] == ["b-1", "b-2"]
    assert [r["id"] for r in store.load(where={"name": "Hidden"})] == ["b-3"]


def test_display_order_ties_keep_insertion_order():
    store = local_store()
    a = store.create({"name": "a", "display_order": 1})
    b = store.create({"name": "b", "display_order": 0})
    c = store.create({"name": "c", "display_order": 1})
    assert [r["id"] for r in store.load()] == [b["id"], a["id"], c["id"]]


def test_create_assigns_id_and_timestamps():
    store = local_store()
    created = store.create({"id": "ignored", "name": "New", "display_order": 1})
    assert created["id"].startswith("badge-")
    assert created["id"] != "ignored"
    assert created["created_at"] and created["updated_at"]
    assert store.load() == [created]


def test_local_ids_are_unique_within_the_same_millisecond():
    store = local_store()
    ids = {store.create({"name": str(i)})["id"] for i in range(20)}
    assert len(ids) == 20


def test_update_merges_patch_and_stamps_updated_at():
    store = local_store()
    created = store.create({"name": "Old", "color": "red"})
    updated = store.update(created["id"], {"name": "New", "created_at": "1999-01-01"})
    assert updated["name"] == "New"
    assert updated["color"] == "red"
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] >= created["updated_at"]
    assert store.get(created["id"])["name"] == "New"


def test_update_unknown_id_raises_not_found():
    store = local_store(SEED)
    with pytest.raises(NotFoundError):
        store.update("missing", {"name": "x"})


def test_delete_removes_record_and_unknown_id_raises():
    store = local_store(SEED)
    store.delete("b-2")
    assert "b-2" not in [r["id"] for r in store.load()]
    with pytest.raises(NotFoundError):
        store.delete("b-2")


def test_upsert_keeps_supplied_id():
    store = local_store()
    saved = store.upsert({"id": "fixed", "name": "One"})
    assert saved["id"] == "fixed"
    store.upsert({"id": "fixed", "name": "Two"})
    assert [r["name"] for r in store.load()] == ["Two"]


def test_replace_all_swaps_collection():
    store = local_store(SEED)
    out = store.replace_all([{"id": "x", "name": "Only", "display_order": 1}])
    assert [r["id"] for r in out] == ["x"]
    assert [r["id"] for r in store.load()] == ["x"]


def test_clear_local_brings_back_seed():
    store = local_store(SEED)
    store.delete("b-1")
    store.clear_local()
    assert len(store.load()) == 3


# ---- remote path ----

def test_remote_round_trip(session_factory):
    local = MemoryJsonStore()
    store = FallbackStore("coin_packages", local=local, model=CoinPackage, session_factory=session_factory)
    created = store.create({"name": "Pack", "coins": 100, "bonus": 10, "price": 1.99, "display_order": 1, "created_at": "bogus"})
    assert created["id"]
    assert created["created_at"]

    updated = store.update(created["id"], {"price": 2.99})
    assert updated["price"] == 2.99
    assert [r["id"] for r in store.load()] == [created["id"]]

    store.delete(created["id"])
    assert store.load() == []
    # the local document was never touched
    assert local.read("coin_packages") is None


def test_remote_ignores_unknown_fields(session_factory):
    store = FallbackStore("coin_packages", local=MemoryJsonStore(), model=CoinPackage, session_factory=session_factory)
    created = store.create({"name": "Pack", "coins": 1, "price": 1.0, "not_a_column": "x"})
    assert "not_a_column" not in created


def test_missing_table_falls_back_to_local(empty_session_factory):
    local = MemoryJsonStore()
    store = FallbackStore("featured_series_badges", local=local, model=FeaturedSeriesBadge,
                          session_factory=empty_session_factory, seed=SEED, id_prefix="badge")
    assert len(store.load()) == 3
    created = store.create({"name": "Offline", "color": "bg-red-600", "display_order": 9})
    assert created["id"].startswith("badge-")
    assert created["id"] in [r["id"] for r in local.read("featured_series_badges")]


def test_missing_remote_row_falls_back_to_local_record(session_factory):
    local = MemoryJsonStore()
    local.write("featured_series_badges", [{"id": "local-1", "name": "Local", "color": "x", "display_order": 1}])
    store = FallbackStore("featured_series_badges", local=local, model=FeaturedSeriesBadge, session_factory=session_factory)
    assert store.get("local-1")["name"] == "Local"
    assert store.update("local-1", {"name": "Patched"})["name"] == "Patched"
    store.delete("local-1")
    assert local.read("featured_series_badges") == []


def test_local_only_skips_remote(session_factory):
    store = FallbackStore("coin_packages", local=MemoryJsonStore(), model=CoinPackage,
                          session_factory=session_factory, local_only=True)
    created = store.create({"name": "Pack", "coins": 1, "price": 1.0})
    assert created["id"].startswith("coin_package-")

    remote = FallbackStore("coin_packages", local=MemoryJsonStore(), model=CoinPackage, session_factory=session_factory)
    assert remote.load() == []
