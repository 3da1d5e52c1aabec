import pytest

from core import seeds
from utils import featured_templates as ft
from utils.fallback_store import FallbackStore, NotFoundError
from utils.storage import MemoryJsonStore


@pytest.fixture
def collections():
    local = MemoryJsonStore()
    return {
        "templates": FallbackStore("featured_series_templates", local=local, seed=seeds.FEATURED_SERIES_TEMPLATES, id_prefix="template"),
        "configs": FallbackStore("featured_series_configs", local=local, seed=seeds.FEATURED_SERIES_CONFIGS, id_prefix="config"),
        "badges": FallbackStore("featured_series_badges", local=local, seed=seeds.FEATURED_SERIES_BADGES, id_prefix="badge"),
        "history": FallbackStore("featured_series_template_history", local=local, id_prefix="history"),
    }


def apply(c, template_id):
    return ft.apply_template(c["templates"], c["configs"], c["badges"], c["history"], template_id, applied_by="admin-1")


def test_default_template_listed_first(collections):
    ft.save_template(collections["templates"], {"name": "Newer"})
    listed = ft.list_templates(collections["templates"])
    assert listed[0]["is_default"] is True
    assert [t["name"] for t in listed][1:] == ["Newer"]


def test_save_template_upserts_by_id(collections):
    first = ft.save_template(collections["templates"], {"id": "t-1", "name": "Summer"})
    assert first["template_type"] == "combined"
    ft.save_template(collections["templates"], {"id": "t-1", "name": "Summer v2"})
    names = [t["name"] for t in collections["templates"].load()]
    assert names.count("Summer v2") == 1
    assert "Summer" not in names


def test_apply_restores_snapshot_and_records_history(collections):
    before = ft.save_before_template(collections["templates"], collections["configs"], collections["badges"])
    collections["badges"].replace_all([{"id": "only", "name": "Sale", "color": "bg-black", "display_order": 1}])
    assert [b["name"] for b in collections["badges"].load()] == ["Sale"]

    applied = apply(collections, before["id"])
    assert [b["name"] for b in applied["badges"]] == ["New Chapter", "Trending", "Updated", "Popular"]
    assert [b["name"] for b in collections["badges"].load()] == ["New Chapter", "Trending", "Updated", "Popular"]

    history = ft.template_history(collections["history"], before["id"])
    assert len(history) == 1
    assert history[0]["action"] == "applied"
    assert history[0]["applied_by"] == "admin-1"
    assert [b["name"] for b in history[0]["previous_data"]["badges"]] == ["Sale"]


def test_badge_template_leaves_configs_alone(collections):
    configs_before = collections["configs"].load()
    tpl = ft.save_template(collections["templates"], {
        "name": "Badges only",
        "template_type": "badge",
        "config_data": {"configs": []},
        "badge_data": {"badges": [{"id": "b", "name": "Hot", "color": "bg-red-600", "display_order": 1}]},
    })
    apply(collections, tpl["id"])
    assert [b["name"] for b in collections["badges"].load()] == ["Hot"]
    assert [c["id"] for c in collections["configs"].load()] == [c["id"] for c in configs_before]


def test_apply_unknown_template(collections):
    with pytest.raises(NotFoundError):
        apply(collections, "missing")
    assert collections["history"].load() == []


def test_history_filters_and_limits(collections):
    for i in range(3):
        ft.record_history(collections["history"], "a" if i < 2 else "b", "applied", None, None)
    assert len(ft.template_history(collections["history"])) == 3
    assert len(ft.template_history(collections["history"], "a")) == 2
    assert len(ft.template_history(collections["history"], limit=1)) == 1
