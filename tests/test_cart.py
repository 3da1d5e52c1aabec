import pytest

from utils.cart import Cart, Wishlist, SessionBaskets, snapshot
from utils.storage import MemoryJsonStore

BOOK = {"id": "b1", "title": "Naruto Vol. 1", "author": "Masashi Kishimoto", "price": 9.99,
        "image_url": "/static/naruto.jpg", "category": "Manga", "product_type": "book", "stock": 3}
POSTER = {"id": "m1", "title": "Poster", "price": 5, "product_type": "merchandise"}


def test_adding_same_product_twice_increments_quantity():
    cart = Cart()
    cart.add(BOOK)
    cart.add(BOOK)
    assert len(cart.entries) == 1
    assert cart.entries[0].quantity == 2
    assert cart.item_count() == 2
    assert cart.total() == 19.98


def test_cart_keeps_price_at_add():
    cart = Cart()
    cart.add(BOOK)
    cart.add({**BOOK, "price": 4.99, "title": "Renamed"})
    entry = cart.entries[0]
    assert entry.price == 9.99
    assert entry.title == "Naruto Vol. 1"
    assert entry.quantity == 2


def test_snapshot_only_copies_entry_fields():
    snap = snapshot(BOOK)
    assert "stock" not in snap
    assert snap["price"] == 9.99
    with pytest.raises(ValueError):
        snapshot({"title": "no id"})


def test_update_quantity_and_removal():
    cart = Cart()
    cart.add(BOOK)
    cart.add(POSTER, quantity=3)
    cart.update_quantity("b1", 5)
    assert cart.item_count() == 8
    cart.update_quantity("m1", 0)
    assert not cart.contains("m1")
    cart.update_quantity("missing", 4)
    assert [e.id for e in cart.entries] == ["b1"]
    cart.remove("b1")
    assert cart.entries == []


def test_cart_list_round_trip_drops_unknown_keys():
    cart = Cart()
    cart.add(BOOK, quantity=2)
    docs = cart.to_list()
    docs.append({"title": "no id"})
    docs[0]["extra"] = "x"
    restored = Cart.from_list(docs)
    assert [e.id for e in restored.entries] == ["b1"]
    assert restored.entries[0].quantity == 2


def test_wishlist_add_is_idempotent():
    wl = Wishlist()
    wl.add(BOOK)
    wl.add(BOOK)
    assert len(wl.entries) == 1
    assert wl.entries[0].added_date


def test_wishlist_toggle_twice_restores_membership():
    wl = Wishlist()
    wl.add(POSTER)
    assert wl.toggle(BOOK) is True
    assert wl.contains("b1")
    assert wl.toggle(BOOK) is False
    assert not wl.contains("b1")
    assert [e.id for e in wl.entries] == ["m1"]


def test_session_baskets_persist_per_session():
    local = MemoryJsonStore()
    baskets = SessionBaskets(local)
    baskets.change_cart("s1", lambda c: c.add(BOOK))
    baskets.change_cart("s1", lambda c: c.add(BOOK))
    baskets.change_wishlist("s1", lambda w: w.add(POSTER))

    assert baskets.cart("s1").item_count() == 2
    assert baskets.cart("s2").entries == []
    assert baskets.wishlist("s1").contains("m1")
    assert local.read("cart_s1")[0]["quantity"] == 2

    baskets.change_cart("s1", lambda c: c.clear())
    assert baskets.cart("s1").entries == []
