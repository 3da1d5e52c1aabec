"""
Cart and wishlist aggregates.

Entries carry a snapshot of the product taken when it was added. Later catalog
edits (price included) do not reach entries already in a cart or wishlist:
the cart charges price-at-add.
"""
from dataclasses import dataclass, field, asdict, fields
from typing import Callable, List, Optional

from utils.fallback_store import utc_now_iso

SNAPSHOT_FIELDS = ("title", "author", "price", "original_price", "image_url", "category", "product_type")


@dataclass
class CartEntry:
    id: str
    title: str
    price: float
    author: Optional[str] = None
    original_price: Optional[float] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    product_type: Optional[str] = None
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


@dataclass
class WishlistEntry:
    id: str
    title: str
    price: float
    author: Optional[str] = None
    original_price: Optional[float] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    product_type: Optional[str] = None
    added_date: str = field(default_factory=utc_now_iso)


def snapshot(product: dict) -> dict:
    """Copy the fields an entry freezes at insertion time out of a product record."""
    if not product.get("id"):
        raise ValueError("Product snapshot needs an id")
    snap = {"id": str(product["id"])}
    for name in SNAPSHOT_FIELDS:
        snap[name] = product.get(name)
    snap["title"] = snap["title"] or ""
    snap["price"] = float(snap["price"] or 0)
    if snap["original_price"] is not None:
        snap["original_price"] = float(snap["original_price"])
    return snap


def _from_dict(cls, data: dict):
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


class Cart:
    def __init__(self, entries: Optional[List[CartEntry]] = None):
        self.entries: List[CartEntry] = list(entries or [])

    def _find(self, product_id: str) -> Optional[CartEntry]:
        for entry in self.entries:
            if entry.id == str(product_id):
                return entry
        return None

    def add(self, product: dict, quantity: int = 1) -> CartEntry:
        """Add a product; an existing entry only gains quantity, its snapshot is kept."""
        existing = self._find(product.get("id"))
        if existing is not None:
            existing.quantity += max(1, int(quantity))
            return existing
        entry = _from_dict(CartEntry, {**snapshot(product), "quantity": max(1, int(quantity))})
        self.entries.append(entry)
        return entry

    def remove(self, product_id: str) -> None:
        self.entries = [e for e in self.entries if e.id != str(product_id)]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove(product_id)
            return
        entry = self._find(product_id)
        if entry is not None:
            entry.quantity = int(quantity)

    def contains(self, product_id: str) -> bool:
        return self._find(product_id) is not None

    def clear(self) -> None:
        self.entries = []

    def total(self) -> float:
        return round(sum(e.price * e.quantity for e in self.entries), 2)

    def item_count(self) -> int:
        return sum(e.quantity for e in self.entries)

    def to_list(self) -> List[dict]:
        return [asdict(e) for e in self.entries]

    @classmethod
    def from_list(cls, docs) -> "Cart":
        return cls([_from_dict(CartEntry, d) for d in (docs or []) if isinstance(d, dict) and d.get("id")])


class Wishlist:
    def __init__(self, entries: Optional[List[WishlistEntry]] = None):
        self.entries: List[WishlistEntry] = list(entries or [])

    def add(self, product: dict) -> None:
        if self.contains(product.get("id")):
            return
        self.entries.append(_from_dict(WishlistEntry, snapshot(product)))

    def remove(self, product_id: str) -> None:
        self.entries = [e for e in self.entries if e.id != str(product_id)]

    def toggle(self, product: dict) -> bool:
        """Add if absent, remove if present. Returns whether the product is now wishlisted."""
        if self.contains(product.get("id")):
            self.remove(product["id"])
            return False
        self.add(product)
        return True

    def contains(self, product_id) -> bool:
        return any(e.id == str(product_id) for e in self.entries)

    def clear(self) -> None:
        self.entries = []

    def to_list(self) -> List[dict]:
        return [asdict(e) for e in self.entries]

    @classmethod
    def from_list(cls, docs) -> "Wishlist":
        return cls([_from_dict(WishlistEntry, d) for d in (docs or []) if isinstance(d, dict) and d.get("id")])


class SessionBaskets:
    """Carts and wishlists persisted per client session id in the local JSON store."""

    def __init__(self, local):
        self.local = local

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"cart_{session_id}"

    @staticmethod
    def wishlist_key(session_id: str) -> str:
        return f"wishlist_{session_id}"

    def cart(self, session_id: str) -> Cart:
        return Cart.from_list(self.local.read(self.cart_key(session_id)))

    def wishlist(self, session_id: str) -> Wishlist:
        return Wishlist.from_list(self.local.read(self.wishlist_key(session_id)))

    def change_cart(self, session_id: str, fn: Callable[[Cart], None]) -> Cart:
        result = {}

        def _apply(docs):
            cart = Cart.from_list(docs)
            fn(cart)
            result["cart"] = cart
            return cart.to_list()

        self.local.mutate(self.cart_key(session_id), _apply, default=[])
        return result["cart"]

    def change_wishlist(self, session_id: str, fn: Callable[[Wishlist], None]) -> Wishlist:
        result = {}

        def _apply(docs):
            wl = Wishlist.from_list(docs)
            fn(wl)
            result["wishlist"] = wl
            return wl.to_list()

        self.local.mutate(self.wishlist_key(session_id), _apply, default=[])
        return result["wishlist"]
