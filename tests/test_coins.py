import pytest

from utils.coins import CoinLedger
from utils.fallback_store import FallbackStore
from utils.storage import MemoryJsonStore

USER = "reader-1"


@pytest.fixture
def ledger():
    return CoinLedger(local=MemoryJsonStore(), welcome_bonus=50)


@pytest.fixture
def purchases():
    return FallbackStore("coin_purchases", local=MemoryJsonStore(), id_prefix="purchase")


def assert_ledger_consistent(ledger, user_id):
    txns = list(reversed(ledger.history(user_id, limit=1000)))
    running = 0
    for txn in txns:
        running += txn["amount"]
        assert txn["balance"] == running
    assert ledger.get_balance(user_id) == running


def test_new_account_gets_welcome_bonus(ledger):
    assert ledger.get_balance(USER) == 50
    history = ledger.history(USER)
    assert len(history) == 1
    assert history[0]["type"] == "earn"
    assert history[0]["description"] == "Welcome bonus"


def test_overspend_fails_without_changing_anything(ledger):
    ledger.add_coins(USER, 50, description="Daily reward")
    assert ledger.get_balance(USER) == 100
    before = ledger.history(USER)

    result = ledger.spend_coins(USER, 150, description="Too expensive")
    assert result.success is False
    assert result.error == "Insufficient coins"
    assert result.balance == 100
    assert ledger.get_balance(USER) == 100
    assert ledger.history(USER) == before


def test_spend_records_signed_transaction(ledger):
    result = ledger.spend_coins(USER, 30, description="Chapter 2", reference="CHAPTER_c2")
    assert result.success
    assert result.balance == 20
    assert result.transaction["amount"] == -30
    assert result.transaction["balance"] == 20
    stats = ledger.stats(USER)
    assert stats == {"balance": 20, "totalEarned": 50, "totalSpent": 30, "availableForSpending": 20}


def test_ledger_balances_chain(ledger):
    ledger.add_coins(USER, 120, type="purchase")
    ledger.spend_coins(USER, 70)
    ledger.spend_coins(USER, 500)
    ledger.add_coins(USER, 5, type="refund")
    ledger.spend_coins(USER, 105)
    assert ledger.get_balance(USER) == 0
    assert_ledger_consistent(ledger, USER)


def test_invalid_amounts_and_types(ledger):
    assert ledger.add_coins(USER, 0).success is False
    assert ledger.spend_coins(USER, -5).success is False
    assert ledger.add_coins(USER, 10, type="spend").error == "Invalid transaction type: spend"
    assert ledger.get_balance(USER) == 50


def test_can_afford(ledger):
    assert ledger.can_afford(USER, 50)
    assert not ledger.can_afford(USER, 51)


def test_history_is_newest_first_and_limited(ledger):
    for i in range(5):
        ledger.add_coins(USER, i + 1, description=f"reward {i}")
    history = ledger.history(USER, limit=3)
    assert [t["description"] for t in history] == ["reward 4", "reward 3", "reward 2"]
    assert ledger.history("someone-else") == []


def test_unlock_is_idempotent(ledger):
    first = ledger.unlock_content(USER, "chapter", "c9", 20)
    assert first.success and first.balance == 30
    assert ledger.is_unlocked(USER, "chapter", "c9")
    assert not ledger.is_unlocked(USER, "episode", "c9")

    again = ledger.unlock_content(USER, "chapter", "c9", 20)
    assert again.success and again.balance == 30
    spends = [t for t in ledger.history(USER) if t["type"] == "spend"]
    assert len(spends) == 1
    assert spends[0]["reference"] == "CHAPTER_c9"


def test_unlock_rejects_unknown_content_type(ledger):
    result = ledger.unlock_content(USER, "poster", "x", 5)
    assert not result.success
    assert ledger.get_balance(USER) == 50


def test_unlock_without_funds(ledger):
    result = ledger.unlock_content(USER, "book", "b1", 80)
    assert not result.success
    assert result.error == "Insufficient coins"
    assert not ledger.is_unlocked(USER, "book", "b1")


def test_card_purchase_credits_coins_and_bonus(ledger, purchases):
    package = {"id": "pkg-1", "name": "Starter", "coins": 100, "bonus": 10, "price": 0.99}
    out = ledger.purchase_package(USER, package, "stripe", purchases)
    assert out["success"]
    assert out["status"] == "completed"
    assert out["balance"] == 160
    assert out["purchase"]["coins"] == 110
    assert ledger.history(USER)[0]["type"] == "purchase"
    assert_ledger_consistent(ledger, USER)


def test_bank_transfer_stays_pending(ledger, purchases):
    package = {"id": "pkg-1", "name": "Starter", "coins": 100, "bonus": 0, "price": 0.99}
    out = ledger.purchase_package(USER, package, "bank_transfer", purchases)
    assert out["success"]
    assert out["status"] == "pending"
    assert out["balance"] == 50
    assert purchases.load()[0]["status"] == "pending"


def test_unknown_payment_method(ledger, purchases):
    out = ledger.purchase_package(USER, {"id": "p", "coins": 1}, "crypto", purchases)
    assert out["success"] is False
    assert purchases.load() == []


def test_admin_views(ledger):
    ledger.add_coins("alice-123456789", 10)
    ledger.get_balance("bob")
    users = {u["user_id"]: u for u in ledger.users_with_coins()}
    assert users["alice-123456789"]["balance"] == 60
    assert users["alice-123456789"]["user_name"] == "User alice-12"
    assert users["bob"]["balance"] == 50
    assert all("user_name" in t for t in ledger.all_transactions())


# ---- remote path ----

def test_remote_ledger(session_factory):
    local = MemoryJsonStore()
    ledger = CoinLedger(local=local, session_factory=session_factory, welcome_bonus=50)
    assert ledger.get_balance(USER) == 50
    assert ledger.add_coins(USER, 50).balance == 100

    failed = ledger.spend_coins(USER, 150)
    assert not failed.success
    assert failed.error == "Insufficient coins"
    assert ledger.get_balance(USER) == 100

    assert ledger.unlock_content(USER, "episode", "e1", 40).balance == 60
    assert ledger.unlock_content(USER, "episode", "e1", 40).balance == 60
    assert ledger.is_unlocked(USER, "episode", "e1")
    assert len(ledger.history(USER, limit=100)) == 3
    assert local.read("coin_ledger") is None


def test_missing_tables_use_local_ledger(empty_session_factory):
    local = MemoryJsonStore()
    ledger = CoinLedger(local=local, session_factory=empty_session_factory, welcome_bonus=50)
    assert ledger.spend_coins(USER, 20).balance == 30
    assert local.read("coin_ledger")["accounts"][USER]["balance"] == 30
