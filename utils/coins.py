"""
Coin ledger.

Balance changes and their ledger rows are written as one unit: a single
database transaction holding a row lock on the user's balance, or, on the
local fallback, a single write of the ledger document. Each transaction row
records the balance it produced, so for consecutive rows n-1, n of one user:
balance_n == balance_{n-1} + amount_n.
"""
import uuid
from dataclasses import dataclass, asdict
from typing import Callable, Optional

from core.config import logger
from models.coins import UserCoins, CoinTransaction
from utils.fallback_store import RemoteUnavailable, utc_now_iso

CREDIT_TYPES = ("purchase", "earn", "refund")
PAYMENT_METHODS = ("stripe", "paypal", "bank_transfer")
CONTENT_TYPES = ("episode", "chapter", "book", "series", "premium_feature")

_LEDGER_KEY = "coin_ledger"


@dataclass
class SpendResult:
    success: bool
    balance: int
    error: Optional[str] = None
    transaction: Optional[dict] = None

    def to_dict(self):
        return asdict(self)


def _empty_ledger():
    return {"accounts": {}, "transactions": []}


class CoinLedger:
    def __init__(self, local, session_factory: Optional[Callable] = None, welcome_bonus: int = 50, local_only: bool = False):
        self.local = local
        self.session_factory = session_factory
        self.welcome_bonus = int(welcome_bonus)
        self.local_only = local_only

    # ---- remote path ----

    def _remote(self, op: str, fn: Callable):
        if self.local_only or self.session_factory is None:
            raise RemoteUnavailable(f"coins.{op}: no database configured")
        db = self.session_factory()
        try:
            return fn(db)
        except Exception as ex:
            try:
                db.rollback()
            except Exception:
                pass
            raise RemoteUnavailable(f"coins.{op} failed: {ex}") from ex
        finally:
            db.close()

    def _remote_account(self, db, user_id: str, lock: bool = False):
        q = db.query(UserCoins).filter(UserCoins.user_id == user_id)
        if lock:
            q = q.with_for_update()
        acct = q.first()
        if acct is None:
            acct = UserCoins(user_id=user_id, balance=self.welcome_bonus, total_earned=self.welcome_bonus, total_spent=0)
            db.add(acct)
            if self.welcome_bonus:
                db.add(CoinTransaction(
                    id=str(uuid.uuid4()), user_id=user_id, type="earn", amount=self.welcome_bonus,
                    balance=self.welcome_bonus, description="Welcome bonus",
                ))
            db.flush()
        return acct

    # ---- local path ----

    def _local_account(self, ledger: dict, user_id: str) -> dict:
        acct = ledger["accounts"].get(user_id)
        if acct is None:
            now = utc_now_iso()
            acct = {
                "user_id": user_id,
                "balance": self.welcome_bonus,
                "total_earned": self.welcome_bonus,
                "total_spent": 0,
                "last_updated": now,
            }
            ledger["accounts"][user_id] = acct
            if self.welcome_bonus:
                ledger["transactions"].append({
                    "id": f"txn-{uuid.uuid4().hex[:12]}",
                    "user_id": user_id,
                    "type": "earn",
                    "amount": self.welcome_bonus,
                    "balance": self.welcome_bonus,
                    "description": "Welcome bonus",
                    "reference": None,
                    "timestamp": now,
                })
        return acct

    def _read_ledger(self) -> dict:
        doc = self.local.read(_LEDGER_KEY)
        if not isinstance(doc, dict):
            return _empty_ledger()
        doc.setdefault("accounts", {})
        doc.setdefault("transactions", [])
        return doc

    # ---- balance changes ----

    def _apply(self, user_id: str, amount: int, type: str, description: str, reference: Optional[str]) -> SpendResult:
        def _q(db):
            acct = self._remote_account(db, user_id, lock=True)
            if amount < 0 and acct.balance < -amount:
                current = acct.balance
                db.commit()
                return SpendResult(False, current, "Insufficient coins")
            acct.balance = acct.balance + amount
            if amount > 0:
                acct.total_earned = (acct.total_earned or 0) + amount
            else:
                acct.total_spent = (acct.total_spent or 0) - amount
            txn = CoinTransaction(
                id=str(uuid.uuid4()), user_id=user_id, type=type, amount=amount,
                balance=acct.balance, description=description, reference=reference,
            )
            db.add(txn)
            db.commit()
            db.refresh(txn)
            return SpendResult(True, txn.balance, transaction=txn.to_dict())

        try:
            return self._remote(type, _q)
        except RemoteUnavailable as ex:
            logger.warning(f"[coins] {ex} - using local fallback")

        outcome = {}

        def _local(ledger):
            ledger = ledger if isinstance(ledger, dict) else _empty_ledger()
            ledger.setdefault("accounts", {})
            ledger.setdefault("transactions", [])
            acct = self._local_account(ledger, user_id)
            if amount < 0 and acct["balance"] < -amount:
                outcome["result"] = SpendResult(False, acct["balance"], "Insufficient coins")
                return ledger
            now = utc_now_iso()
            acct["balance"] += amount
            if amount > 0:
                acct["total_earned"] += amount
            else:
                acct["total_spent"] -= amount
            acct["last_updated"] = now
            txn = {
                "id": f"txn-{uuid.uuid4().hex[:12]}",
                "user_id": user_id,
                "type": type,
                "amount": amount,
                "balance": acct["balance"],
                "description": description,
                "reference": reference,
                "timestamp": now,
            }
            ledger["transactions"].append(txn)
            outcome["result"] = SpendResult(True, acct["balance"], transaction=dict(txn))
            return ledger

        self.local.mutate(_LEDGER_KEY, _local, default=_empty_ledger())
        return outcome["result"]

    def add_coins(self, user_id: str, amount: int, type: str = "earn", description: str = "", reference: Optional[str] = None) -> SpendResult:
        if type not in CREDIT_TYPES:
            return SpendResult(False, self.get_balance(user_id), f"Invalid transaction type: {type}")
        if int(amount) <= 0:
            return SpendResult(False, self.get_balance(user_id), "Amount must be positive")
        return self._apply(user_id, int(amount), type, description, reference)

    def spend_coins(self, user_id: str, amount: int, description: str = "", reference: Optional[str] = None) -> SpendResult:
        if int(amount) <= 0:
            return SpendResult(False, self.get_balance(user_id), "Amount must be positive")
        return self._apply(user_id, -int(amount), "spend", description, reference)

    # ---- reads ----

    def get_account(self, user_id: str) -> dict:
        def _q(db):
            acct = self._remote_account(db, user_id)
            db.commit()
            return acct.to_dict()

        try:
            return self._remote("account", _q)
        except RemoteUnavailable as ex:
            logger.warning(f"[coins] {ex} - using local fallback")

        ledger = self._read_ledger()
        if user_id not in ledger["accounts"]:
            ledger = self.local.mutate(_LEDGER_KEY, lambda doc: self._init_local(doc, user_id), default=_empty_ledger())
        return dict(ledger["accounts"][user_id])

    def _init_local(self, doc, user_id):
        doc = doc if isinstance(doc, dict) else _empty_ledger()
        doc.setdefault("accounts", {})
        doc.setdefault("transactions", [])
        self._local_account(doc, user_id)
        return doc

    def get_balance(self, user_id: str) -> int:
        return int(self.get_account(user_id).get("balance") or 0)

    def can_afford(self, user_id: str, cost: int) -> bool:
        return self.get_balance(user_id) >= int(cost)

    def stats(self, user_id: str) -> dict:
        acct = self.get_account(user_id)
        return {
            "balance": acct["balance"],
            "totalEarned": acct["total_earned"],
            "totalSpent": acct["total_spent"],
            "availableForSpending": acct["balance"],
        }

    def history(self, user_id: Optional[str] = None, limit: int = 20) -> list:
        def _q(db):
            q = db.query(CoinTransaction)
            if user_id:
                q = q.filter(CoinTransaction.user_id == user_id)
            rows = q.order_by(CoinTransaction.timestamp.desc()).limit(limit).all()
            return [r.to_dict() for r in rows]

        try:
            return self._remote("history", _q)
        except RemoteUnavailable as ex:
            logger.warning(f"[coins] {ex} - using local fallback")

        txns = self._read_ledger()["transactions"]
        if user_id:
            txns = [t for t in txns if t.get("user_id") == user_id]
        # Ledger document is append-only, newest last
        return list(reversed(txns))[:limit]

    def all_transactions(self, limit: int = 50) -> list:
        out = []
        for txn in self.history(None, limit=limit):
            uid = str(txn.get("user_id") or "")
            out.append({**txn, "user_name": f"User {uid[:8]}"})
        return out

    def users_with_coins(self) -> list:
        def _q(db):
            return [r.to_dict() for r in db.query(UserCoins).all()]

        try:
            accounts = self._remote("users", _q)
        except RemoteUnavailable as ex:
            logger.warning(f"[coins] {ex} - using local fallback")
            accounts = list(self._read_ledger()["accounts"].values())
        return [
            {
                "user_id": a["user_id"],
                "user_name": f"User {str(a['user_id'])[:8]}",
                "balance": a["balance"],
                "total_earned": a["total_earned"],
                "total_spent": a["total_spent"],
            }
            for a in accounts
        ]

    # ---- content unlocks ----

    @staticmethod
    def unlock_reference(content_type: str, content_id: str) -> str:
        return f"{content_type.upper()}_{content_id}"

    def is_unlocked(self, user_id: str, content_type: str, content_id: str) -> bool:
        ref = self.unlock_reference(content_type, content_id)

        def _q(db):
            row = db.query(CoinTransaction).filter(
                CoinTransaction.user_id == user_id,
                CoinTransaction.type == "spend",
                CoinTransaction.reference == ref,
            ).first()
            return row is not None

        try:
            return self._remote("unlock_status", _q)
        except RemoteUnavailable as ex:
            logger.warning(f"[coins] {ex} - using local fallback")

        return any(
            t.get("user_id") == user_id and t.get("type") == "spend" and t.get("reference") == ref
            for t in self._read_ledger()["transactions"]
        )

    def unlock_content(self, user_id: str, content_type: str, content_id: str, cost: int) -> SpendResult:
        if content_type not in CONTENT_TYPES:
            return SpendResult(False, self.get_balance(user_id), f"Invalid content type: {content_type}")
        if self.is_unlocked(user_id, content_type, content_id):
            return SpendResult(True, self.get_balance(user_id))
        if int(cost) <= 0:
            return SpendResult(True, self.get_balance(user_id))
        return self.spend_coins(
            user_id,
            int(cost),
            description=f"Unlocked {content_type.replace('_', ' ')} {content_id}",
            reference=self.unlock_reference(content_type, content_id),
        )

    # ---- package purchases ----

    def purchase_package(self, user_id: str, package: dict, payment_method: str, purchases) -> dict:
        """Simulated checkout for a coin package.

        Card and PayPal payments complete immediately and credit coins + bonus.
        Bank transfers are recorded as pending and credit nothing yet.
        """
        if payment_method not in PAYMENT_METHODS:
            return {"success": False, "error": f"Unsupported payment method: {payment_method}"}
        total_coins = int(package.get("coins") or 0) + int(package.get("bonus") or 0)
        transaction_id = f"{payment_method}_{uuid.uuid4().hex[:16]}"
        status = "pending" if payment_method == "bank_transfer" else "completed"
        purchase = purchases.create({
            "user_id": user_id,
            "package_id": package.get("id"),
            "coins": total_coins,
            "price": float(package.get("price") or 0),
            "status": status,
            "payment_method": payment_method,
            "transaction_id": transaction_id,
        })
        if status != "completed":
            return {"success": True, "status": status, "purchase": purchase, "balance": self.get_balance(user_id)}

        result = self.add_coins(
            user_id, total_coins, type="purchase",
            description=f"Purchased {package.get('name') or package.get('id')}",
            reference=transaction_id,
        )
        if not result.success:
            purchases.update(purchase["id"], {"status": "failed"})
            return {"success": False, "error": result.error, "balance": result.balance}
        return {"success": True, "status": status, "purchase": purchase, "balance": result.balance, "transaction": result.transaction}
