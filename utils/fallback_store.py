"""
Collection store with a local fallback.

Every operation tries the remote database first. Any remote failure (no
database configured, connection error, missing table, missing row) is logged
and the same operation is carried out against the local JSON document for the
collection instead. Callers never see remote errors.
"""
import copy
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from core.config import logger


class StoreError(Exception):
    pass


class RemoteUnavailable(StoreError):
    """Remote call failed; always handled inside FallbackStore."""


class NotFoundError(StoreError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}: no record with id {record_id!r}")
        self.collection = collection
        self.record_id = record_id


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Columns the database owns; never copied from caller payloads into rows
_SERVER_FIELDS = ("created_at", "updated_at")


class FallbackStore:
    def __init__(
        self,
        collection: str,
        local,
        model=None,
        session_factory: Optional[Callable] = None,
        seed: Optional[Iterable[dict]] = None,
        id_prefix: Optional[str] = None,
        order_by: str = "display_order",
        local_only: bool = False,
    ):
        self.collection = collection
        self.local = local
        self.model = model
        self.session_factory = session_factory
        self.seed = [dict(r) for r in seed] if seed is not None else None
        self.id_prefix = id_prefix or collection.rstrip("s")
        self.order_by = order_by
        self.local_only = local_only

    # ---- remote path ----

    def _remote(self, op: str, fn: Callable):
        if self.local_only:
            raise RemoteUnavailable(f"{self.collection}: local-only mode")
        if self.model is None or self.session_factory is None:
            raise RemoteUnavailable(f"{self.collection}: no database configured")
        db = self.session_factory()
        try:
            return fn(db)
        except RemoteUnavailable:
            db.rollback()
            raise
        except Exception as ex:
            try:
                db.rollback()
            except Exception:
                pass
            raise RemoteUnavailable(f"{self.collection}.{op} failed: {ex}") from ex
        finally:
            db.close()

    def _columns(self) -> set:
        return set(self.model.__table__.columns.keys())

    def _row_values(self, record: dict) -> dict:
        cols = self._columns()
        return {k: v for k, v in record.items() if k in cols and k not in _SERVER_FIELDS}

    def _ordered_query(self, db, where: Optional[dict]):
        q = db.query(self.model)
        for field, value in (where or {}).items():
            q = q.filter(getattr(self.model, field) == value)
        if self.order_by and hasattr(self.model, self.order_by):
            q = q.order_by(getattr(self.model, self.order_by))
        if hasattr(self.model, "created_at"):
            q = q.order_by(self.model.created_at)
        return q

    def _log_fallback(self, op: str, ex: Exception):
        if self.local_only:
            logger.info(f"[store] {self.collection}.{op}: local-only mode")
        else:
            logger.warning(f"[store] {ex} - using local fallback")

    # ---- local path ----

    def _read_local(self) -> list:
        docs = self.local.read(self.collection)
        if docs is None:
            if self.seed is None:
                return []
            # First read of a never-written collection seeds it once
            now = utc_now_iso()
            seeded = []
            for rec in self.seed:
                item = dict(rec)
                item.setdefault("created_at", now)
                item.setdefault("updated_at", now)
                seeded.append(item)
            self.local.write(self.collection, seeded)
            logger.info(f"[store] {self.collection}: seeded local fallback with {len(seeded)} records")
            return copy.deepcopy(seeded)
        if not isinstance(docs, list):
            logger.warning(f"[store] {self.collection}: local document is not a list, ignoring it")
            return []
        return docs

    def _new_local_id(self, existing: list) -> str:
        taken = {str(r.get("id")) for r in existing}
        stamp = int(time.time() * 1000)
        candidate = f"{self.id_prefix}-{stamp}"
        while candidate in taken:
            stamp += 1
            candidate = f"{self.id_prefix}-{stamp}"
        return candidate

    def _sorted(self, records: list) -> list:
        if not self.order_by:
            return records
        key = self.order_by
        # sorted() is stable: equal display_order keeps array (insertion) order
        return sorted(records, key=lambda r: (r.get(key) is None, r.get(key) or 0))

    @staticmethod
    def _matches(record: dict, active_only: bool, where: Optional[dict]) -> bool:
        if active_only and not record.get("is_active", True):
            return False
        for field, value in (where or {}).items():
            if record.get(field) != value:
                return False
        return True

    # ---- public API ----

    def load(self, active_only: bool = False, where: Optional[dict] = None) -> list:
        def _q(db):
            q = self._ordered_query(db, where)
            if active_only and hasattr(self.model, "is_active"):
                q = q.filter(self.model.is_active == True)  # noqa: E712
            return [row.to_dict() for row in q.all()]

        try:
            return self._remote("load", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("load", ex)

        records = [r for r in self._read_local() if self._matches(r, active_only, where)]
        return self._sorted(records)

    def get(self, record_id: str) -> Optional[dict]:
        def _q(db):
            row = db.query(self.model).filter(self.model.id == record_id).first()
            if row is None:
                raise RemoteUnavailable(f"{self.collection}.get: {record_id} not in database")
            return row.to_dict()

        try:
            return self._remote("get", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("get", ex)

        for rec in self._read_local():
            if str(rec.get("id")) == str(record_id):
                return rec
        return None

    def create(self, record: dict) -> dict:
        data = {k: v for k, v in dict(record).items() if k != "id"}

        def _q(db):
            row = self.model(**self._row_values(data))
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.to_dict()

        try:
            return self._remote("create", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("create", ex)

        created = {}

        def _append(docs):
            docs = docs if isinstance(docs, list) else []
            now = utc_now_iso()
            created.update(data)
            created["id"] = self._new_local_id(docs)
            created["created_at"] = now
            created["updated_at"] = now
            docs.append(dict(created))
            return docs

        self._ensure_local()
        self.local.mutate(self.collection, _append, default=[])
        return created

    def update(self, record_id: str, patch: dict) -> dict:
        data = {k: v for k, v in dict(patch).items() if k not in ("id", "created_at")}

        def _q(db):
            row = db.query(self.model).filter(self.model.id == record_id).first()
            if row is None:
                raise RemoteUnavailable(f"{self.collection}.update: {record_id} not in database")
            for k, v in self._row_values(data).items():
                setattr(row, k, v)
            db.commit()
            db.refresh(row)
            return row.to_dict()

        try:
            return self._remote("update", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("update", ex)

        updated = {}

        def _merge(docs):
            for i, rec in enumerate(docs):
                if str(rec.get("id")) == str(record_id):
                    merged = {**rec, **data, "updated_at": utc_now_iso()}
                    docs[i] = merged
                    updated.update(merged)
                    return docs
            raise NotFoundError(self.collection, record_id)

        self._ensure_local()
        self.local.mutate(self.collection, _merge, default=[])
        return updated

    def delete(self, record_id: str) -> None:
        def _q(db):
            count = db.query(self.model).filter(self.model.id == record_id).delete()
            db.commit()
            if not count:
                raise RemoteUnavailable(f"{self.collection}.delete: {record_id} not in database")

        try:
            self._remote("delete", _q)
            return
        except RemoteUnavailable as ex:
            self._log_fallback("delete", ex)

        def _drop(docs):
            kept = [r for r in docs if str(r.get("id")) != str(record_id)]
            if len(kept) == len(docs):
                raise NotFoundError(self.collection, record_id)
            return kept

        self._ensure_local()
        self.local.mutate(self.collection, _drop, default=[])

    def upsert(self, record: dict) -> dict:
        """Insert or replace keeping the caller's id (templates are saved this way)."""
        data = dict(record)
        if not data.get("id"):
            return self.create(data)
        record_id = str(data["id"])

        def _q(db):
            row = db.query(self.model).filter(self.model.id == record_id).first()
            values = self._row_values(data)
            if row is None:
                row = self.model(**values)
                db.add(row)
            else:
                for k, v in values.items():
                    setattr(row, k, v)
            db.commit()
            db.refresh(row)
            return row.to_dict()

        try:
            return self._remote("upsert", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("upsert", ex)

        saved = {}

        def _put(docs):
            now = utc_now_iso()
            for i, rec in enumerate(docs):
                if str(rec.get("id")) == record_id:
                    docs[i] = {**rec, **data, "updated_at": now}
                    saved.update(docs[i])
                    return docs
            item = {**data, "created_at": data.get("created_at") or now, "updated_at": now}
            docs.append(item)
            saved.update(item)
            return docs

        self._ensure_local()
        self.local.mutate(self.collection, _put, default=[])
        return saved

    def replace_all(self, records: Iterable[dict]) -> list:
        """Swap the whole collection for the given records."""
        items = [dict(r) for r in records]

        def _q(db):
            db.query(self.model).delete()
            for rec in items:
                db.add(self.model(**self._row_values(rec)))
            db.commit()
            return [row.to_dict() for row in self._ordered_query(db, None).all()]

        try:
            return self._remote("replace_all", _q)
        except RemoteUnavailable as ex:
            self._log_fallback("replace_all", ex)

        now = utc_now_iso()
        stored = []
        for rec in items:
            rec.setdefault("created_at", now)
            rec["updated_at"] = now
            stored.append(rec)
        for rec in stored:
            if not rec.get("id"):
                rec["id"] = self._new_local_id(stored)
        self.local.write(self.collection, stored)
        return self._sorted(copy.deepcopy(stored))

    def clear_local(self) -> None:
        self.local.remove(self.collection)
        logger.info(f"[store] {self.collection}: local fallback cleared")

    def _ensure_local(self):
        # Writes against a never-read collection start from its seed
        if self.local.read(self.collection) is None:
            self._read_local()
