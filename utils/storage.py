import os
import re
import json
import copy
import threading
from typing import Any, Callable, Optional
from core.config import s3, R2_BUCKET, R2_PUBLIC_BASE_URL, STATIC_DIR, logger
from botocore.exceptions import ClientError


# ---- Asset bucket ----

def public_url_for_key(key: str) -> str:
    if s3 and R2_BUCKET and R2_PUBLIC_BASE_URL:
        return f"{R2_PUBLIC_BASE_URL}/{key}"
    return f"/static/{key}"


def upload_bytes(key: str, data: bytes, content_type: str = "image/jpeg") -> str:
    """Store bytes in the asset bucket and return a public URL.
    Without bucket credentials the file lands under STATIC_DIR and is served from /static.
    """
    if not s3 or not R2_BUCKET:
        local_path = os.path.join(STATIC_DIR, key)
        os.makedirs(os.path.dirname(local_path), exist_ok=True)
        with open(local_path, "wb") as f:
            f.write(data)
        logger.info(f"Saved locally: {local_path}")
        return f"/static/{key}"

    bucket = s3.Bucket(R2_BUCKET)
    try:
        bucket.put_object(Key=key, Body=data, ContentType=content_type, CacheControl="public, max-age=3600")
    except ClientError:
        bucket.put_object(Key=key, Body=data, ContentType=content_type)
    return public_url_for_key(key)


def delete_key(key: str) -> bool:
    try:
        if s3 and R2_BUCKET:
            s3.Object(R2_BUCKET, key).delete()
            return True
        path = os.path.join(STATIC_DIR, key)
        if os.path.isfile(path):
            os.remove(path)
            return True
        return False
    except Exception as ex:
        logger.warning(f"delete_key failed for {key}: {ex}")
        return False


# ---- Local fallback documents ----
# One JSON document per key, the whole collection stored as an array.

_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def _safe_key(key: str) -> str:
    safe = _KEY_RE.sub("_", (key or "").strip())
    if not safe or safe in (".", ".."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return safe


class LocalJsonStore:
    """File-backed key/value store of JSON documents.

    mutate() serializes read-modify-write cycles inside this process only;
    separate processes writing the same key are not coordinated.
    """

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        self._lock = threading.RLock()

    def _path(self, key: str) -> str:
        return os.path.join(self.base_dir, f"{_safe_key(key)}.json")

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        with self._lock:
            if not os.path.isfile(path):
                return None
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except ValueError as ex:
                logger.warning(f"Local document {key} is not valid JSON, ignoring it: {ex}")
                return None

    def write(self, key: str, value: Any) -> None:
        path = self._path(key)
        data = json.dumps(value, ensure_ascii=False)
        with self._lock:
            os.makedirs(self.base_dir, exist_ok=True)
            tmp = f"{path}.tmp"
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp, path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            if os.path.isfile(path):
                os.remove(path)

    def mutate(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """Apply fn to the current document and persist its return value."""
        with self._lock:
            current = self.read(key)
            updated = fn(copy.deepcopy(default) if current is None else current)
            self.write(key, updated)
            return updated


class MemoryJsonStore(LocalJsonStore):
    """In-process variant used by tests and local-only demos."""

    def __init__(self):
        super().__init__(base_dir="")
        self._docs: dict[str, str] = {}

    def read(self, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._docs.get(_safe_key(key))
        return None if raw is None else json.loads(raw)

    def write(self, key: str, value: Any) -> None:
        with self._lock:
            self._docs[_safe_key(key)] = json.dumps(value, ensure_ascii=False)

    def remove(self, key: str) -> None:
        with self._lock:
            self._docs.pop(_safe_key(key), None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._docs)
