import re
import secrets
import time

from fastapi import APIRouter, UploadFile, File, Form, Depends
from fastapi.responses import JSONResponse

from core.auth import require_admin_user
from core.config import logger
from utils.rate_limit import check_upload_rate_limit, validate_image_upload
from utils.storage import upload_bytes
from utils.thumbnails import is_valid_image, generate_thumbnail, get_thumbnail_key

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

_FOLDER_RE = re.compile(r"[^a-z0-9_-]+")
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def object_key(folder: str, content_type: str) -> str:
    """<folder>/<epoch-ms>-<random>.<ext>"""
    safe = _FOLDER_RE.sub("-", (folder or "").strip().lower()).strip("-") or "uploads"
    stamp = int(time.time() * 1000)
    return f"{safe}/{stamp}-{secrets.token_hex(4)}.{_EXTENSIONS.get(content_type, 'jpg')}"


@router.post("")
async def upload_image(
    file: UploadFile = File(...),
    folder: str = Form("uploads"),
    uid: str = Depends(require_admin_user),
):
    """Store a CMS image and return its public URL plus a card-size thumbnail URL."""
    allowed, err = check_upload_rate_limit(uid)
    if not allowed:
        return JSONResponse({"error": err}, status_code=429)

    data = await file.read()
    content_type = (file.content_type or "").lower()
    ok, err = validate_image_upload(content_type, len(data), file.filename or "")
    if not ok:
        return JSONResponse({"error": err}, status_code=400)
    if not is_valid_image(data):
        return JSONResponse({"error": "File is not a valid image"}, status_code=400)

    key = object_key(folder, content_type)
    try:
        url = upload_bytes(key, data, content_type=content_type)
    except Exception as ex:
        logger.exception(f"Upload failed for {key}: {ex}")
        return JSONResponse({"error": "Upload failed"}, status_code=500)

    thumb_url = None
    thumb = generate_thumbnail(data)
    if thumb:
        try:
            thumb_url = upload_bytes(get_thumbnail_key(key), thumb, content_type="image/jpeg")
        except Exception as ex:
            logger.warning(f"Thumbnail upload failed for {key}: {ex}")

    logger.info(f"[uploads] {uid} uploaded {key} ({len(data)} bytes)")
    return {"ok": True, "url": url, "thumbnail_url": thumb_url, "key": key}
