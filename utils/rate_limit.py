"""Upload rate limiting using throttled-py"""
from datetime import timedelta
from typing import Tuple
from throttled import Throttled, RateLimiterType, store, rate_limiter
from core.config import logger, REDIS_URL, UPLOAD_RATE_LIMIT_PER_HOUR, MAX_IMAGE_SIZE_MB

# Redis when configured, otherwise per-process memory
try:
    if REDIS_URL:
        storage = store.RedisStore(server=REDIS_URL)
        logger.info("[rate_limit] Using Redis for rate limiting")
    else:
        storage = store.MemoryStore()
except Exception as ex:
    storage = store.MemoryStore()
    logger.warning(f"[rate_limit] Redis connection failed, using in-memory storage: {ex}")

upload_throttle = Throttled(
    using=RateLimiterType.FIXED_WINDOW.value,
    quota=rate_limiter.per_duration(timedelta(hours=1), limit=UPLOAD_RATE_LIMIT_PER_HOUR),
    store=storage,
)

MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}


def check_upload_rate_limit(user_id: str, file_count: int = 1) -> Tuple[bool, str]:
    """
    Returns:
        Tuple of (allowed: bool, error_message: str)
    """
    try:
        result = upload_throttle.limit(f"upload_count:{user_id}", cost=file_count)
        if result.limited:
            return False, f"Upload rate limit exceeded. You can upload up to {UPLOAD_RATE_LIMIT_PER_HOUR} files per hour. Please try again later."
        return True, ""
    except Exception as ex:
        logger.warning(f"[rate_limit] Upload rate limit check failed: {ex}")
        return True, ""


def validate_image_upload(content_type: str, size_bytes: int, filename: str = "") -> Tuple[bool, str]:
    name_part = f" '{filename}'" if filename else ""
    if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        return False, "Invalid file type. Please upload a JPEG, PNG, WebP, or GIF image."
    if size_bytes > MAX_IMAGE_SIZE_BYTES:
        return False, f"Image file{name_part} too large. Maximum image file size is {MAX_IMAGE_SIZE_MB}MB."
    if size_bytes <= 0:
        return False, "Empty file"
    return True, ""
