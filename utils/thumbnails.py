"""
Card-size thumbnails for CMS image uploads (covers, hero backgrounds, page images).
"""
import io
import os
from PIL import Image, ImageFilter, UnidentifiedImageError
from typing import Optional
from core.config import logger

THUMB_CARD = 600


def is_valid_image(data: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, ValueError) as ex:
        logger.warning(f"Uploaded file is not a readable image: {ex}")
        return False


def generate_thumbnail(image_data: bytes, max_size: int = THUMB_CARD, quality: int = 90) -> Optional[bytes]:
    """
    Args:
        image_data: Original image bytes
        max_size: Maximum dimension (width or height)
        quality: JPEG quality (1-100)

    Returns:
        JPEG bytes or None if the image could not be processed
    """
    try:
        img = Image.open(io.BytesIO(image_data))

        # Flatten transparency onto white
        if img.mode in ('RGBA', 'P', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'P':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1] if img.mode in ('RGBA', 'LA') else None)
            img = background
        elif img.mode != 'RGB':
            img = img.convert('RGB')

        width, height = img.size
        resized = width > max_size or height > max_size
        if resized:
            img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
            img = img.filter(ImageFilter.UnsharpMask(radius=0.5, percent=50, threshold=2))

        buf = io.BytesIO()
        img.save(buf, format='JPEG', quality=quality, optimize=True, progressive=True)
        return buf.getvalue()
    except Exception as ex:
        logger.warning(f"Thumbnail generation failed: {ex}")
        return None


def get_thumbnail_key(original_key: str, size: str = 'card') -> str:
    base, _ = os.path.splitext(original_key)
    return f"{base}_thumb_{size}.jpg"
