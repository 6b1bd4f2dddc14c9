"""Image utilities for stored thumbnails."""

import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


def thumbnail_mime_type(payload: bytes) -> str:
    """Guess the MIME type of a thumbnail payload.

    Args:
        payload: Raw thumbnail bytes

    Returns:
        MIME type reported by Pillow, or image/jpeg if it can't tell
    """
    try:
        with Image.open(io.BytesIO(payload)) as img:
            return Image.MIME.get(img.format, DEFAULT_MIME_TYPE)
    except (UnidentifiedImageError, OSError) as e:
        logger.debug("Could not identify thumbnail: %s", e)
        return DEFAULT_MIME_TYPE
