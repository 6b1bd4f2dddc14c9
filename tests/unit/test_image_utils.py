"""Unit tests for image utilities."""

import io

from PIL import Image

from photo_mirror.utils.image_utils import thumbnail_mime_type


def _encode(fmt: str) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (10, 20), color="red").save(buffer, format=fmt)
    return buffer.getvalue()


def test_thumbnail_mime_type():
    assert thumbnail_mime_type(_encode("JPEG")) == "image/jpeg"
    assert thumbnail_mime_type(_encode("PNG")) == "image/png"


def test_thumbnail_mime_type_falls_back_to_jpeg():
    assert thumbnail_mime_type(b"not an image") == "image/jpeg"
