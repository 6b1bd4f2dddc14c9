"""Utility functions for Photo Mirror."""

from .auth import build_service, get_credentials, login, refresh_credentials
from .image_utils import thumbnail_mime_type

__all__ = ["build_service", "get_credentials", "login", "refresh_credentials", "thumbnail_mime_type"]
