"""Configuration for Photo Mirror."""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Runtime settings threaded through the syncer, catalog and server."""
    db_path: str = "photos.db"
    static_path: str = "static"
    token_path: str = "token.json"
    credentials_path: str = "client_secret.json"
    concurrency_limit: int = 11
    batch_size: int = 100
    page_size: int = 100
    thumbnail_size: Tuple[int, int] = (256, 256)
    host: str = "127.0.0.1"
    port: int = 8008


def load_settings(path: Optional[str] = None, **overrides: Any) -> Settings:
    """Load settings from an optional JSON file, then apply overrides.

    Args:
        path: Path to a JSON config file. A missing file falls back to defaults.
        **overrides: Values taking precedence over the file; None is ignored.

    Returns:
        Settings object

    Raises:
        ValueError: If the file holds unknown keys or invalid values
    """
    values = {}
    if path:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                values = json.load(f)
        else:
            logger.info("Config file '%s' not found. Using defaults.", path)

    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    values.update({k: v for k, v in overrides.items() if v is not None})
    if "thumbnail_size" in values:
        values["thumbnail_size"] = tuple(values["thumbnail_size"])

    settings = replace(Settings(), **values)
    if settings.concurrency_limit < 1:
        raise ValueError("concurrency_limit must be at least 1")
    if settings.batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    return settings
