"""Test configuration for pytest."""

import threading
import time
from pathlib import Path
from typing import Dict, Generator, List, Optional, Set, Tuple

import pytest

from photo_mirror.config import Settings
from photo_mirror.database.db_manager import DatabaseManager
from photo_mirror.database.models import MediaKind, MediaRow, MediaSummary, Readiness
from photo_mirror.models import ApiError


def build_media(media_id: str, ready: Readiness = Readiness.READY, **kwargs) -> MediaSummary:
    values = dict(
        id=media_id,
        captured_at="2024-01-01T00:00:00Z",
        camera_model="HERO11 Black",
        file_size=1024,
        ready=ready,
        resolution="1080p",
        kind=MediaKind.VIDEO,
        width=1920,
        height=1080,
        duration=12.5,
    )
    values.update(kwargs)
    return MediaSummary(**values)


class FakeCatalog:
    """In-memory catalog recording page requests and fetch concurrency."""

    def __init__(self, pages: List[List[MediaSummary]], fetch_delay: float = 0.0):
        self.pages = pages
        self.fetch_delay = fetch_delay
        self.failing_ids: Set[str] = set()
        self.failing_pages: Set[int] = set()
        self.requested_pages: List[int] = []
        self.fetched_ids: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def list_page(self, cursor: Optional[str] = None) -> Tuple[List[MediaSummary], Optional[str]]:
        index = int(cursor) if cursor else 0
        self.requested_pages.append(index)
        if index in self.failing_pages:
            raise ApiError(f"page {index} unavailable")
        next_cursor = str(index + 1) if index + 1 < len(self.pages) else None
        return list(self.pages[index]), next_cursor

    def fetch_detail(self, media_id: str) -> bytes:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.fetch_delay)
            if media_id in self.failing_ids:
                raise ApiError(f"cannot fetch {media_id}")
            with self._lock:
                self.fetched_ids.append(media_id)
            return f"thumb-{media_id}".encode()
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def make_media():
    """Factory for media summaries."""
    return build_media


@pytest.fixture
def make_catalog():
    """Factory for fake catalogs."""
    return FakeCatalog


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary database."""
    return Settings(db_path=str(tmp_path / "photos.db"), static_path=str(tmp_path / "static"))


@pytest.fixture(scope="function")
def db_manager(settings: Settings) -> Generator[DatabaseManager, None, None]:
    """Create a test database manager."""
    manager = DatabaseManager(settings.db_path)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def stored_rows(db_manager: DatabaseManager) -> Dict[str, MediaRow]:
    """Store two rows and return them by id."""
    rows = [
        MediaRow(build_media("A", captured_at="2024-01-01T00:00:00Z"), b"thumb-A"),
        MediaRow(build_media("B", captured_at="2024-02-01T00:00:00Z"), b"thumb-B"),
    ]
    db_manager.store_media(rows)
    return {row.id: row for row in rows}
