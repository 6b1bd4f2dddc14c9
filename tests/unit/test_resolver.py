"""Unit tests for bounded concurrent resolution."""

import threading
from unittest.mock import MagicMock

import pytest

from photo_mirror.catalog import GooglePhotosCatalog
from photo_mirror.models import ResolutionFailure
from photo_mirror.sync.resolver import map_concurrently_limited, resolve


def test_resolve_preserves_order(make_catalog, make_media):
    items = [make_media(str(i)) for i in range(10)]
    catalog = make_catalog([items], fetch_delay=0.01)

    rows = resolve(catalog.fetch_detail, items, limit=4)

    assert [row.id for row in rows] == [str(i) for i in range(10)]
    assert [row.thumbnail for row in rows] == [f"thumb-{i}".encode() for i in range(10)]
    assert [row.media for row in rows] == items


def test_resolve_respects_concurrency_limit(make_catalog, make_media):
    """No more than `limit` fetches are ever in flight."""
    items = [make_media(str(i)) for i in range(20)]
    catalog = make_catalog([items], fetch_delay=0.02)

    resolve(catalog.fetch_detail, items, limit=3)

    assert 1 <= catalog.max_in_flight <= 3


def test_resolve_runs_in_parallel(make_media):
    """Two items with a cap of two are fetched at the same time."""
    barrier = threading.Barrier(2, timeout=5)

    def fetch(media_id):
        barrier.wait()
        return media_id.encode()

    rows = resolve(fetch, [make_media("C"), make_media("D")], limit=2)

    assert [row.thumbnail for row in rows] == [b"C", b"D"]


def test_resolve_failure_waits_for_all_fetches(make_catalog, make_media):
    """A failing fetch fails the batch only after every other fetch finished."""
    items = [make_media(str(i)) for i in range(8)]
    catalog = make_catalog([items], fetch_delay=0.01)
    catalog.failing_ids.add("2")

    with pytest.raises(ResolutionFailure) as exc_info:
        resolve(catalog.fetch_detail, items, limit=2)

    assert exc_info.value.media_id == "2"
    assert catalog.in_flight == 0
    assert sorted(catalog.fetched_ids) == sorted(str(i) for i in range(8) if i != 2)


def test_permits_released_after_failures():
    """Failing tasks give their permit back, so later tasks still run."""

    def fn(x):
        if x % 2:
            raise ValueError(x)
        return x

    with pytest.raises(ValueError):
        map_concurrently_limited(1, fn, list(range(6)))

    assert map_concurrently_limited(1, lambda x: x * 2, [1, 2, 3]) == [2, 4, 6]


def test_map_concurrently_limited_empty():
    assert map_concurrently_limited(3, lambda x: x, []) == []


def test_resolve_reuses_http_per_worker(make_media):
    """A batch opens at most `limit` http objects, one per worker thread."""
    service = MagicMock()
    service.mediaItems.return_value.get.return_value.execute.return_value = {
        "baseUrl": "https://lh3.example.com/item"
    }
    created = []

    def factory():
        http = MagicMock()
        http.request.return_value = (MagicMock(status=200), b"jpeg")
        created.append(http)
        return http

    catalog = GooglePhotosCatalog(service, MagicMock(), http_factory=factory)
    items = [make_media(str(i)) for i in range(40)]

    rows = resolve(catalog.fetch_detail, items, limit=4)

    assert len(rows) == 40
    assert 1 <= len(created) <= 4
