"""Bounded concurrent thumbnail fetching."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

from photo_mirror.database.models import MediaRow, MediaSummary
from photo_mirror.models import ResolutionFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY_LIMIT = 11


def map_concurrently_limited(limit: int, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
    """Apply fn to every item in parallel with at most `limit` calls in flight.

    Results are returned in input order. The call returns only once every
    task has finished; if any task raised, the first failure in input order
    is re-raised after the others complete.
    """
    if not items:
        return []

    permits = threading.BoundedSemaphore(limit)

    def bounded(item: T) -> R:
        with permits:
            return fn(item)

    with ThreadPoolExecutor(max_workers=min(limit, len(items))) as executor:
        futures = [executor.submit(bounded, item) for item in items]

    return [future.result() for future in futures]


def resolve(
    fetch: Callable[[str], bytes],
    items: Sequence[MediaSummary],
    limit: int = DEFAULT_CONCURRENCY_LIMIT,
) -> List[MediaRow]:
    """Fetch thumbnails for a batch and pair them with their summaries.

    Raises:
        ResolutionFailure: If any fetch in the batch fails
    """

    def fetch_row(media: MediaSummary) -> MediaRow:
        try:
            return MediaRow(media=media, thumbnail=fetch(media.id))
        except Exception as e:
            raise ResolutionFailure(media.id, e) from e

    rows = map_concurrently_limited(limit, fetch_row, items)
    logger.debug("Resolved %d items", len(rows))
    return rows
