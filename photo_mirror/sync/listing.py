"""Page-at-a-time listing of the remote catalog."""

import logging
from typing import AbstractSet, Callable, Iterator, List, Optional, Protocol, Tuple

from photo_mirror.database.models import MediaSummary
from photo_mirror.models import ApiError, ListingFailure, SyncMode
from photo_mirror.sync.eligibility import is_eligible

logger = logging.getLogger(__name__)

PagePredicate = Callable[[List[MediaSummary]], bool]


class Catalog(Protocol):
    """What the sync engine needs from a remote catalog."""

    def list_page(self, cursor: Optional[str] = None) -> Tuple[List[MediaSummary], Optional[str]]:
        ...

    def fetch_detail(self, media_id: str) -> bytes:
        ...


def full_predicate(page: List[MediaSummary]) -> bool:
    return True


def incremental_predicate(seen: AbstractSet[str]) -> PagePredicate:
    """Keep listing only while pages still hold something to sync."""

    def keep_going(page: List[MediaSummary]) -> bool:
        return any(is_eligible(item, seen) for item in page)

    return keep_going


def predicate_for(mode: SyncMode, seen: AbstractSet[str]) -> PagePredicate:
    if mode == SyncMode.INCREMENTAL:
        return incremental_predicate(seen)
    return full_predicate


def list_candidates(catalog: Catalog, keep_going: PagePredicate) -> Iterator[MediaSummary]:
    """Yield summaries page by page until the catalog ends or keep_going says stop.

    A page is fetched only once the previous one has been consumed. The page
    that fails keep_going is still yielded in full.

    Raises:
        ListingFailure: If a page cannot be fetched
    """
    cursor = None
    pages = 0
    while True:
        try:
            page, cursor = catalog.list_page(cursor)
        except ApiError as e:
            raise ListingFailure(f"Listing failed after {pages} pages: {e}") from e
        pages += 1

        yield from page

        if not cursor:
            logger.debug("Reached end of catalog after %d pages", pages)
            return
        if not keep_going(page):
            logger.debug("Stopping listing after %d pages", pages)
            return
