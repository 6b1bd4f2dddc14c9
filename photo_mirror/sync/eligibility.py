"""Eligibility rules for syncing media."""

from typing import AbstractSet, Iterable, Iterator

from photo_mirror.database.models import MediaSummary, Readiness


def is_eligible(item: MediaSummary, seen: AbstractSet[str]) -> bool:
    """An item is synced when it is not stored yet and fully processed remotely."""
    return item.id not in seen and item.ready is Readiness.READY


def filter_eligible(
    items: Iterable[MediaSummary], seen: AbstractSet[str]
) -> Iterator[MediaSummary]:
    """Lazily drop stored and not-yet-ready items."""
    return (item for item in items if is_eligible(item, seen))
