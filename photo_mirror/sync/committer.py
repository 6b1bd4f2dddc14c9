"""Batch writes to the local store."""

import logging
from typing import Iterator, List, Sequence, TypeVar

from photo_mirror.database.db_manager import DatabaseError, DatabaseManager
from photo_mirror.database.models import MediaRow
from photo_mirror.models import CommitFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 100


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Split items into consecutive lists of `size`; the last may be shorter."""
    if size < 1:
        raise ValueError("size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class BatchCommitter:
    """Writes resolved batches to the local store one at a time."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.committed = 0

    def commit(self, rows: Sequence[MediaRow]) -> None:
        """Store a batch as one transaction.

        Raises:
            CommitFailure: If the store rejects the batch
        """
        try:
            self.db.store_media(rows)
        except DatabaseError as e:
            raise CommitFailure(f"Failed to commit batch of {len(rows)}: {e}") from e
        self.committed += len(rows)
