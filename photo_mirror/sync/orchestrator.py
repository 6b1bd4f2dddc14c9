"""Sync runs tying listing, resolution and commits together."""

import logging
from typing import FrozenSet, List

from photo_mirror.config import Settings
from photo_mirror.database.db_manager import DatabaseError, DatabaseManager
from photo_mirror.database.models import MediaSummary
from photo_mirror.models import (
    SeenSetLoadFailure,
    SyncError,
    SyncMode,
    SyncResult,
    SyncState,
)
from photo_mirror.sync.committer import BatchCommitter, chunked
from photo_mirror.sync.eligibility import filter_eligible
from photo_mirror.sync.listing import Catalog, list_candidates, predicate_for
from photo_mirror.sync.resolver import resolve

logger = logging.getLogger(__name__)


def load_seen_set(db: DatabaseManager) -> FrozenSet[str]:
    """Read the identifiers already in the local store.

    Raises:
        SeenSetLoadFailure: If the store cannot be read
    """
    try:
        return frozenset(db.load_media_ids())
    except DatabaseError as e:
        raise SeenSetLoadFailure(f"Failed to load stored media ids: {e}") from e


class MediaSyncer:
    """Runs incremental or full syncs from a catalog into the local store."""

    def __init__(self, catalog: Catalog, db: DatabaseManager, settings: Settings):
        self.catalog = catalog
        self.db = db
        self.settings = settings
        self.state = SyncState.IDLE

    def _enter(self, state: SyncState) -> None:
        logger.debug("Sync state %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, mode: SyncMode) -> SyncResult:
        """Run one sync.

        Batches committed before a failure stay committed; re-running picks up
        the remainder.

        Raises:
            SyncError: On any sync failure. Any exception leaves the state ABORTED.
        """
        try:
            return self._run(mode)
        except SyncError as e:
            self._enter(SyncState.ABORTED)
            logger.error("Sync aborted: %s", e)
            raise
        except Exception:
            self._enter(SyncState.ABORTED)
            logger.exception("Sync aborted by unexpected error")
            raise

    def _run(self, mode: SyncMode) -> SyncResult:
        self._enter(SyncState.LOADING_SEEN_SET)
        seen = load_seen_set(self.db)
        logger.debug("%d items already stored", len(seen))

        self._enter(SyncState.LISTING)
        candidates = list_candidates(self.catalog, predicate_for(mode, seen))
        todo: List[MediaSummary] = list(filter_eligible(candidates, seen))
        logger.info("%d new items", len(todo))
        if todo:
            logger.debug("new items: %s", [m.id for m in todo])

        self._enter(SyncState.COMMITTING)
        result = SyncResult(mode=mode)
        committer = BatchCommitter(self.db)
        for batch in chunked(todo, self.settings.batch_size):
            logger.info("Storing batch of %d", len(batch))
            rows = resolve(self.catalog.fetch_detail, batch, self.settings.concurrency_limit)
            committer.commit(rows)
            result.batches += 1
            result.added = committer.committed

        self._enter(SyncState.DONE)
        return result
