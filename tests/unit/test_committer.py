"""Unit tests for batch commits."""

from unittest.mock import MagicMock

import pytest

from photo_mirror.database.db_manager import DatabaseError
from photo_mirror.database.models import MediaRow
from photo_mirror.models import CommitFailure
from photo_mirror.sync.committer import BatchCommitter, chunked


def test_chunked_sizes():
    batches = list(chunked(list(range(250)), 100))

    assert [len(b) for b in batches] == [100, 100, 50]
    assert batches[0][0] == 0 and batches[-1][-1] == 249


def test_chunked_empty():
    assert list(chunked([], 100)) == []


def test_chunked_rejects_zero():
    with pytest.raises(ValueError):
        list(chunked([1], 0))


def test_commit_counts_rows(db_manager, make_media):
    committer = BatchCommitter(db_manager)

    committer.commit([MediaRow(make_media("C"), b"c"), MediaRow(make_media("D"), b"d")])

    assert committer.committed == 2
    assert db_manager.load_media_ids() == {"C", "D"}


def test_commit_failure(make_media):
    db = MagicMock()
    db.store_media.side_effect = DatabaseError("disk full")
    committer = BatchCommitter(db)

    with pytest.raises(CommitFailure):
        committer.commit([MediaRow(make_media("C"), b"c")])

    assert committer.committed == 0
