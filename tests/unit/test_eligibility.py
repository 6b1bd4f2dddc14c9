"""Unit tests for eligibility rules."""

from photo_mirror.database.models import Readiness
from photo_mirror.sync.eligibility import filter_eligible, is_eligible


def test_unseen_ready_item_is_eligible(make_media):
    assert is_eligible(make_media("C"), frozenset({"A", "B"}))


def test_seen_item_is_not_eligible(make_media):
    assert not is_eligible(make_media("A"), frozenset({"A"}))


def test_processing_item_is_not_eligible(make_media):
    """Unseen items still being processed are skipped."""
    for status in (Readiness.PROCESSING, Readiness.FAILED, Readiness.UNSPECIFIED):
        assert not is_eligible(make_media("C", ready=status), frozenset())


def test_filter_eligible_keeps_order(make_media):
    items = [
        make_media("A"),
        make_media("B"),
        make_media("C"),
        make_media("P", ready=Readiness.PROCESSING),
        make_media("D"),
    ]

    result = filter_eligible(items, frozenset({"A", "B"}))

    assert [m.id for m in result] == ["C", "D"]
