"""Run models and errors for Photo Mirror."""

from dataclasses import dataclass
from enum import Enum


class SyncMode(str, Enum):
    """How far a sync run lists the remote catalog."""
    INCREMENTAL = "incremental"
    FULL = "full"


class SyncState(str, Enum):
    """Lifecycle of a single sync run."""
    IDLE = "idle"
    LOADING_SEEN_SET = "loading_seen_set"
    LISTING = "listing"
    COMMITTING = "committing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class SyncResult:
    """Outcome of a successful sync run."""
    mode: SyncMode
    added: int = 0
    batches: int = 0


class PhotoMirrorError(Exception):
    """Base exception for Photo Mirror operations."""


class AuthenticationError(PhotoMirrorError):
    """Raised when authentication fails."""


class ApiError(PhotoMirrorError):
    """Raised when API calls fail."""


class SyncError(PhotoMirrorError):
    """Base exception for failures that abort a sync run."""


class SeenSetLoadFailure(SyncError):
    """Raised when stored identifiers cannot be read before syncing."""


class ListingFailure(SyncError):
    """Raised when a page of the remote catalog cannot be listed."""


class ResolutionFailure(SyncError):
    """Raised when a thumbnail fetch fails within a batch."""

    def __init__(self, media_id: str, cause: BaseException):
        super().__init__(f"Failed to fetch thumbnail for {media_id}: {cause}")
        self.media_id = media_id
        self.cause = cause


class CommitFailure(SyncError):
    """Raised when a batch cannot be written to the local store."""
