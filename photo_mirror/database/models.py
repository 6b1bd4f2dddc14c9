"""Data models for database operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Readiness(str, Enum):
    """Processing status reported by the remote service."""
    READY = "READY"
    PROCESSING = "PROCESSING"
    FAILED = "FAILED"
    UNSPECIFIED = "UNSPECIFIED"


class MediaKind(str, Enum):
    """Media kind enum."""
    PHOTO = "photo"
    VIDEO = "video"
    OTHER = "other"


@dataclass
class MediaSummary:
    """Summary of a remote media item as listed by the catalog."""
    id: str
    captured_at: str
    camera_model: str
    file_size: int
    ready: Readiness
    resolution: str
    kind: MediaKind
    width: int
    height: int
    duration: Optional[float] = None


@dataclass(frozen=True)
class MediaRow:
    """A media summary together with its thumbnail payload."""
    media: MediaSummary
    thumbnail: bytes

    @property
    def id(self) -> str:
        return self.media.id
