"""Google Photos catalog client."""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from photo_mirror.database.models import MediaKind, MediaSummary, Readiness
from photo_mirror.models import ApiError

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (HttpError, httplib2.HttpLib2Error, GoogleAuthError, OSError)

VIDEO_RESOLUTIONS = (
    (2160, "4K"),
    (1520, "2.7K"),
    (1440, "1440p"),
    (1080, "1080p"),
    (720, "720p"),
)


def describe_resolution(kind: MediaKind, width: int, height: int) -> str:
    """Build a short resolution descriptor such as "1080p" or "12MP"."""
    if not width or not height:
        return ""
    if kind == MediaKind.VIDEO:
        short_side = min(width, height)
        for threshold, label in VIDEO_RESOLUTIONS:
            if short_side >= threshold:
                return label
        return "SD"
    return f"{round(width * height / 1_000_000)}MP"


def summary_from_item(item: Dict[str, Any]) -> MediaSummary:
    """Convert a Google Photos media item into a MediaSummary."""
    metadata = item.get("mediaMetadata", {})
    width = int(metadata.get("width", 0))
    height = int(metadata.get("height", 0))

    if "video" in metadata:
        kind = MediaKind.VIDEO
        details = metadata["video"]
        try:
            ready = Readiness(details.get("status", Readiness.UNSPECIFIED.value))
        except ValueError:
            ready = Readiness.UNSPECIFIED
    elif "photo" in metadata:
        kind = MediaKind.PHOTO
        details = metadata["photo"]
        # Photos carry no processing status
        ready = Readiness.READY
    else:
        kind = MediaKind.OTHER
        details = {}
        ready = Readiness.READY

    camera = " ".join(
        part for part in (details.get("cameraMake"), details.get("cameraModel")) if part
    )

    return MediaSummary(
        id=item["id"],
        captured_at=metadata.get("creationTime", ""),
        camera_model=camera,
        file_size=int(item.get("fileSize", 0)),
        ready=ready,
        resolution=describe_resolution(kind, width, height),
        kind=kind,
        width=width,
        height=height,
        duration=float(item["durationSeconds"]) if "durationSeconds" in item else None,
    )


class GooglePhotosCatalog:
    """Lists and fetches media from the Google Photos Library API.

    The discovery-built service is shared, but every thread executes its
    requests on its own authorized http object since httplib2 is not
    thread-safe.
    """

    def __init__(
        self,
        service: Any,
        credentials: Any,
        page_size: int = 100,
        thumbnail_size: Tuple[int, int] = (256, 256),
        http_factory: Optional[Callable[[], Any]] = None,
    ):
        self.service = service
        self.credentials = credentials
        self.page_size = page_size
        self.thumbnail_size = thumbnail_size
        self._http_factory = http_factory or self._authorized_http
        self._local = threading.local()

    def _authorized_http(self) -> Any:
        return google_auth_httplib2.AuthorizedHttp(self.credentials, http=httplib2.Http())

    def _http(self) -> Any:
        http = getattr(self._local, "http", None)
        if http is None:
            http = self._local.http = self._http_factory()
        return http

    def list_page(self, cursor: Optional[str] = None) -> Tuple[List[MediaSummary], Optional[str]]:
        """Fetch one page of the library.

        Args:
            cursor: Page token from the previous page, None for the first page

        Returns:
            Tuple of the page's summaries and the next page token (None at the end)

        Raises:
            ApiError: If the page cannot be fetched
        """
        try:
            response = (
                self.service.mediaItems()
                .list(pageSize=self.page_size, pageToken=cursor)
                .execute(http=self._http())
            )
        except TRANSPORT_ERRORS as e:
            raise ApiError(f"Failed to list media: {e}") from e

        try:
            items = [summary_from_item(item) for item in response.get("mediaItems", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f"Malformed media item in listing: {e}") from e
        logger.debug("Listed page with %d items", len(items))
        return items, response.get("nextPageToken")

    def fetch_detail(self, media_id: str) -> bytes:
        """Fetch the thumbnail for a media item.

        Raises:
            ApiError: If the item or its thumbnail cannot be fetched
        """
        http = self._http()
        try:
            item = self.service.mediaItems().get(mediaItemId=media_id).execute(http=http)
            base_url = item.get("baseUrl")
            if not base_url:
                raise ApiError(f"No baseUrl for item {media_id}")

            width, height = self.thumbnail_size
            response, content = http.request(f"{base_url}=w{width}-h{height}")
        except TRANSPORT_ERRORS as e:
            raise ApiError(f"Failed to fetch {media_id}: {e}") from e

        if response.status != 200:
            raise ApiError(f"Thumbnail download failed for {media_id}: {response.status}")
        return content
