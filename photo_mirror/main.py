"""Main module for Photo Mirror."""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from tabulate import tabulate

from photo_mirror.catalog import GooglePhotosCatalog
from photo_mirror.config import Settings, load_settings
from photo_mirror.database.db_manager import DatabaseError, DatabaseManager
from photo_mirror.models import (
    AuthenticationError,
    SeenSetLoadFailure,
    SyncError,
    SyncMode,
    SyncResult,
)
from photo_mirror.server import create_app
from photo_mirror.sync import MediaSyncer
from photo_mirror.utils.auth import build_service, get_credentials, login, refresh_credentials

logger = logging.getLogger(__name__)


class PhotoMirror:
    """Runs the mirror's commands against one set of settings."""

    def __init__(self, settings: Settings):
        """Initialize the mirror."""
        self.settings = settings
        self.db = DatabaseManager(settings.db_path)

    def authenticate(self) -> None:
        """Log in through the browser and store a fresh token."""
        login(self.settings.token_path, self.settings.credentials_path)
        logger.info("Stored token in %s", self.settings.token_path)

    def reauthenticate(self) -> None:
        """Refresh the stored token."""
        refresh_credentials(self.settings.token_path)

    def build_catalog(self) -> GooglePhotosCatalog:
        """Build a catalog client from the stored token."""
        try:
            creds = get_credentials(self.settings.token_path, self.settings.credentials_path)
        except FileNotFoundError as e:
            raise AuthenticationError(str(e)) from e
        return GooglePhotosCatalog(
            build_service(creds),
            creds,
            page_size=self.settings.page_size,
            thumbnail_size=self.settings.thumbnail_size,
        )

    def sync(self, mode: SyncMode) -> SyncResult:
        """Mirror new remote media into the local store."""
        try:
            self.db.init_database()
        except DatabaseError as e:
            raise SeenSetLoadFailure(str(e)) from e
        syncer = MediaSyncer(self.build_catalog(), self.db, self.settings)
        result = syncer.run(mode)
        logger.info(
            "%s sync complete: %d new items in %d batches",
            mode.value.capitalize(),
            result.added,
            result.batches,
        )
        return result

    def print_media(self, limit: Optional[int] = None) -> None:
        """Print stored media as a table."""
        self.db.init_database()
        rows = [
            [
                m.id,
                m.captured_at,
                m.kind.value,
                m.camera_model,
                m.resolution,
                f"{m.width}x{m.height}",
                f"{m.duration:.1f}s" if m.duration is not None else "",
            ]
            for m in self.db.load_media(limit)
        ]
        if not rows:
            print("No media stored yet")
            return

        print(
            tabulate(
                rows,
                headers=["ID", "Captured", "Kind", "Camera", "Resolution", "Dimensions", "Duration"],
                tablefmt="psql",
            )
        )
        print(f"\nTotal media stored: {self.db.count_media()}")

    def serve(self) -> None:
        """Serve the local store over HTTP."""
        uvicorn.run(create_app(self.settings), host=self.settings.host, port=self.settings.port)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Photo Mirror: cloud photo library mirror")

    # Global arguments
    parser.add_argument("--config", type=str, help="JSON config file")
    parser.add_argument("--db-path", type=str, help="Database path (default: photos.db)")
    parser.add_argument("--static", type=str, help="Static asset path (default: static)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands", required=True)

    subparsers.add_parser("auth", help="Log in and store a token")
    subparsers.add_parser("reauth", help="Refresh the stored token")
    subparsers.add_parser("sync", help="Fetch media added since the last sync")
    subparsers.add_parser("fullsync", help="List the whole library and fetch anything missing")

    serve_parser = subparsers.add_parser("serve", help="Serve the local store over HTTP")
    serve_parser.add_argument("--host", type=str, help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, help="Port (default: 8008)")

    list_parser = subparsers.add_parser("list", help="Print stored media")
    list_parser.add_argument("--limit", type=int, help="Maximum number of rows to print")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the Photo Mirror CLI."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(
            args.config,
            db_path=args.db_path,
            static_path=args.static,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    mirror = PhotoMirror(settings)
    try:
        if args.command == "auth":
            mirror.authenticate()
        elif args.command == "reauth":
            mirror.reauthenticate()
        elif args.command == "sync":
            mirror.sync(SyncMode.INCREMENTAL)
        elif args.command == "fullsync":
            mirror.sync(SyncMode.FULL)
        elif args.command == "serve":
            mirror.serve()
        elif args.command == "list":
            mirror.print_media(args.limit)
    except (SyncError, AuthenticationError, DatabaseError, FileNotFoundError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        mirror.db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
