"""Database operations for Photo Mirror."""

import logging
import sqlite3
from typing import Any, List, Optional, Sequence, Set, Tuple

from photo_mirror.database.models import MediaKind, MediaRow, MediaSummary, Readiness

logger = logging.getLogger(__name__)

MEDIA_COLUMNS = (
    "id",
    "captured_at",
    "camera_model",
    "file_size",
    "ready",
    "resolution",
    "kind",
    "width",
    "height",
    "duration",
)


class DatabaseError(Exception):
    """Database error exception."""


class DatabaseManager:
    """Manages the local media store."""

    def __init__(self, db_path: str = "photos.db"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self.cursor: Optional[sqlite3.Cursor] = None

    def _execute(self, sql: str, params: Tuple[Any, ...] = None) -> None:
        """Execute SQL on the current cursor, connecting first if needed.

        Args:
            sql: SQL query to execute
            params: Query parameters
        """
        if not self.conn or not self.cursor:
            self.connect()

        if params:
            self.cursor.execute(sql, params)
        else:
            self.cursor.execute(sql)

    def connect(self) -> None:
        """Connect to the database."""
        try:
            # One owner at a time, but the server may open and close on different threads
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.cursor = self.conn.cursor()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
        self.conn = None
        self.cursor = None

    def init_database(self) -> None:
        """Create the media table and its indices if they don't exist."""
        try:
            self._execute(
                """
                CREATE TABLE IF NOT EXISTS media (
                    id TEXT PRIMARY KEY,
                    captured_at TEXT NOT NULL,
                    camera_model TEXT NOT NULL,
                    file_size INTEGER NOT NULL,
                    ready TEXT NOT NULL,
                    resolution TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    width INTEGER,
                    height INTEGER,
                    duration REAL,
                    thumbnail BLOB NOT NULL
                )
            """
            )
            self._execute(
                """
                CREATE INDEX IF NOT EXISTS media_captured_at_idx
                ON media(captured_at)
            """
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to initialize database: {e}") from e

    def load_media_ids(self) -> Set[str]:
        """Return the identifiers of every stored media item."""
        try:
            self._execute("SELECT id FROM media")
            return {row[0] for row in self.cursor.fetchall()}
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to load media ids: {e}") from e

    def store_media(self, rows: Sequence[MediaRow]) -> None:
        """Store a batch of media rows in a single transaction.

        Either every row of the batch is written or none is.

        Args:
            rows: Media rows to store
        """
        if not self.conn or not self.cursor:
            self.connect()

        placeholders = ", ".join("?" for _ in range(len(MEDIA_COLUMNS) + 1))
        sql = f"""
            INSERT OR REPLACE INTO media ({", ".join(MEDIA_COLUMNS)}, thumbnail)
            VALUES ({placeholders})
        """
        try:
            self.cursor.executemany(sql, [self._row_params(row) for row in rows])
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise DatabaseError(f"Failed to store media: {e}") from e
        logger.debug("Stored %d media rows", len(rows))

    @staticmethod
    def _row_params(row: MediaRow) -> Tuple[Any, ...]:
        media = row.media
        return (
            media.id,
            media.captured_at,
            media.camera_model,
            media.file_size,
            media.ready.value,
            media.resolution,
            media.kind.value,
            media.width,
            media.height,
            media.duration,
            sqlite3.Binary(row.thumbnail),
        )

    def load_media(self, limit: Optional[int] = None) -> List[MediaSummary]:
        """Load stored media summaries, newest capture first.

        Args:
            limit: Maximum number of summaries to return

        Returns:
            List of media summaries
        """
        sql = f"SELECT {', '.join(MEDIA_COLUMNS)} FROM media ORDER BY captured_at DESC, id"
        try:
            if limit is not None:
                self._execute(f"{sql} LIMIT ?", (limit,))
            else:
                self._execute(sql)
            return [self._summary_from_row(row) for row in self.cursor.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to load media: {e}") from e

    @staticmethod
    def _summary_from_row(row: Tuple) -> MediaSummary:
        return MediaSummary(
            id=row[0],
            captured_at=row[1],
            camera_model=row[2],
            file_size=row[3],
            ready=Readiness(row[4]),
            resolution=row[5],
            kind=MediaKind(row[6]),
            width=row[7],
            height=row[8],
            duration=row[9],
        )

    def load_thumbnail(self, media_id: str) -> Optional[bytes]:
        """Get the thumbnail of a stored media item.

        Args:
            media_id: Media ID

        Returns:
            Thumbnail bytes or None if not found
        """
        try:
            self._execute("SELECT thumbnail FROM media WHERE id = ?", (media_id,))
            row = self.cursor.fetchone()
            return bytes(row[0]) if row else None
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to load thumbnail: {e}") from e

    def count_media(self) -> int:
        """Count stored media items."""
        try:
            self._execute("SELECT COUNT(*) FROM media")
            return self.cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to count media: {e}") from e

    def list_tables(self) -> List[str]:
        """List all tables in the database."""
        try:
            self._execute("SELECT name FROM sqlite_master WHERE type='table'")
            return [row[0] for row in self.cursor.fetchall()]
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to list tables: {e}") from e
