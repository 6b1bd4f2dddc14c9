"""HTTP interface over the local media store."""

import logging
import os
from dataclasses import asdict
from typing import Iterator

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from photo_mirror.config import Settings
from photo_mirror.database.db_manager import DatabaseManager
from photo_mirror.utils.image_utils import thumbnail_mime_type

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Build the read-only API serving stored media and thumbnails."""
    app = FastAPI(title="Photo Mirror", version="0.1.0")

    def get_db() -> Iterator[DatabaseManager]:
        # sqlite connections can't cross threads, so open one per request
        db = DatabaseManager(settings.db_path)
        try:
            db.init_database()
            yield db
        finally:
            db.close()

    @app.get("/")
    def index():
        path = os.path.join(settings.static_path, "index.html")
        if not os.path.isfile(path):
            raise HTTPException(status_code=404, detail="index.html not found")
        return FileResponse(path, media_type="text/html")

    @app.get("/api/media")
    def list_media(db: DatabaseManager = Depends(get_db)):
        return [asdict(media) for media in db.load_media()]

    @app.get("/thumb/{media_id}")
    def thumbnail(media_id: str, db: DatabaseManager = Depends(get_db)):
        payload = db.load_thumbnail(media_id)
        if payload is None:
            raise HTTPException(status_code=404, detail=f"Unknown media {media_id}")
        return Response(content=payload, media_type=thumbnail_mime_type(payload))

    if os.path.isdir(settings.static_path):
        app.mount("/static", StaticFiles(directory=settings.static_path), name="static")
    else:
        logger.info("Static directory %s not found; serving API only", settings.static_path)

    return app
