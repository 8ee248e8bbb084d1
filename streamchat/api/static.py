from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse

logger = logging.getLogger("streamchat.api.static")
router = APIRouter()

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
}


def content_type_for(path: str) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), "application/octet-stream")


def resolve_static(static_dir: Path, url_path: str) -> Path | None:
    """Map a URL path to a file under static_dir; None if missing or outside it."""
    rel = url_path.lstrip("/") or "index.html"
    root = static_dir.resolve()
    try:
        candidate = (root / rel).resolve()
        if root != candidate and root not in candidate.parents:
            return None
        if not candidate.is_file():
            return None
    except (OSError, ValueError):
        # NUL bytes, over-long names
        return None
    return candidate


@router.get("/{path:path}", include_in_schema=False)
def serve_static(path: str, request: Request):
    file_path = resolve_static(request.app.state.static_dir, path)
    if file_path is None:
        logger.info("GET /%s -> 404", path)
        return PlainTextResponse("Not Found", status_code=404)
    return FileResponse(file_path, media_type=content_type_for(file_path.name))
