from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from fastapi import APIRouter, Request

logger = logging.getLogger("streamchat.api.health")
router = APIRouter()


@router.get("/ping")
def ping():
    return {"ok": True}


def _route_entries(routes: Iterable[Any], prefix: str = "") -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for r in routes:
        path = getattr(r, "path", None)
        methods = getattr(r, "methods", None)
        if path and methods:
            out.append({"path": prefix + path, "methods": sorted(methods), "name": getattr(r, "name", None)})
    return out


@router.get("/routes")
def list_routes(request: Request):
    """
    Registered routes, to check nothing is shadowed by the static catch-all.
    Routers mounted by create_app are walked with their prefixes, since newer
    FastAPI keeps included routers as opaque entries in app.routes.
    """
    app = request.app
    entries = _route_entries(app.routes)
    for prefix, sub in getattr(app.state, "routers", ()):
        entries.extend(_route_entries(sub.routes, prefix))

    seen = set()
    out: List[Dict[str, Any]] = []
    for e in entries:
        key = (e["path"], tuple(e["methods"]))
        if key not in seen:
            seen.add(key)
            out.append(e)
    out.sort(key=lambda x: (x["path"], ",".join(x["methods"])))
    logger.info("GET /api/health/routes count=%d", len(out))
    return {"ok": True, "routes": out}
