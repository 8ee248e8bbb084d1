from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamchat import __version__
from streamchat.api import chat, health, models, static
from streamchat.core.config import (
    CACHE_POLICY, CACHE_TTL, CORS_ORIGINS, LOG_LEVEL, MAX_TOKENS, STATIC_DIR,
)
from streamchat.middleware.request_logger import RequestLoggerMiddleware
from streamchat.services import upstream as upstream_service
from streamchat.services.cache_policy import ephemeral, get_policy
from streamchat.services.relay import ChatRelay

# ---- Logging config ---------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s",
)
logger = logging.getLogger("streamchat.main")


def create_app(upstream: Optional[Any] = None, static_dir: Optional[Path] = None) -> FastAPI:
    """
    Build the application. `upstream` is the completion API client; when omitted
    a real one is constructed here and closed on shutdown.
    """
    owns_upstream = upstream is None
    client = upstream_service.build_client() if owns_upstream else upstream

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting streamchat %s: cache_policy=%s ttl=%s max_tokens=%d static=%s",
            __version__, CACHE_POLICY, CACHE_TTL, MAX_TOKENS, app.state.static_dir,
        )
        yield
        if owns_upstream:
            await client.close()
            logger.info("Upstream client closed.")

    app = FastAPI(title="streamchat", version=__version__, lifespan=lifespan)
    app.add_middleware(RequestLoggerMiddleware)

    # ---- CORS ---------------------------------------------------------------
    if CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type", "X-Req-Id"],
        )

    app.state.relay = ChatRelay(
        client,
        max_tokens=MAX_TOKENS,
        cache_policy=get_policy(CACHE_POLICY, CACHE_TTL),
        system_cache=None if CACHE_POLICY == "none" else ephemeral(CACHE_TTL),
    )
    app.state.static_dir = static_dir or STATIC_DIR

    # ---- Routers ------------------------------------------------------------
    # Catch-all static router must stay last
    app.state.routers = []
    for sub, prefix, tag in (
        (chat.router,   "/api",        "Chat"),
        (models.router, "/api",        "Models"),
        (health.router, "/api/health", "Health"),
        (static.router, "",            "Static"),
    ):
        app.include_router(sub, prefix=prefix, tags=[tag])
        app.state.routers.append((prefix, sub))

    return app

