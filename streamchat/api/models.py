from __future__ import annotations

import logging

from fastapi import APIRouter

from streamchat.models.chat import MODELS

logger = logging.getLogger("streamchat.api.models")
router = APIRouter()


@router.get("/models")
def list_models():
    logger.debug("GET /api/models -> %d", len(MODELS))
    return {"models": list(MODELS)}
