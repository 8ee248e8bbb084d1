from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from streamchat.api.deps import get_relay
from streamchat.services.relay import ChatRelay
from streamchat.services.validation import ChatRequestError, validate_chat_request

logger = logging.getLogger("streamchat.api.chat")
router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/chat")
async def chat(request: Request, relay: ChatRelay = Depends(get_relay)):
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        logger.info("POST /api/chat rejected: invalid JSON")
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    try:
        chat_request = validate_chat_request(body)
    except ChatRequestError as e:
        logger.info("POST /api/chat rejected: %s", e)
        return JSONResponse({"error": str(e)}, status_code=400)

    return StreamingResponse(
        relay.stream(chat_request, is_disconnected=request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
