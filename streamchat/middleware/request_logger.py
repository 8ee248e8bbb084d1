# streamchat/middleware/request_logger.py
import logging
import time

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("streamchat.http")

BODY_LOG_LIMIT = 512


class RequestLoggerMiddleware:
    """
    Logs every HTTP request with:
      - method, path, status, duration
      - X-Req-Id (from client)
      - request body at DEBUG level (truncated)

    The body is read up front and replayed to the app on its first receive();
    later receive() calls go to the server so disconnects are still seen.
    For streaming responses the duration covers the whole stream.
    """
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        start = time.time()
        body_bytes = await request.body()
        replayed = False

        async def receive_wrapper() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body_bytes, "more_body": False}
            return await receive()

        status = 500

        async def send_wrapper(message: Message):
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        rid = request.headers.get("x-req-id", "-")
        path = request.url.path
        if body_bytes and logger.isEnabledFor(logging.DEBUG):
            logger.debug("[HTTP >] rid=%s %s %s body=%s", rid, request.method, path,
                         body_bytes[:BODY_LOG_LIMIT].decode("utf-8", "ignore"))

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        finally:
            dur_ms = (time.time() - start) * 1000
            logger.info("[HTTP <] rid=%s %s %s %d in %.1fms", rid, request.method, path, status, dur_ms)
