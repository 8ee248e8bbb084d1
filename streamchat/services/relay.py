from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from streamchat.models.chat import ChatRequest, DeltaEvent, DoneEvent, ErrorEvent, sse_frame
from streamchat.services.cache_policy import CacheControl, CachePolicy, previous_turn
from streamchat.services.upstream import build_params

logger = logging.getLogger("streamchat.relay")

DisconnectCheck = Callable[[], Awaitable[bool]]


def _error_message(exc: BaseException) -> str:
    # SDK errors carry a clean `message`; str() of them repeats the body.
    msg = getattr(exc, "message", None) or str(exc)
    return msg if isinstance(msg, str) and msg else "Unknown error"


def _usage_dict(usage: Any) -> Dict[str, Any]:
    if usage is None:
        return {}
    return usage.model_dump(mode="json", exclude_none=True)


class ChatRelay:
    """
    Drives one upstream streaming call per request and re-emits it as SSE frames.

    The upstream client is injected so tests can pass a fake with the same
    ``messages.stream(**params)`` surface.
    """

    def __init__(
        self,
        client: Any,
        *,
        max_tokens: int = 8192,
        cache_policy: Optional[CachePolicy] = None,
        system_cache: Optional[CacheControl] = None,
    ):
        self.client = client
        self.max_tokens = max_tokens
        self.cache_policy = cache_policy or previous_turn()
        self.system_cache = system_cache

    def params_for(self, request: ChatRequest) -> Dict[str, Any]:
        return build_params(
            request,
            max_tokens=self.max_tokens,
            cache_policy=self.cache_policy,
            system_cache=self.system_cache,
        )

    async def stream(
        self,
        request: ChatRequest,
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> AsyncIterator[str]:
        """
        Yield ``data: <json>\\n\\n`` frames: zero or more deltas, then exactly
        one ``done`` or ``error``. Stops quietly if the caller disconnects.
        """
        started = time.time()
        deltas = 0
        outcome = "cancelled"
        logger.info("relay open model=%s messages=%d", request.model, len(request.messages))
        try:
            async with self.client.messages.stream(**self.params_for(request)) as upstream:
                async for event in upstream:
                    if is_disconnected is not None and await is_disconnected():
                        outcome = "disconnected"
                        return
                    if event.type == "content_block_delta" and event.delta.type == "text_delta":
                        deltas += 1
                        yield sse_frame(DeltaEvent(text=event.delta.text))
                final = await upstream.get_final_message()
            outcome = "done"
            yield sse_frame(DoneEvent(usage=_usage_dict(final.usage)))
        except Exception as e:
            outcome = "error"
            logger.warning("relay upstream error model=%s after %d deltas: %s", request.model, deltas, e)
            yield sse_frame(ErrorEvent(error=_error_message(e)))
        finally:
            logger.info(
                "relay close model=%s outcome=%s deltas=%d in %.1fms",
                request.model, outcome, deltas, (time.time() - started) * 1000,
            )
