from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic

from streamchat.core.config import UPSTREAM_TIMEOUT, UPSTREAM_MAX_RETRIES
from streamchat.models.chat import ChatRequest
from streamchat.services.cache_policy import CacheControl, CachePolicy

logger = logging.getLogger("streamchat.upstream")


def build_client() -> AsyncAnthropic:
    """Long-lived upstream client; credentials come from ANTHROPIC_API_KEY."""
    logger.info("upstream client: timeout=%.0fs max_retries=%d", UPSTREAM_TIMEOUT, UPSTREAM_MAX_RETRIES)
    return AsyncAnthropic(timeout=UPSTREAM_TIMEOUT, max_retries=UPSTREAM_MAX_RETRIES)


def _text_block(text: str, cache_control: Optional[CacheControl]) -> Dict[str, Any]:
    block: Dict[str, Any] = {"type": "text", "text": text}
    if cache_control:
        block["cache_control"] = cache_control
    return block


def build_params(
    request: ChatRequest,
    *,
    max_tokens: int,
    cache_policy: CachePolicy,
    system_cache: Optional[CacheControl] = None,
) -> Dict[str, Any]:
    """Keyword arguments for ``client.messages.stream``."""
    messages: List[Dict[str, Any]] = [
        {"role": m.role, "content": [_text_block(m.content, cache_policy(request.messages, i))]}
        for i, m in enumerate(request.messages)
    ]
    params: Dict[str, Any] = {
        "model": request.model,
        "max_tokens": max_tokens,
        "messages": messages,
    }
    # An empty system prompt is left out entirely.
    if request.system:
        params["system"] = [_text_block(request.system, system_cache)]
    return params
