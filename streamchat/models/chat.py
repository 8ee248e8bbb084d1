# streamchat/models/chat.py
from __future__ import annotations
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Order is part of the API: GET /api/models returns it as-is.
MODELS = (
    "claude-opus-4-5-20250514",
    "claude-sonnet-4-20250514",
    "claude-haiku-3-5-20241022",
)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
MESSAGE_ROLES = (ROLE_USER, ROLE_ASSISTANT)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Message(_FrozenModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(_FrozenModel):
    model: str
    system: str = ""
    messages: List[Message] = Field(default_factory=list)


# ---------------- Wire events (server -> client) ----------------

class DeltaEvent(_FrozenModel):
    type: Literal["delta"] = "delta"
    text: str


class DoneEvent(_FrozenModel):
    type: Literal["done"] = "done"
    usage: Dict[str, Any] = Field(default_factory=dict)


class ErrorEvent(_FrozenModel):
    type: Literal["error"] = "error"
    error: str


StreamEvent = Union[DeltaEvent, DoneEvent, ErrorEvent]


def sse_frame(event: StreamEvent) -> str:
    """One Server-Sent-Events frame: ``data: <json>`` plus a blank line."""
    return f"data: {event.model_dump_json()}\n\n"


__all__ = [
    "MODELS", "ROLE_USER", "ROLE_ASSISTANT", "MESSAGE_ROLES",
    "Message", "ChatRequest", "DeltaEvent", "DoneEvent", "ErrorEvent",
    "StreamEvent", "sse_frame",
]
