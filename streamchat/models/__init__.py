# streamchat/models/__init__.py
from .chat import (  # noqa: F401
    MODELS, ROLE_USER, ROLE_ASSISTANT, MESSAGE_ROLES,
    Message, ChatRequest, DeltaEvent, DoneEvent, ErrorEvent, StreamEvent, sse_frame,
)
