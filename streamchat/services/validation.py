from __future__ import annotations

from typing import Any

from streamchat.models.chat import MODELS, MESSAGE_ROLES, ChatRequest, Message


class ChatRequestError(ValueError):
    """The first constraint a chat request body violates."""


def validate_chat_request(body: Any) -> ChatRequest:
    """
    Check a parsed JSON body and return a normalized ChatRequest.

    Checks run in a fixed order and stop at the first failure:
    body shape, model, system, messages, then each message in turn.
    A missing ``system`` becomes "".
    """
    if not isinstance(body, dict):
        raise ChatRequestError("Request body must be a JSON object")

    model = body.get("model")
    if not isinstance(model, str) or model not in MODELS:
        raise ChatRequestError(f"model must be one of: {', '.join(MODELS)}")

    system = body.get("system", "")
    if not isinstance(system, str):
        raise ChatRequestError("system must be a string")

    messages = body.get("messages")
    if not isinstance(messages, list):
        raise ChatRequestError("messages must be an array")

    out = []
    for i, m in enumerate(messages):
        if not isinstance(m, dict):
            raise ChatRequestError(f"messages[{i}] must be an object")
        if m.get("role") not in MESSAGE_ROLES:
            raise ChatRequestError(f"messages[{i}].role must be 'user' or 'assistant'")
        if not isinstance(m.get("content"), str):
            raise ChatRequestError(f"messages[{i}].content must be a string")
        out.append(Message(role=m["role"], content=m["content"]))

    return ChatRequest(model=model, system=system, messages=out)
