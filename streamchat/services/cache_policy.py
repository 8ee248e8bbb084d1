"""
Prompt-caching strategies.

A policy is a callable ``(messages, index) -> cache_control | None`` deciding
whether the content block of ``messages[index]`` gets an upstream cache
directive. The relay only calls the policy; it never inspects conversation
shape itself.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from streamchat.models.chat import Message

CacheControl = Dict[str, str]
CachePolicy = Callable[[Sequence[Message], int], Optional[CacheControl]]


def ephemeral(ttl: str) -> CacheControl:
    return {"type": "ephemeral", "ttl": ttl}


def previous_turn(ttl: str = "1h") -> CachePolicy:
    """Mark the message just before the current turn, so the whole prefix is cached."""
    def policy(messages: Sequence[Message], index: int) -> Optional[CacheControl]:
        if index == len(messages) - 2:
            return ephemeral(ttl)
        return None
    return policy


def no_cache(ttl: str = "1h") -> CachePolicy:
    def policy(messages: Sequence[Message], index: int) -> Optional[CacheControl]:
        return None
    return policy


POLICIES: Dict[str, Callable[[str], CachePolicy]] = {
    "previous_turn": previous_turn,
    "none": no_cache,
}


def get_policy(name: str, ttl: str = "1h") -> CachePolicy:
    try:
        factory = POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown cache policy {name!r} (expected one of: {', '.join(POLICIES)})")
    return factory(ttl)
