"""Fake upstream with the same surface the relay uses from the SDK client."""
from types import SimpleNamespace
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from streamchat.main import create_app


class FakeUsage(BaseModel):
    input_tokens: int = 12
    output_tokens: int = 7
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None


def text_delta(text):
    return SimpleNamespace(type="content_block_delta", index=0,
                           delta=SimpleNamespace(type="text_delta", text=text))


def upstream_events(fragments):
    """A realistic event sequence around the given text fragments."""
    events = [
        SimpleNamespace(type="message_start"),
        SimpleNamespace(type="content_block_start", index=0),
    ]
    for f in fragments:
        events.append(text_delta(f))
        # the SDK also emits a convenience "text" event per delta
        events.append(SimpleNamespace(type="text", text=f, snapshot=""))
    events += [
        SimpleNamespace(type="content_block_delta", index=0,
                        delta=SimpleNamespace(type="input_json_delta", partial_json="{}")),
        SimpleNamespace(type="content_block_stop", index=0),
        SimpleNamespace(type="message_delta"),
        SimpleNamespace(type="message_stop"),
    ]
    return events


class FakeStream:
    def __init__(self, events, fail_after_deltas=None, error=None, open_error=None, usage=None):
        self.events = events
        self.fail_after_deltas = fail_after_deltas
        self.error = error
        self.open_error = open_error
        self.usage = usage or FakeUsage()
        self.closed = 0
        self.consumed = 0

    async def __aenter__(self):
        if self.open_error is not None:
            raise self.open_error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed += 1
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        deltas = 0
        for event in self.events:
            if event.type == "content_block_delta" and event.delta.type == "text_delta":
                if self.fail_after_deltas is not None and deltas == self.fail_after_deltas:
                    raise self.error
                deltas += 1
            self.consumed += 1
            yield event
        if self.fail_after_deltas is not None and deltas <= self.fail_after_deltas:
            raise self.error

    async def get_final_message(self):
        return SimpleNamespace(usage=self.usage)


class FakeUpstream:
    def __init__(self, fragments=("Hello", ", ", "world", "!"), **stream_kwargs):
        self.fragments = list(fragments)
        self.stream_kwargs = stream_kwargs
        self.calls = []
        self.streams = []
        self.messages = self

    def stream(self, **params):
        self.calls.append(params)
        s = FakeStream(upstream_events(self.fragments), **self.stream_kwargs)
        self.streams.append(s)
        return s


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(upstream):
    return TestClient(create_app(upstream=upstream))
