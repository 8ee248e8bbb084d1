"""
Reassembles an SSE byte stream into JSON events.

Network reads can split a ``data: {...}`` line anywhere, including inside a
multi-byte character, so bytes are decoded incrementally and only complete
lines are parsed. The trailing partial line waits in the buffer.
"""
from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger("streamchat.client.sse")

DATA_PREFIX = "data: "


def parse_line(line: str) -> Optional[Dict[str, Any]]:
    """JSON payload of a ``data: `` line, or None for anything else."""
    line = line.rstrip("\r")
    if not line.startswith(DATA_PREFIX):
        return None
    try:
        event = json.loads(line[len(DATA_PREFIX):])
    except json.JSONDecodeError:
        logger.debug("skipping malformed SSE line: %r", line[:80])
        return None
    return event if isinstance(event, dict) else None


class SSEDecoder:
    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes | str) -> List[Dict[str, Any]]:
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return [e for e in map(parse_line, lines) if e is not None]

    def flush(self) -> List[Dict[str, Any]]:
        """Best-effort parse of whatever is left once the body has ended."""
        rest = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        event = parse_line(rest)
        return [event] if event is not None else []


def iter_events(chunks: Iterable[bytes | str]) -> Iterator[Dict[str, Any]]:
    decoder = SSEDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()
