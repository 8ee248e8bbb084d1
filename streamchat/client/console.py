"""Terminal chat client: keeps the transcript and streams replies from /api/chat."""
from __future__ import annotations

import html
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import requests

from streamchat.client.render import render_markdown
from streamchat.client.sse import iter_events
from streamchat.core.config import SERVER_URL
from streamchat.models.chat import MODELS, ROLE_ASSISTANT, ROLE_USER

logger = logging.getLogger("streamchat.client")

CONNECT_TIMEOUT = 5.0
READ_TIMEOUT = 600.0

DeltaCallback = Callable[[str], None]


class ChatClientError(Exception):
    """A turn failed before or while streaming; the message is what the user sees."""


class StreamError(ChatClientError):
    """The server reported an in-band ``error`` event."""


def consume_stream(
    chunks: Iterable[bytes | str],
    on_delta: Optional[DeltaCallback] = None,
) -> Tuple[str, Dict[str, Any]]:
    """
    Fold an SSE body into (reply text, usage). An ``error`` event raises
    StreamError and stops reading; a body with no terminal event is an error too.
    """
    reply = ""
    for event in iter_events(chunks):
        kind = event.get("type")
        if kind == "delta":
            text = event.get("text") or ""
            reply += text
            if on_delta:
                on_delta(text)
        elif kind == "done":
            return reply, event.get("usage") or {}
        elif kind == "error":
            raise StreamError(str(event.get("error") or "Unknown error"))
    raise StreamError("Stream ended before the reply was complete")


class ChatSession:
    def __init__(
        self,
        base_url: str = SERVER_URL,
        model: str = MODELS[0],
        system: str = "",
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.system = system
        self.http = http or requests.Session()
        self.transcript: List[Dict[str, str]] = []
        self.last_usage: Dict[str, Any] = {}
        self.streaming = False

    def reset(self) -> None:
        self.transcript.clear()
        self.last_usage = {}

    def send(self, text: str, on_delta: Optional[DeltaCallback] = None) -> str:
        """
        Add a user turn and stream the reply. Only a complete reply is added to
        the transcript; a failed turn leaves the user message without an answer.
        """
        if self.streaming:
            raise ChatClientError("A reply is already streaming")
        self.transcript.append({"role": ROLE_USER, "content": text})
        self.streaming = True
        try:
            reply, usage = self._stream_reply(on_delta)
        finally:
            self.streaming = False
        self.transcript.append({"role": ROLE_ASSISTANT, "content": reply})
        self.last_usage = usage
        return reply

    def _stream_reply(self, on_delta: Optional[DeltaCallback]) -> Tuple[str, Dict[str, Any]]:
        payload = {"model": self.model, "system": self.system, "messages": list(self.transcript)}
        logger.debug("POST %s/api/chat model=%s messages=%d", self.base_url, self.model, len(self.transcript))
        try:
            with self.http.post(
                f"{self.base_url}/api/chat",
                json=payload,
                stream=True,
                timeout=(CONNECT_TIMEOUT, READ_TIMEOUT),
            ) as r:
                if r.status_code != 200:
                    raise ChatClientError(_error_from_response(r))
                return consume_stream(r.iter_content(chunk_size=None), on_delta)
        except requests.RequestException as e:
            raise ChatClientError(f"Request failed: {e}") from e

    def export_html(self, path: Path) -> None:
        """Write the transcript as a standalone HTML page."""
        body = "\n".join(
            f'<div class="message {m["role"]}">{render_markdown(m["content"])}</div>'
            for m in self.transcript
        )
        page = (
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>Chat with {html.escape(self.model)}</title>\n</head>\n"
            f"<body>\n{body}\n</body>\n</html>\n"
        )
        Path(path).write_text(page, encoding="utf-8")


def _error_from_response(r: requests.Response) -> str:
    try:
        return str(r.json().get("error") or f"HTTP {r.status_code}")
    except ValueError:
        return f"HTTP {r.status_code}"


def run_repl(session: ChatSession, transcript_path: Optional[Path] = None) -> None:
    print(f"Chatting with {session.model} at {session.base_url}. /reset clears, /quit exits.")
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        if line == "/quit":
            break
        if line == "/reset":
            session.reset()
            print("(transcript cleared)")
            continue

        def echo(text: str) -> None:
            sys.stdout.write(text)
            sys.stdout.flush()

        try:
            session.send(line, on_delta=echo)
            print()
            cached = session.last_usage.get("cache_read_input_tokens")
            if cached:
                print(f"(cache hit: {cached} tokens)", file=sys.stderr)
        except ChatClientError as e:
            print(f"\nError: {e}")

    if transcript_path:
        session.export_html(transcript_path)
        print(f"Transcript written to {transcript_path}")
