from __future__ import annotations

import html
import re
from typing import List

FENCE_RE = re.compile(r"```(\w*)\n?([\s\S]*?)```")
INLINE_CODE_RE = re.compile(r"`([^`]+)`")


def _prose(text: str) -> List[str]:
    text = INLINE_CODE_RE.sub(r"<code>\1</code>", text)
    return [f"<p>{p}</p>" for p in text.split("\n\n") if p.strip()]


def render_markdown(text: str) -> str:
    """
    Render model/user text as HTML: fenced code blocks, inline code spans and
    blank-line paragraphs. Everything is escaped first, so the only tags in
    the output are the ones added here.
    """
    escaped = html.escape(text, quote=True)
    parts: List[str] = []
    pos = 0
    for m in FENCE_RE.finditer(escaped):
        parts.extend(_prose(escaped[pos:m.start()]))
        lang, code = m.group(1), m.group(2)
        cls = f' class="language-{lang}"' if lang else ""
        parts.append(f"<pre><code{cls}>{code}</code></pre>")
        pos = m.end()
    parts.extend(_prose(escaped[pos:]))
    return "".join(parts)
