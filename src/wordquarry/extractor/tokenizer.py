"""
Streaming HTML tokenizer producing typed markup events.

``iter_events`` consumes text chunks and lazily yields ``StartTag``, ``EndTag``,
``Text`` and ``Comment`` events in document order. Malformed markup (unclosed
tags, stray ``<`` or ``&``) is recovered best-effort by the underlying
``html.parser`` state machine, the same parser BeautifulSoup's ``html.parser``
backend drives.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Deque, Iterable, Iterator, List, Optional, Tuple, Union

DEFAULT_CHUNK_SIZE = 16 * 1024

# A tag, end tag, comment, declaration or processing instruction opening
_MARKUP_OPEN = re.compile(r"<[a-zA-Z/!?]")


@dataclass(slots=True, frozen=True)
class StartTag:
    name: str
    attrs: Tuple[Tuple[str, Optional[str]], ...] = ()


@dataclass(slots=True, frozen=True)
class EndTag:
    name: str


@dataclass(slots=True, frozen=True)
class Text:
    data: str


@dataclass(slots=True, frozen=True)
class Comment:
    data: str


HtmlEvent = Union[StartTag, EndTag, Text, Comment]


class _EventCollector(HTMLParser):
    """Queues parser callbacks as events for the iterator to drain."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.events: Deque[HtmlEvent] = deque()

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self.events.append(StartTag(tag, tuple(attrs)))

    def handle_endtag(self, tag: str) -> None:
        self.events.append(EndTag(tag))

    def handle_data(self, data: str) -> None:
        if data:
            self.events.append(Text(data))

    def handle_comment(self, data: str) -> None:
        self.events.append(Comment(data))


def _settle_truncated_markup(parser: _EventCollector) -> None:
    """Handle a construct cut off by the end of input before close() flushes it as text.

    An unterminated comment still becomes a Comment; any other unfinished tag
    or declaration is dropped.
    """
    rest = parser.rawdata
    if parser.cdata_elem is not None:
        # Inside <script>/<style> only a partial end tag is markup
        if not rest.startswith("</"):
            return
    elif not _MARKUP_OPEN.match(rest):
        return
    if rest.startswith("<!--"):
        parser.events.append(Comment(rest[4:]))
    parser.rawdata = ""


def _chunked(text: str, chunk_size: int) -> Iterator[str]:
    for start in range(0, len(text), chunk_size):
        yield text[start : start + chunk_size]


def iter_events(source: Union[str, Iterable[str]], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[HtmlEvent]:
    """Tokenize HTML into a lazy, finite sequence of markup events.

    Args:
        source: Either a complete document or an iterable of text chunks
        chunk_size: Slice size used when ``source`` is a single string

    Yields:
        Events in document order. Adjacent text runs are merged, so a word
        never straddles two ``Text`` events because of chunk boundaries.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    chunks: Iterable[str] = _chunked(source, chunk_size) if isinstance(source, str) else source
    parser = _EventCollector()
    pending: List[str] = []

    def drain() -> Iterator[HtmlEvent]:
        while parser.events:
            event = parser.events.popleft()
            if isinstance(event, Text):
                pending.append(event.data)
                continue
            if pending:
                yield Text("".join(pending))
                pending.clear()
            yield event

    for chunk in chunks:
        if chunk:
            parser.feed(chunk)
            yield from drain()

    _settle_truncated_markup(parser)
    parser.close()
    yield from drain()
    if pending:
        yield Text("".join(pending))
