"""
Word sinks receiving the result of an extraction run.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, TextIO

import structlog

from .utils.atomic import atomic_write_text

logger = structlog.get_logger(__name__)


class MemoryWordSink:
    """Keeps delivered words in memory."""

    def __init__(self) -> None:
        self.words: List[str] = []
        self.deliveries = 0

    def add_words(self, words: Sequence[str]) -> None:
        self.words.extend(words)
        self.deliveries += 1


class WordListFileSink:
    """Writes one word per line to a file (atomically) or to a text stream."""

    def __init__(self, path: Optional[Path] = None, stream: Optional[TextIO] = None) -> None:
        if (path is None) == (stream is None):
            raise ValueError("Exactly one of path or stream must be given")
        self.path = Path(path) if path is not None else None
        self.stream = stream

    def add_words(self, words: Sequence[str]) -> None:
        content = "".join(f"{word}\n" for word in words)
        if self.path is not None:
            atomic_write_text(self.path, content)
            logger.info("Word list written", path=str(self.path), words=len(words))
        else:
            assert self.stream is not None
            self.stream.write(content)
            self.stream.flush()
