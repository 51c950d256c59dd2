"""
Data models for word extraction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True, frozen=True)
class HttpMessage:
    """A raw HTTP response as supplied by a message source."""

    response: bytes
    source: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ResponseInfo:
    """Header lines and body offset of a raw HTTP response."""

    body_offset: int
    headers: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ExtractionStats:
    """Per-run document counters."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    tokens: int = 0

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Distinct words collected over all documents of one run."""

    words: frozenset[str]
    stats: ExtractionStats

    @property
    def sorted_words(self) -> List[str]:
        return sorted(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self.words
