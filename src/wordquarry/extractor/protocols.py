"""
Protocols for the collaborators consumed by the word extractor.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from .models import ResponseInfo


@runtime_checkable
class ContentInspector(Protocol):
    """Locates headers and body inside a raw HTTP response."""

    def analyze_response(self, response: bytes) -> ResponseInfo:
        """Split a raw response into header lines and a body offset.

        Args:
            response: Raw response bytes

        Returns:
            ResponseInfo with ``0 <= body_offset <= len(response)``
        """
        ...


@runtime_checkable
class WordSink(Protocol):
    """Receives the final word list of a completed run."""

    def add_words(self, words: Sequence[str]) -> Any:
        """Accept the sorted, distinct words of one run. May return an awaitable."""
        ...
