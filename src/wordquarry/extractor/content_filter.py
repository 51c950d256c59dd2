"""
Document- and span-level inclusion rules for word extraction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..config.config import ExtractionSettings

CONTENT_TYPE_PREFIX = "content-type:"

# Content types that never carry extractable markup
SKIPPED_CONTENT_TYPE_PREFIXES = ("image/", "audio/", "video/")
SKIPPED_CONTENT_TYPES = frozenset(
    {
        "application/javascript",
        "application/octet-stream",
        "application/pdf",
    }
)


def is_skipped_content_type(value: str) -> bool:
    """Return True for a lowercased Content-Type value that should not be parsed."""
    return value.startswith(SKIPPED_CONTENT_TYPE_PREFIXES) or value in SKIPPED_CONTENT_TYPES


def should_skip_document(headers: Iterable[str], settings: ExtractionSettings) -> bool:
    """
    Decide whether a whole document is excluded based on its Content-Type header.

    The value is whatever follows the first space of the header line, so
    ``Content-Type: image/png`` is matched but ``Content-Type:image/png`` is not.
    Parameters such as ``; charset=...`` are not stripped.

    Args:
        headers: Raw header lines (``Name: value``), matched case-insensitively
        settings: Extraction settings; nothing is skipped unless check_content_type is set

    Returns:
        True if the document must not be tokenized
    """
    if not settings.check_content_type:
        return False

    for header in headers:
        lowered = header.lower()
        if not lowered.startswith(CONTENT_TYPE_PREFIX):
            continue
        value = lowered[lowered.find(" ") + 1 :]
        if is_skipped_content_type(value):
            return True
    return False


@dataclass(slots=True)
class TagContext:
    """Whether the tokenizer cursor currently sits inside an ignored style or script element."""

    in_style: bool = False
    in_script: bool = False

    def on_start_tag(self, name: str, settings: ExtractionSettings) -> None:
        tag = name.lower()
        if tag == "style" and settings.ignore_style_tags:
            self.in_style = True
        if tag == "script" and settings.ignore_script_tags:
            self.in_script = True

    def on_end_tag(self, name: str) -> None:
        # Reset regardless of the ignore flags; stray end tags are harmless.
        tag = name.lower()
        if tag == "style":
            self.in_style = False
        if tag == "script":
            self.in_script = False


def is_span_eligible(context: TagContext, *, is_comment: bool, settings: ExtractionSettings) -> bool:
    """
    Return True if a text or comment span should be tokenized.

    Comments depend only on ignore_comments. Text is suppressed only while
    in_style is set; in_script is tracked but does not gate text.
    """
    if is_comment:
        return not settings.ignore_comments
    return not context.in_style
