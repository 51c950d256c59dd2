"""
WordQuarry word extraction.

Turns raw HTTP responses into a sorted set of distinct words:
- Content-Type gate that skips binary documents
- Streaming markup tokenizer producing typed events
- Tag-context filtering of <style>, <script> and comment text
- Configurable token pattern with optional case folding
- Cancellable asyncio job delivering to a word sink
"""

from .content_filter import TagContext, is_span_eligible, should_skip_document
from .inspector import HttpResponseInspector
from .job import CancellationToken, WordExtractionJob
from .models import ExtractionResult, ExtractionStats, HttpMessage, ResponseInfo
from .protocols import ContentInspector, WordSink
from .tokenizer import Comment, EndTag, HtmlEvent, StartTag, Text, iter_events
from .word_extractor import WordExtractor

__all__ = [
    "CancellationToken",
    "Comment",
    "ContentInspector",
    "EndTag",
    "ExtractionResult",
    "ExtractionStats",
    "HtmlEvent",
    "HttpMessage",
    "HttpResponseInspector",
    "ResponseInfo",
    "StartTag",
    "TagContext",
    "Text",
    "WordExtractionJob",
    "WordExtractor",
    "WordSink",
    "is_span_eligible",
    "iter_events",
    "should_skip_document",
]
