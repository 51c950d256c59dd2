"""
Streaming HTML-to-word-set extraction.

Every document of a run is inspected, gated on its Content-Type, decoded and
fed through the event tokenizer. Text and comment spans that survive the
content filter are split into words with the configured pattern and merged
into one shared set.
"""

from __future__ import annotations

import codecs
import locale
import re
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional, Set

import structlog

from ..config.config import ExtractionSettings
from ..exceptions import CollaboratorError, DocumentDecodeError
from ..observability.metrics import record_document, record_words
from .content_filter import TagContext, is_span_eligible, should_skip_document
from .inspector import HttpResponseInspector
from .models import ExtractionResult, ExtractionStats, HttpMessage, ResponseInfo
from .protocols import ContentInspector
from .tokenizer import DEFAULT_CHUNK_SIZE, Comment, EndTag, HtmlEvent, StartTag, Text, iter_events

if TYPE_CHECKING:
    from .job import CancellationToken

logger = structlog.get_logger(__name__)

ErrorReporter = Callable[[str], None]


class WordExtractor:
    """
    Builds the set of distinct words found in a batch of HTML responses.

    Documents are processed strictly in order by a single writer. A document
    that cannot be decoded contributes nothing and the run continues; failures
    of the message source or the content inspector abort the run with
    CollaboratorError.
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        *,
        inspector: Optional[ContentInspector] = None,
        on_error: Optional[ErrorReporter] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """
        Initialize the WordExtractor.

        Args:
            settings: Extraction switches and token pattern, fixed for the extractor's lifetime
            inspector: Locates headers and body in each raw response
            on_error: Receives a human-readable message for each document that fails to parse
            chunk_size: Number of body bytes decoded and tokenized per step
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self.settings = settings or ExtractionSettings()
        self.inspector: ContentInspector = inspector or HttpResponseInspector()
        self.on_error = on_error
        self.chunk_size = chunk_size
        self.encoding = self.settings.encoding or locale.getpreferredencoding(False)
        self._pattern = re.compile(self.settings.token_pattern)
        self.logger = logger.bind(component="WordExtractor")

    # --- Tokenization ---

    def extract_words(self, text: str) -> Iterator[str]:
        """Yield every non-empty token match in ``text``, lowercased if configured."""
        for match in self._pattern.finditer(text):
            word = match.group()
            if not word:
                continue
            yield word.lower() if self.settings.force_lowercase else word

    def _fold_events(self, events: Iterable[HtmlEvent], words: Set[str]) -> int:
        """Apply the tag-context state machine to ``events``, collecting words. Returns the match count."""
        context = TagContext()
        matches = 0
        for event in events:
            if isinstance(event, StartTag):
                context.on_start_tag(event.name, self.settings)
            elif isinstance(event, EndTag):
                context.on_end_tag(event.name)
            elif isinstance(event, (Text, Comment)):
                if is_span_eligible(context, is_comment=isinstance(event, Comment), settings=self.settings):
                    for word in self.extract_words(event.data):
                        words.add(word)
                        matches += 1
        return matches

    def extract_from_html(self, html: str) -> Set[str]:
        """Return the words of a single, already-decoded HTML document."""
        words: Set[str] = set()
        self._fold_events(iter_events(html, self.chunk_size), words)
        return words

    # --- Per-document processing ---

    def _decode_chunks(self, response: bytes, body_offset: int) -> Iterator[str]:
        """Incrementally decode the body so tokenizing can start before the whole body is text."""
        decoder = codecs.getincrementaldecoder(self.encoding)(errors=self.settings.decode_errors)
        body = response[body_offset:]
        for start in range(0, len(body), self.chunk_size):
            yield decoder.decode(body[start : start + self.chunk_size])
        yield decoder.decode(b"", final=True)

    def _scan_document(self, message: HttpMessage, info: ResponseInfo, label: str) -> tuple[Set[str], int]:
        """Tokenize one document into a scratch set so a failure leaves the shared set untouched."""
        found: Set[str] = set()
        try:
            matches = self._fold_events(iter_events(self._decode_chunks(message.response, info.body_offset)), found)
        except ValueError as e:
            # UnicodeDecodeError is a ValueError
            raise DocumentDecodeError(f"Could not parse HTML document {label}: {e}", source=label) from e
        return found, matches

    def _inspect(self, message: HttpMessage, label: str) -> ResponseInfo:
        try:
            info = self.inspector.analyze_response(message.response)
        except Exception as e:
            raise CollaboratorError("content inspector", f"{label}: {e}") from e
        if not 0 <= info.body_offset <= len(message.response):
            raise CollaboratorError(
                "content inspector",
                f"{label}: body offset {info.body_offset} outside response of {len(message.response)} bytes",
            )
        return info

    def _report(self, error: DocumentDecodeError) -> None:
        self.logger.warning(
            "Document skipped",
            event_type="document_failed",
            source=error.source,
            error=str(error.__cause__ or error),
            error_type=type(error.__cause__ or error).__name__,
        )
        if self.on_error is None:
            return
        try:
            self.on_error(str(error))
        except Exception:
            self.logger.exception("Error reporter failed", source=error.source)

    # --- Run ---

    def _messages(
        self, messages: Iterable[HttpMessage], cancel_token: Optional[CancellationToken]
    ) -> Iterator[HttpMessage]:
        """Iterate the message source, checking for cancellation before each document."""
        try:
            iterator = iter(messages)
        except Exception as e:
            raise CollaboratorError("message source", str(e)) from e

        while True:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            try:
                message = next(iterator)
            except StopIteration:
                return
            except Exception as e:
                raise CollaboratorError("message source", str(e)) from e
            yield message

    def extract(
        self,
        messages: Iterable[HttpMessage],
        cancel_token: Optional[CancellationToken] = None,
    ) -> ExtractionResult:
        """
        Extract the distinct words of every message.

        Args:
            messages: Ordered message source
            cancel_token: Checked before each document; when set, ExtractionCancelled is raised
                and the partial result is discarded

        Returns:
            ExtractionResult holding the word set and per-outcome document counts

        Raises:
            CollaboratorError: If the message source or the content inspector fails
            ExtractionCancelled: If cancellation was requested
        """
        words: Set[str] = set()
        stats = ExtractionStats()

        for index, message in enumerate(self._messages(messages, cancel_token)):
            label = message.source or f"message[{index}]"
            info = self._inspect(message, label)

            if should_skip_document(info.headers, self.settings):
                stats.skipped += 1
                record_document("skipped")
                self.logger.debug("Skipping document by content type", source=label)
                continue

            try:
                found, matches = self._scan_document(message, info, label)
            except DocumentDecodeError as e:
                stats.failed += 1
                record_document("failed")
                self._report(e)
                continue

            words.update(found)
            stats.processed += 1
            stats.tokens += matches
            record_document("processed")
            record_words(matches)
            self.logger.debug("Document processed", source=label, matches=matches, distinct=len(found))

        self.logger.info(
            "Extraction completed",
            documents=stats.total,
            processed=stats.processed,
            skipped=stats.skipped,
            failed=stats.failed,
            distinct_words=len(words),
        )
        return ExtractionResult(words=frozenset(words), stats=stats)
