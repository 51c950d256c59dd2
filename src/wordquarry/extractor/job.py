"""
Cancellable background word-extraction job.

The extractor runs in the default executor so the event loop stays
responsive; the finished word list is delivered to the sink only when the run
completes without cancellation.
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import inspect
import threading
import uuid
from typing import Iterable, Optional

import structlog
from structlog.contextvars import bind_contextvars

from ..config.config import ExtractionSettings
from ..exceptions import CollaboratorError, ExtractionCancelled
from .models import ExtractionResult, HttpMessage
from .protocols import ContentInspector, WordSink
from .word_extractor import ErrorReporter, WordExtractor

logger = structlog.get_logger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag shared between the job and the worker thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ExtractionCancelled("Word extraction was cancelled")


class WordExtractionJob:
    """
    One extraction run over a message source, delivering to a word sink.

    Usage:
        job = WordExtractionJob(messages, sink, settings)
        job.start()
        ...
        result = await job.wait()  # None if cancelled
    """

    def __init__(
        self,
        messages: Iterable[HttpMessage],
        sink: WordSink,
        settings: Optional[ExtractionSettings] = None,
        *,
        inspector: Optional[ContentInspector] = None,
        on_error: Optional[ErrorReporter] = None,
        extractor: Optional[WordExtractor] = None,
    ) -> None:
        self.messages = messages
        self.sink = sink
        self.extractor = extractor or WordExtractor(settings, inspector=inspector, on_error=on_error)
        self.run_id = uuid.uuid4().hex[:12]
        self.token = CancellationToken()
        self._task: Optional[asyncio.Task[Optional[ExtractionResult]]] = None
        self.logger = logger.bind(component="WordExtractionJob")

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def start(self) -> asyncio.Task[Optional[ExtractionResult]]:
        """Schedule the run on the current event loop. Starting twice returns the same task."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.run(), name=f"word-extraction-{self.run_id}")
        return self._task

    def cancel(self) -> None:
        """Request cancellation. The worker stops before its next document and nothing is delivered."""
        self.token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> Optional[ExtractionResult]:
        """Wait for the started run. Returns None if it was cancelled."""
        if self._task is None:
            raise RuntimeError("Job has not been started")
        try:
            return await self._task
        except asyncio.CancelledError:
            if self._task.cancelled():
                return None
            raise

    async def run(self) -> Optional[ExtractionResult]:
        """
        Run extraction and deliver the sorted words to the sink.

        Returns:
            The ExtractionResult, or None if the run was cancelled

        Raises:
            CollaboratorError: If the message source, content inspector or sink fails
        """
        bind_contextvars(run_id=self.run_id)
        loop = asyncio.get_running_loop()
        # run_in_executor does not propagate contextvars on its own
        ctx = contextvars.copy_context()
        work = functools.partial(ctx.run, self.extractor.extract, self.messages, self.token)

        self.logger.info("Starting word extraction")
        try:
            result = await loop.run_in_executor(None, work)
        except ExtractionCancelled:
            self.logger.info("Word extraction cancelled, discarding partial result")
            return None
        except asyncio.CancelledError:
            # Stop the worker thread at its next document boundary.
            self.token.cancel()
            self.logger.info("Word extraction task cancelled")
            raise

        if self.token.cancelled:
            self.logger.info("Word extraction cancelled before delivery, discarding result")
            return None

        await self._deliver(result)
        return result

    async def _deliver(self, result: ExtractionResult) -> None:
        try:
            delivered = self.sink.add_words(result.sorted_words)
            if inspect.isawaitable(delivered):
                await delivered
        except Exception as e:
            self.logger.error("Result sink failed", error=str(e), error_type=type(e).__name__)
            raise CollaboratorError("result sink", str(e)) from e

        self.logger.info("Words delivered", distinct_words=len(result))
