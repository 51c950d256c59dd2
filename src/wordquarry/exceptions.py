"""
Exception hierarchy for WordQuarry.
"""

from __future__ import annotations


class WordQuarryError(Exception):
    """Base class for all WordQuarry errors."""

    pass


class DocumentDecodeError(WordQuarryError):
    """Raised when a single document cannot be decoded or tokenized.

    Recovered locally by the extractor: the document is logged and skipped.
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class CollaboratorError(WordQuarryError):
    """Raised when the message source, content inspector or result sink fails.

    Fatal to the whole run. The original exception is chained as ``__cause__``.
    """

    def __init__(self, collaborator: str, message: str) -> None:
        super().__init__(f"{collaborator} failed: {message}")
        self.collaborator = collaborator


class ExtractionCancelled(WordQuarryError):
    """Raised when a cancellation request is observed between documents."""

    pass


class ConfigurationError(WordQuarryError, ValueError):
    """Raised when a configuration file cannot be loaded or validated."""

    pass
