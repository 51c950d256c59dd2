"""Logging and metrics for WordQuarry."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS, record_document, record_words

__all__ = ["configure_logging", "METRICS", "record_document", "record_words"]
