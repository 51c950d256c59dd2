"""
WordQuarry - Streaming HTML word list extractor.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, ExtractionSettings
from .exceptions import CollaboratorError, DocumentDecodeError, ExtractionCancelled, WordQuarryError
from .extractor import HttpMessage, WordExtractionJob, WordExtractor

__all__ = [
    "__version__",
    "CollaboratorError",
    "Config",
    "DocumentDecodeError",
    "ExtractionCancelled",
    "ExtractionSettings",
    "HttpMessage",
    "WordExtractionJob",
    "WordExtractor",
    "WordQuarryError",
]
