"""
Test configuration for WordQuarry.

Shared fixtures for building raw HTTP responses, extraction settings and
extractors, plus isolation of the global logging configuration.
"""

# Standard library imports
import logging
from typing import Callable, Dict, Optional

# Third-party imports
import pytest
import structlog

# Local imports
from wordquarry.config import ExtractionSettings
from wordquarry.extractor import HttpMessage, WordExtractor

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture(autouse=True)
def isolate_logging():
    """Undo configure_logging() side effects so one CLI test cannot leak handlers into the next."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


# ============================================================================
# Document Fixtures
# ============================================================================


def build_response(body: str, headers: Optional[Dict[str, str]] = None, status: str = "HTTP/1.1 200 OK") -> bytes:
    """Assemble a raw HTTP/1.1 response with CRLF line endings and a UTF-8 body."""
    lines = [status]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    head = "\r\n".join(lines) + "\r\n\r\n"
    return head.encode("iso-8859-1") + body.encode("utf-8")


@pytest.fixture
def make_response() -> Callable[..., bytes]:
    """Factory fixture returning build_response."""
    return build_response


@pytest.fixture
def make_message() -> Callable[..., HttpMessage]:
    """Factory for HttpMessage objects wrapping a raw response."""

    def _make(body: str, content_type: Optional[str] = "text/html", source: Optional[str] = None) -> HttpMessage:
        headers = {"Content-Type": content_type} if content_type else {}
        return HttpMessage(response=build_response(body, headers), source=source)

    return _make


@pytest.fixture
def settings_factory() -> Callable[..., ExtractionSettings]:
    """Build ExtractionSettings with a pinned UTF-8 encoding so tests do not depend on the platform locale."""

    def _factory(**overrides) -> ExtractionSettings:
        overrides.setdefault("encoding", "utf-8")
        return ExtractionSettings(**overrides)

    return _factory


@pytest.fixture
def extractor_factory(settings_factory) -> Callable[..., WordExtractor]:
    """Build a WordExtractor from keyword setting overrides."""

    def _factory(on_error=None, chunk_size: Optional[int] = None, **overrides) -> WordExtractor:
        kwargs = {"on_error": on_error}
        if chunk_size is not None:
            kwargs["chunk_size"] = chunk_size
        return WordExtractor(settings_factory(**overrides), **kwargs)

    return _factory


@pytest.fixture
def sample_html() -> str:
    """Provide sample HTML content for testing."""
    return """<!DOCTYPE html>
<html>
<head>
    <title>Quarterly Report</title>
    <style>body { color: crimson; }</style>
    <script>var trackingId = 'abc';</script>
</head>
<body>
    <!-- draft revision -->
    <h1>Revenue Growth</h1>
    <p>Revenue grew in every region.</p>
</body>
</html>
"""
