"""
File-backed message source.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Union

import structlog

from .extractor.models import HttpMessage

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


class FileMessageSource:
    """
    Yields one HttpMessage per file.

    Each file holds either a raw HTTP response (status line, headers, blank
    line, body) or a bare HTML body. Directories are walked recursively in
    sorted order; hidden files are ignored. Files are read lazily, one per
    iteration step.
    """

    def __init__(self, paths: Iterable[PathLike]) -> None:
        self.paths: List[Path] = [Path(p) for p in paths]

    def _files(self) -> Iterator[Path]:
        for path in self.paths:
            if path.is_dir():
                for child in sorted(path.rglob("*")):
                    if child.is_file() and not child.name.startswith("."):
                        yield child
            elif path.exists():
                yield path
            else:
                raise FileNotFoundError(f"Input path not found: {path}")

    def __iter__(self) -> Iterator[HttpMessage]:
        for file_path in self._files():
            logger.debug("Reading message", path=str(file_path))
            yield HttpMessage(response=file_path.read_bytes(), source=str(file_path))
