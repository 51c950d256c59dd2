"""
Atomic file writing utilities.
"""

import os
import shutil
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


def atomic_write_text(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Atomically write text to a file.

    Writes to a temporary file in the target's directory, then renames it over
    the target, falling back to shutil.move when the rename is refused.

    Args:
        target_path: Target file path to write to
        content: Text to write
        encoding: Text encoding of the written file

    Raises:
        OSError: If writing fails
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_file_path = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=target_path.parent,
            prefix=f".{target_path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=encoding,
            newline="",
        ) as temp_file:
            temp_file_path = Path(temp_file.name)
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        try:
            os.replace(str(temp_file_path), str(target_path))
            logger.debug("Atomic write completed successfully", target=str(target_path), method="os.replace")
        except OSError as rename_error:
            logger.warning(
                "Atomic rename failed, falling back to shutil.move", error=str(rename_error), target=str(target_path)
            )
            shutil.move(str(temp_file_path), str(target_path))

    except Exception:
        if temp_file_path and temp_file_path.exists():
            temp_file_path.unlink(missing_ok=True)
            logger.debug("Cleaned up temporary file", temp_file=str(temp_file_path))
        raise
