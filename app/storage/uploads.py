"""
app/storage/uploads.py

Scratch storage for uploaded import files.

An uploaded file lives on disk only for the duration of one import:
``scoped()`` writes it, yields its path, and deletes it afterwards whether
the import succeeded or not.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class UploadStorageError(RuntimeError):
    """Raised when an upload cannot be written to scratch storage."""


class UploadTooLargeError(ValueError):
    """Raised when an upload exceeds the configured byte limit."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"The file exceeds the maximum allowed size ({max_bytes // (1024 * 1024)}MB).")
        self.max_bytes = max_bytes


def _sanitize_file_name(file_name: str | None) -> str:
    safe_name = Path(file_name or "").name.strip()
    return safe_name or "upload.csv"


class ScratchUploadStorage:
    """
    Local filesystem scratch area for uploads.
    """

    def __init__(self, root_dir: str | Path = "data/uploads", *, max_bytes: int) -> None:
        self._root_dir = Path(root_dir)
        self._max_bytes = max_bytes

    def save(self, source: IO[bytes], *, file_name: str | None) -> Path:
        """
        Copy ``source`` to a uniquely named file, enforcing the size limit.
        """

        safe_name = _sanitize_file_name(file_name)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        target = self._root_dir / f"csv-{stamp}-{uuid.uuid4().hex}{Path(safe_name).suffix.lower()}"
        tmp_path = target.with_suffix(f"{target.suffix}.tmp")

        try:
            self._root_dir.mkdir(parents=True, exist_ok=True)
            written = 0
            with tmp_path.open("wb") as handle:
                while True:
                    chunk = source.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise UploadTooLargeError(self._max_bytes)
                    handle.write(chunk)
            tmp_path.replace(target)
        except OSError as exc:
            raise UploadStorageError("Failed to write uploaded file to scratch storage.") from exc
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning("Could not remove partial upload %s", tmp_path)

        logger.info("Upload stored name=%r path=%s bytes=%d", safe_name, target, written)
        return target

    def delete(self, path: Path) -> None:
        """Remove a stored upload; a failure is logged, not raised."""
        try:
            path.unlink(missing_ok=True)
            logger.info("Temporary upload removed path=%s", path)
        except OSError as exc:
            logger.warning("Could not remove temporary upload %s: %s", path, exc)

    @contextmanager
    def scoped(self, source: IO[bytes], *, file_name: str | None) -> Iterator[Path]:
        path = self.save(source, file_name=file_name)
        try:
            yield path
        finally:
            self.delete(path)
