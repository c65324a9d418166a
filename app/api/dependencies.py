"""
app/api/dependencies.py

Shared FastAPI dependencies for upload validation and scratch storage.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from app.config import get_csv_import_settings
from app.storage.uploads import ScratchUploadStorage

ALLOWED_EXTENSIONS = (".csv", ".txt")

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(
    file: UploadFile | None = File(None),
    csv_file: UploadFile | None = File(None, alias="csvFile"),
) -> UploadFile:
    """
    Accept CSV/TXT uploads by extension or MIME type and reject oversize
    files early when the client declared a size.

    The multipart field may be named `file` or `csvFile` (the browser form).
    """

    file = file if file is not None else csv_file
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": "No file was uploaded."},
        )

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";")[0].strip().lower()

    is_allowed_filename = filename.endswith(ALLOWED_EXTENSIONS)
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_allowed_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": "Only CSV and TXT files are allowed."},
        )

    max_bytes = get_csv_import_settings().max_upload_bytes
    if file.size is not None and file.size > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "success": False,
                "error": f"The file exceeds the maximum allowed size ({max_bytes // (1024 * 1024)}MB).",
            },
        )

    return file


def get_upload_storage() -> ScratchUploadStorage:
    settings = get_csv_import_settings()
    return ScratchUploadStorage(settings.upload_dir, max_bytes=settings.max_upload_bytes)
