"""
app/storage package marker.
"""

from app.storage.uploads import ScratchUploadStorage, UploadStorageError, UploadTooLargeError

__all__ = ["ScratchUploadStorage", "UploadStorageError", "UploadTooLargeError"]
