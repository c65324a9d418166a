from __future__ import annotations

import io
from pathlib import Path

import pytest

from app.storage.uploads import ScratchUploadStorage, UploadTooLargeError


class TestScratchUploadStorage:
    def test_scoped_file_is_removed_afterwards(self, tmp_path: Path) -> None:
        storage = ScratchUploadStorage(tmp_path, max_bytes=1024)
        with storage.scoped(io.BytesIO(b"a,b\n1,2\n"), file_name="../../citas.CSV") as path:
            assert path.parent == tmp_path
            assert path.suffix == ".csv"
            assert path.read_bytes() == b"a,b\n1,2\n"
        assert not path.exists()

    def test_scoped_file_is_removed_on_error(self, tmp_path: Path) -> None:
        storage = ScratchUploadStorage(tmp_path, max_bytes=1024)
        with pytest.raises(RuntimeError):
            with storage.scoped(io.BytesIO(b"x"), file_name="citas.csv"):
                raise RuntimeError("import failed")
        assert list(tmp_path.iterdir()) == []

    def test_oversize_upload_leaves_nothing_behind(self, tmp_path: Path) -> None:
        storage = ScratchUploadStorage(tmp_path, max_bytes=10)
        with pytest.raises(UploadTooLargeError):
            storage.save(io.BytesIO(b"x" * 11), file_name="citas.csv")
        assert list(tmp_path.iterdir()) == []
