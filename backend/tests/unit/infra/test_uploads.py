"""Tests for temporary upload staging."""

from __future__ import annotations

import io

import pytest
from channelhub.infra.uploads import staged_upload
from werkzeug.datastructures import FileStorage


def _upload(name: str = "my photo.png", data: bytes = b"png-data") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type="image/png")


def test_staged_file_is_removed_after_block(tmp_path):
    with staged_upload(_upload(), tmp_path) as staged:
        assert staged is not None
        assert staged.path.read_bytes() == b"png-data"
        assert staged.filename == "my_photo.png"
        assert staged.content_type == "image/png"
        assert staged.path.parent == tmp_path
    assert list(tmp_path.iterdir()) == []


def test_staged_file_is_removed_when_block_raises(tmp_path):
    with pytest.raises(RuntimeError):
        with staged_upload(_upload(), tmp_path) as staged:
            assert staged.path.exists()
            raise RuntimeError("upload failed")
    assert list(tmp_path.iterdir()) == []


def test_creates_missing_directory(tmp_path):
    target = tmp_path / "nested" / "temp"
    with staged_upload(_upload(), target) as staged:
        assert staged.path.parent == target


@pytest.mark.parametrize("file", [None, FileStorage(stream=io.BytesIO(b""), filename="")])
def test_absent_upload_yields_none(tmp_path, file):
    with staged_upload(file, tmp_path) as staged:
        assert staged is None
    assert list(tmp_path.iterdir()) == []


def test_concurrent_uploads_with_same_name_do_not_collide(tmp_path):
    with staged_upload(_upload(data=b"one"), tmp_path) as first:
        with staged_upload(_upload(data=b"two"), tmp_path) as second:
            assert first.path != second.path
            assert first.path.read_bytes() == b"one"
            assert second.path.read_bytes() == b"two"
