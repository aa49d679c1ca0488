"""Temporary local staging of uploaded files."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from channelhub.services._shared.ports import LocalFile


@contextmanager
def staged_upload(
    file: FileStorage | None, directory: str | os.PathLike[str]
) -> Iterator[LocalFile | None]:
    """
    Save an incoming upload to ``directory`` for the duration of the block.

    The staged copy is removed when the block exits, whether the upload to
    the media host succeeded or raised.

    :param file: Upload from ``request.files``; ``None`` or an empty part
        yields ``None``.
    :param directory: Staging directory, created if missing.
    """
    if file is None or not file.filename:
        yield None
        return

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = secure_filename(file.filename) or "upload"
    fd, raw_path = tempfile.mkstemp(dir=target_dir, suffix=f"-{filename}")
    os.close(fd)
    path = Path(raw_path)
    try:
        file.save(path)
        yield LocalFile(path=path, filename=filename, content_type=file.mimetype or None)
    finally:
        path.unlink(missing_ok=True)
