from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from channelhub.services._shared.errors import UpstreamError


@dataclass(frozen=True, slots=True)
class LocalFile:
    """
    A file staged on local disk, ready to be pushed to the media host.

    :param path: Location of the staged copy.
    :param filename: Sanitized original filename.
    :param content_type: MIME type reported by the client, if any.
    """

    path: Path
    filename: str
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class StoredMedia:
    """Reference to an uploaded asset on the media host."""

    url: str
    public_id: str
    resource_type: str = "image"
    bytes: int | None = None


class MediaStore(Protocol):
    """Port for pushing local files to a remote media host."""

    def upload(self, file: LocalFile) -> StoredMedia:
        """
        Upload ``file`` and return its public reference.

        :raises UpstreamError: When the host rejects or fails to answer.
        """
        ...


class InMemoryMediaStore:
    """
    Deterministic media store used in tests and local development.

    URLs derive from the SHA-1 of the file contents, so uploading the same
    bytes twice yields the same URL.

    :param base_url: Prefix of generated URLs.
    :param fail: When ``True`` every upload raises :class:`UpstreamError`.
    """

    def __init__(self, *, base_url: str = "memory://media", fail: bool = False) -> None:
        self.base_url = base_url.rstrip("/")
        self.fail = fail
        self.uploads: list[StoredMedia] = []

    def upload(self, file: LocalFile) -> StoredMedia:
        if self.fail:
            raise UpstreamError("Error while uploading file")
        data = Path(file.path).read_bytes()
        digest = hashlib.sha1(data).hexdigest()
        suffix = Path(file.filename).suffix
        stored = StoredMedia(
            url=f"{self.base_url}/{digest}{suffix}",
            public_id=digest,
            bytes=len(data),
        )
        self.uploads.append(stored)
        return stored
