"""Adapter for Cloudinary uploads through the official ``cloudinary`` SDK."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from channelhub.services._shared.errors import UpstreamError
from channelhub.services._shared.ports import LocalFile, MediaStore, StoredMedia

log = logging.getLogger(__name__)

UPLOAD_FAILED = "Error while uploading file"

Uploader = Callable[..., Any]


class CloudinaryMediaStore(MediaStore):
    """
    Signed, server-side uploads to Cloudinary.

    Credentials are passed with every call instead of through the global
    ``cloudinary.config`` so two apps in one process never share them.

    :param cloud_name: Cloudinary cloud identifier.
    :param api_key: Public API key sent with each upload.
    :param api_secret: Secret used by the SDK to sign requests; never sent.
    :param folder: Optional target folder for uploaded assets.
    :param timeout: Upper bound in seconds for one upload round trip.
    :param uploader: Upload callable, ``cloudinary.uploader.upload`` by default.
    """

    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str | None = None,
        timeout: float = 30.0,
        uploader: Uploader | None = None,
    ) -> None:
        if not cloud_name or not api_key or not api_secret:
            raise ValueError("Cloudinary cloud name, API key and API secret must be provided")
        self._options: dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "timeout": timeout,
        }
        if folder:
            self._options["folder"] = folder
        self._upload = uploader or cloudinary.uploader.upload

    def upload(self, file: LocalFile) -> StoredMedia:
        try:
            result = self._upload(str(file.path), resource_type="auto", **self._options)
        except CloudinaryError as exc:
            # The SDK wraps HTTP, socket and timeout failures in its own errors.
            log.error("media.upload.failed: filename=%s error=%s", file.filename, exc)
            raise UpstreamError(UPLOAD_FAILED) from exc

        if not isinstance(result, dict):
            result = {}
        url = result.get("secure_url") or result.get("url")
        if not url:
            log.error("media.upload.no_url: filename=%s", file.filename)
            raise UpstreamError(UPLOAD_FAILED)

        log.info("media.upload.ok: public_id=%s", result.get("public_id"))
        return StoredMedia(
            url=str(url),
            public_id=str(result.get("public_id", "")),
            resource_type=str(result.get("resource_type", "image")),
            bytes=result.get("bytes"),
        )
