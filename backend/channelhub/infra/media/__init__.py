"""Media host adapters and the factory selecting one from settings."""

from __future__ import annotations

from channelhub.core.config import MediaSettings
from channelhub.infra.media.cloudinary import CloudinaryMediaStore
from channelhub.services._shared.ports import InMemoryMediaStore, MediaStore


def build_media_store(settings: MediaSettings) -> MediaStore:
    """Return the store named by ``settings.backend``.

    :raises ValueError: On an unknown backend name.
    """
    if settings.backend == "memory":
        return InMemoryMediaStore()
    if settings.backend == "cloudinary":
        return CloudinaryMediaStore(
            cloud_name=settings.cloud_name,
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            folder=settings.folder,
            timeout=settings.timeout_seconds,
        )
    raise ValueError(f"Unknown MEDIA_BACKEND {settings.backend!r}")


__all__ = ["CloudinaryMediaStore", "build_media_store"]
