"""
channelhub.services._shared.ports
=================================

Ports (hexagonal interfaces) that keep the service layer independent of
token signing and media hosting. Concrete adapters live under
``channelhub.infra``.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` plus the value types it exchanges.
- :mod:`media_store`:
    :class:`~.MediaStore`, :class:`~.LocalFile`, :class:`~.StoredMedia` and
    the :class:`~.InMemoryMediaStore` double.
"""

from __future__ import annotations

from .media_store import InMemoryMediaStore, LocalFile, MediaStore, StoredMedia
from .token_provider import (
    AccessClaims,
    TokenFailure,
    TokenKind,
    TokenProvider,
    TokenVerification,
)

__all__ = [
    "AccessClaims",
    "InMemoryMediaStore",
    "LocalFile",
    "MediaStore",
    "StoredMedia",
    "TokenFailure",
    "TokenKind",
    "TokenProvider",
    "TokenVerification",
]
