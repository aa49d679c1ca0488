"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. Each one carries an :class:`ErrorKind`; the API error boundary in
``channelhub/core/errors.py`` maps the kind to a status code, so callers
branch on ``exc.kind`` instead of inspecting ad hoc attributes.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed taxonomy of service failures."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not-found"
    UNAUTHORIZED = "unauthorized"
    UPSTREAM_FAILURE = "upstream-failure"
    INTERNAL = "internal"


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``message`` is safe to show to clients.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --------------------------------------------------------------------------- #
# Specific errors
# --------------------------------------------------------------------------- #


class InvalidInputError(ServiceError):
    """A required field is missing, empty or malformed."""

    kind = ErrorKind.VALIDATION


class ConflictError(ServiceError):
    """A unique constraint or business rule conflict occurred."""

    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    :param message: Optional client-facing override.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str | int, message: str | None = None) -> None:
        super().__init__(message or f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class AuthenticationError(ServiceError):
    """
    Identity could not be established.

    :param message: Uniform client-facing message.
    :param reason: Internal cause (``expired``, ``token-superseded``...),
        logged but never rendered.
    """

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class UpstreamError(ServiceError):
    """A collaborator outside the process (media host, database) failed."""

    kind = ErrorKind.UPSTREAM_FAILURE
