"""Shared API helpers: envelopes, cookies, authentication and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request

from channelhub.services._shared.ports import MediaStore, TokenProvider
from channelhub.services.auth import AuthenticationGate

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def api_response(data: Any, message: str, *, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope ``{statusCode, data, message, success}``."""

    return json_response(
        {"statusCode": status, "data": data, "message": message, "success": status < 400},
        status=status,
    )


# --------------------------------------------------------------------------- #
# Collaborators built at startup
# --------------------------------------------------------------------------- #


def get_token_provider() -> TokenProvider:
    return cast(TokenProvider, current_app.extensions["token_provider"])


def get_media_store() -> MediaStore:
    return cast(MediaStore, current_app.extensions["media_store"])


# --------------------------------------------------------------------------- #
# Cookies
# --------------------------------------------------------------------------- #


def _cookie_options() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": bool(current_app.config.get("AUTH_COOKIE_SECURE", True)),
        "samesite": current_app.config.get("AUTH_COOKIE_SAMESITE"),
        "path": "/",
    }


def set_token_cookies(response: Response, *, access_token: str, refresh_token: str) -> Response:
    """Attach both tokens as HttpOnly cookies."""

    options = _cookie_options()
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)
    return response


def clear_token_cookies(response: Response) -> Response:
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def access_token_from_request() -> str | None:
    """Return the access token from the cookie, else the bearer header."""

    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def require_auth(func: F) -> F:
    """Authenticate the request and pass the context as the ``auth`` kwarg.

    Views decorated with this receive an immutable
    :class:`~channelhub.services.auth.AuthContext`; nothing is stored on
    ``flask.g`` or the request object.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        gate = AuthenticationGate(token_provider=get_token_provider())
        kwargs["auth"] = gate.authenticate(access_token_from_request())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
