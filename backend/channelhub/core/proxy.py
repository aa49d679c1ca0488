"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    The login rate limit keys on the client address, which is only correct
    behind a reverse proxy once ``X-Forwarded-For`` is honoured.

    Controlled by ``USE_PROXYFIX`` (default ``False``) and ``PROXY_HOPS``
    (number of trusted proxies, default ``1``).
    """
    if app.config.get("USE_PROXYFIX", False):
        hops = int(app.config.get("PROXY_HOPS", 1))
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
