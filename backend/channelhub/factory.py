"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from channelhub.core.config import BaseConfig, get_config
from channelhub.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, import string or object; defaults to the
        class selected by ``APP_ENV``.
    :raises ValueError: If the token or media settings are invalid.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from channelhub.core import proxy

    proxy.init_app(app)

    from channelhub.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from channelhub.core import cors

    cors.init_app(app)

    from channelhub.api import init_app as init_api

    init_api(app)

    from channelhub.core import errors

    errors.init_app(app)

    return app
