"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
limiter = Limiter(key_func=get_remote_address)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, rate limiting and service adapters.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. Besides the Flask
        extensions, this builds the token provider and the media store from
        the app config and stores them in ``app.extensions`` under
        ``"token_provider"`` and ``"media_store"``.

    Raises
    ------
    ValueError
        If the token secrets are missing or identical, so a misconfigured
        deployment fails at boot rather than on the first login.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from channelhub import models as _models  # noqa: F401

    migrate.init_app(app, db)
    limiter.init_app(app)

    from channelhub.core.config import MediaSettings, TokenSettings
    from channelhub.core.security import PasswordHasher
    from channelhub.infra.jwt import JWTTokenProvider
    from channelhub.infra.media import build_media_store

    app.extensions["token_provider"] = JWTTokenProvider(TokenSettings.from_mapping(app.config))
    app.extensions["media_store"] = build_media_store(MediaSettings.from_mapping(app.config))

    # Read per app by ``User.password`` and ``User.verify_password``.
    app.extensions["password_hasher"] = PasswordHasher(
        method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    )
