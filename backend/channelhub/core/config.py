"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Development defaults; refused when ``REQUIRE_REAL_SECRETS`` is set.
PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME_ACCESS", "CHANGE_ME_REFRESH"}
)


load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path under which the ``/users`` routes are mounted. Empty by
        default so the routes live at ``/users/...``.
    ACCESS_TOKEN_SECRET: str
        HMAC key for access tokens. Must differ from ``REFRESH_TOKEN_SECRET``.
    REFRESH_TOKEN_SECRET: str
        HMAC key for refresh tokens.
    ACCESS_TOKEN_TTL_SECONDS / REFRESH_TOKEN_TTL_SECONDS: int
        Token lifetimes (15 minutes and 7 days by default).
    AUTH_COOKIE_SECURE: bool
        Adds the ``Secure`` attribute to the token cookies.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string; encodes the work factor.
    MAX_CONTENT_LENGTH: int
        Upper bound for request bodies, uploads included.
    MEDIA_BACKEND: str
        ``"cloudinary"`` for the hosted media API or ``"memory"`` for the
        in-process double.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are read from the environment once, when this module is
    imported. Components receive them through the Flask config or the
    immutable settings objects built in :func:`TokenSettings.from_mapping`.
    """

    API_BASE_PREFIX = os.getenv("API_BASE_PREFIX", "")
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Tokens
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    REQUIRE_REAL_SECRETS = False

    # Cookies
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE") or None

    # Passwords
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024)

    # Uploads & media host
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "cloudinary")
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER") or None
    MEDIA_UPLOAD_TIMEOUT = float(os.getenv("MEDIA_UPLOAD_TIMEOUT", "30"))

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", False)
    PROXY_HOPS = env_int("PROXY_HOPS", 1)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = 600

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Cookies are sent over plain HTTP and media goes to the in-memory store
    unless ``MEDIA_BACKEND`` says otherwise.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "memory")


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap pbkdf2 work factor so hashing does not dominate runtime.
    - Disables rate limiting and talks to the in-memory media store.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PROPAGATE_EXCEPTIONS = False
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef"
    MEDIA_BACKEND = "memory"
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Startup fails unless both token secrets are set in the environment.
    """

    REQUIRE_REAL_SECRETS = True

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Immutable token configuration injected into the token provider.

    :param access_secret: Signing key for access tokens.
    :param refresh_secret: Signing key for refresh tokens.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm shared by both kinds.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Access and refresh token secrets must be set.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh token secrets must differ.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Build settings from a Flask config (or any mapping with the same keys).

        :raises ValueError: If ``REQUIRE_REAL_SECRETS`` is set and a secret is
            still a development placeholder.
        """
        access_secret = str(config.get("ACCESS_TOKEN_SECRET") or "")
        refresh_secret = str(config.get("REFRESH_TOKEN_SECRET") or "")
        if config.get("REQUIRE_REAL_SECRETS") and (
            access_secret in PLACEHOLDER_SECRETS or refresh_secret in PLACEHOLDER_SECRETS
        ):
            raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set.")
        return cls(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            access_ttl=timedelta(seconds=int(config.get("ACCESS_TOKEN_TTL_SECONDS", 900))),
            refresh_ttl=timedelta(
                seconds=int(config.get("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60))
            ),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )


@dataclass(frozen=True, slots=True)
class MediaSettings:
    """Immutable media-host configuration."""

    backend: str = "memory"
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str | None = None
    timeout_seconds: float = 30.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> MediaSettings:
        """Build settings from a Flask config."""
        return cls(
            backend=str(config.get("MEDIA_BACKEND", "memory")).strip().lower(),
            cloud_name=str(config.get("CLOUDINARY_CLOUD_NAME") or ""),
            api_key=str(config.get("CLOUDINARY_API_KEY") or ""),
            api_secret=str(config.get("CLOUDINARY_API_SECRET") or ""),
            folder=config.get("CLOUDINARY_FOLDER") or None,
            timeout_seconds=float(config.get("MEDIA_UPLOAD_TIMEOUT", 30.0)),
        )
