"""Pytest fixtures: application, per-test database schema and HTTP client.

Each test gets a fresh schema in an in-memory SQLite database. Services
commit through their units of work, so isolation comes from dropping the
tables after every test rather than from an enclosing transaction.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from channelhub.core.config import TestingConfig
from channelhub.core.extensions import db as _db
from channelhub.factory import create_app
from channelhub.services._shared.ports import InMemoryMediaStore
from flask import Flask

from tests.factories import SQLAlchemySession


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture()
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables for one test and drop them afterwards."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db: Any) -> Any:
    """Return the Flask-scoped session the services use."""
    return db.session


@pytest.fixture(autouse=True)
def _factories_session(session: Any) -> Generator[None, None, None]:
    """Wire Factory Boy's session helper to the test session."""
    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)


@pytest.fixture(autouse=True)
def upload_dir(app: Flask, tmp_path) -> Generator[Any, None, None]:
    """Stage uploads in a per-test directory."""
    path = tmp_path / "uploads"
    previous = app.config["UPLOAD_TEMP_DIR"]
    app.config["UPLOAD_TEMP_DIR"] = str(path)
    yield path
    app.config["UPLOAD_TEMP_DIR"] = previous


@pytest.fixture(autouse=True)
def media_store(app: Flask) -> Generator[InMemoryMediaStore, None, None]:
    """The in-memory media store installed on the app.

    The store outlives a single test, so it is emptied before and after
    every test whether or not the test asks for it.
    """
    store = app.extensions["media_store"]
    assert isinstance(store, InMemoryMediaStore)
    store.fail = False
    store.uploads.clear()
    yield store
    store.fail = False
    store.uploads.clear()


@pytest.fixture()
def token_provider(app: Flask) -> Any:
    return app.extensions["token_provider"]


@pytest.fixture()
def client(app: Flask, db: Any) -> Any:
    """Flask test client without a cookie jar; tests send cookies explicitly."""
    return app.test_client(use_cookies=False)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`."""
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2026-01-01 12:00:00")

    return _factory
