"""Tests for login, refresh-token rotation and logout."""

from __future__ import annotations

import pytest
from channelhub.core.extensions import db
from channelhub.models.user import User
from channelhub.repositories.user import UserRepository
from channelhub.services._shared.errors import (
    AuthenticationError,
    ErrorKind,
    InvalidInputError,
    NotFoundError,
)
from channelhub.services.auth import AuthService, LoginIn

from tests.factories.user import DEFAULT_PASSWORD, UserFactory


def _stored_token(user_id: int) -> str | None:
    db.session.expire_all()
    return db.session.get(User, user_id).refresh_token


class TestAuthService:
    """Validate the session state kept on the account row."""

    @pytest.fixture()
    def service(self, token_provider) -> AuthService:
        return AuthService(token_provider=token_provider)

    @pytest.fixture()
    def user(self) -> User:
        return UserFactory(username="alice")

    # --------------------------------------------------------------------- #
    # Login
    # --------------------------------------------------------------------- #

    def test_login_by_username_stores_refresh_token(self, service, user):
        result = service.login(LoginIn(username="alice", password=DEFAULT_PASSWORD))

        assert result.account.id == user.id
        assert result.tokens.access_token != result.tokens.refresh_token
        assert _stored_token(user.id) == result.tokens.refresh_token

    def test_login_by_email_is_case_insensitive(self, service, user):
        result = service.login(LoginIn(email="ALICE@example.com", password=DEFAULT_PASSWORD))
        assert result.account.username == "alice"

    def test_login_unknown_account(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.login(LoginIn(username="ghost", password="whatever"))
        assert exc.value.message == "User does not exist"

    def test_login_wrong_password(self, service, user):
        with pytest.raises(AuthenticationError) as exc:
            service.login(LoginIn(username="alice", password="wrong"))
        assert exc.value.kind is ErrorKind.UNAUTHORIZED
        assert exc.value.message == "Invalid user credentials"
        assert _stored_token(user.id) is None

    def test_login_requires_an_identifier(self, service):
        with pytest.raises(InvalidInputError):
            service.login(LoginIn(password="pw"))

    # --------------------------------------------------------------------- #
    # Rotation
    # --------------------------------------------------------------------- #

    def test_refresh_rotates_the_stored_token(self, service, user):
        first = service.start_session(user.id)

        second = service.refresh_session(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert _stored_token(user.id) == second.refresh_token

    def test_rotated_token_cannot_be_replayed(self, service, user):
        first = service.start_session(user.id)
        service.refresh_session(first.refresh_token)

        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(first.refresh_token)
        assert exc.value.reason == "token-superseded"

    def test_new_login_supersedes_previous_session(self, service, user):
        old = service.start_session(user.id)
        service.start_session(user.id)

        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(old.refresh_token)
        assert exc.value.reason == "token-superseded"

    def test_access_token_is_not_a_refresh_token(self, service, user):
        pair = service.start_session(user.id)

        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(pair.access_token)
        assert exc.value.reason == "bad-signature"

    def test_missing_refresh_token(self, service):
        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(None)
        assert exc.value.message == "Unauthorized request"
        assert exc.value.reason == "missing"

    def test_refresh_with_expired_token(self, service, user, freeze_time):
        with freeze_time("2026-01-01 12:00:00"):
            pair = service.start_session(user.id)

        # One day past the seven-day refresh lifetime.
        with freeze_time("2026-01-09 12:00:00"):
            with pytest.raises(AuthenticationError) as exc:
                service.refresh_session(pair.refresh_token)
        assert exc.value.message == "Invalid refresh token"
        assert exc.value.reason == "expired"

    def test_refresh_for_deleted_account(self, service, user, session):
        pair = service.start_session(user.id)
        session.delete(session.get(User, user.id))
        session.commit()

        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(pair.refresh_token)
        assert exc.value.reason == "account-not-found"

    def test_concurrent_rotation_loser_is_superseded(self, service, user, monkeypatch):
        pair = service.start_session(user.id)
        real_swap = UserRepository.swap_refresh_token

        def racing_swap(repo, user_id, expected, new):
            # Another request wins the compare-and-swap between our read and write.
            assert real_swap(repo, user_id, expected, "winner-token") is True
            return real_swap(repo, user_id, expected, new)

        monkeypatch.setattr(UserRepository, "swap_refresh_token", racing_swap)

        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(pair.refresh_token)

        assert exc.value.reason == "token-superseded"
        assert _stored_token(user.id) == "winner-token"

    # --------------------------------------------------------------------- #
    # Logout
    # --------------------------------------------------------------------- #

    def test_end_session_clears_token_and_is_idempotent(self, service, user):
        pair = service.start_session(user.id)

        service.end_session(user.id)
        service.end_session(user.id)

        assert _stored_token(user.id) is None
        with pytest.raises(AuthenticationError) as exc:
            service.refresh_session(pair.refresh_token)
        assert exc.value.reason == "token-superseded"

    def test_start_session_unknown_account(self, service):
        with pytest.raises(NotFoundError):
            service.start_session(9999)
