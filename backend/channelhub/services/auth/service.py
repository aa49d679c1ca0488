# channelhub/services/auth/service.py
from __future__ import annotations

import hmac
import logging

from channelhub.models.user import User
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    AuthenticationError,
    InvalidInputError,
    NotFoundError,
)
from channelhub.services._shared.ports import AccessClaims, TokenFailure, TokenProvider
from channelhub.services.accounts.dto import AccountOut
from channelhub.services.auth.dto import LoginIn, LoginOut, TokenPair

log = logging.getLogger(__name__)

SUPERSEDED = "token-superseded"


def access_claims_for(user: User) -> AccessClaims:
    return AccessClaims(
        account_id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
    )


def parse_subject(subject: str | None) -> int | None:
    """Return the account id carried in a ``sub`` claim, or ``None``."""
    try:
        return int(subject) if subject is not None else None
    except ValueError:
        return None


class AuthService(BaseService):
    """
    Session lifecycle: login, refresh-token rotation and logout.

    Each account stores at most one refresh token. Starting a session
    overwrites it, so a login elsewhere invalidates the previous session's
    refresh token; logout clears it.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and start a session.

        :raises InvalidInputError: If neither username nor email was given.
        :raises NotFoundError: If no account matches.
        :raises AuthenticationError: If the password is wrong.
        """
        if not dto.username and not dto.email:
            raise InvalidInputError("username or email is required")

        with self.ro_uow() as uow:
            user = uow.users.find_by_login(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User", dto.username or dto.email or "", "User does not exist")
            if not user.verify_password(dto.password):
                raise AuthenticationError("Invalid user credentials", reason="bad-password")
            account = AccountOut.from_model(user)
            claims = access_claims_for(user)

        tokens = self._store_new_pair(claims)
        log.info("auth.login", extra={"account_id": account.id})
        return LoginOut(account=account, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Sessions
    # ------------------------------------------------------------------ #

    def start_session(self, account_id: int) -> TokenPair:
        """
        Issue a token pair and make its refresh token the only valid one.

        :raises NotFoundError: If the account does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(account_id)
            if user is None:
                raise NotFoundError("User", account_id, "User does not exist")
            claims = access_claims_for(user)
        return self._store_new_pair(claims)

    def refresh_session(self, presented: str | None) -> TokenPair:
        """
        Exchange a refresh token for a new pair (rotation).

        The presented token must verify, belong to an existing account and
        equal the stored token. The replacement is written with a
        compare-and-swap, so when two requests rotate the same token at once
        exactly one succeeds and the other is told the token was superseded.

        :raises AuthenticationError: With ``reason`` set to the verifier
            failure, ``account-not-found`` or ``token-superseded``.
        """
        if not presented:
            raise AuthenticationError("Unauthorized request", reason=TokenFailure.MISSING.value)
        result = self.tokens.verify_refresh(presented)
        if not result.ok:
            reason = result.reason.value if result.reason else None
            raise AuthenticationError("Invalid refresh token", reason=reason)

        account_id = parse_subject(result.subject)
        if account_id is None:
            raise AuthenticationError("Invalid refresh token", reason=TokenFailure.MALFORMED.value)

        with self.ro_uow() as uow:
            user = uow.users.get(account_id)
            if user is None:
                raise AuthenticationError("Invalid refresh token", reason="account-not-found")
            stored = user.refresh_token
            claims = access_claims_for(user)

        if stored is None or not hmac.compare_digest(stored.encode(), presented.encode()):
            raise AuthenticationError("Refresh token is expired or used", reason=SUPERSEDED)

        pair = self._issue_pair(claims)
        with self.rw_uow() as uow:
            swapped = uow.users.swap_refresh_token(account_id, presented, pair.refresh_token)
        if not swapped:
            raise AuthenticationError("Refresh token is expired or used", reason=SUPERSEDED)

        log.info("auth.refreshed", extra={"account_id": account_id})
        return pair

    def end_session(self, account_id: int) -> None:
        """Clear the stored refresh token. Safe to call repeatedly."""
        with self.rw_uow() as uow:
            uow.users.set_refresh_token(account_id, None)
        log.info("auth.logout", extra={"account_id": account_id})

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _issue_pair(self, claims: AccessClaims) -> TokenPair:
        return TokenPair(
            access_token=self.tokens.issue_access(claims),
            refresh_token=self.tokens.issue_refresh(claims.account_id),
        )

    def _store_new_pair(self, claims: AccessClaims) -> TokenPair:
        pair = self._issue_pair(claims)
        with self.rw_uow() as uow:
            uow.users.set_refresh_token(claims.account_id, pair.refresh_token)
        return pair
