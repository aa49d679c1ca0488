# channelhub/services/auth/gate.py
from __future__ import annotations

from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import AuthenticationError
from channelhub.services._shared.ports import TokenFailure, TokenProvider
from channelhub.services.accounts.dto import AccountOut
from channelhub.services.auth.dto import AuthContext
from channelhub.services.auth.service import parse_subject


class AuthenticationGate(BaseService):
    """
    Decide whether a request is authenticated.

    A request is authenticated iff it presents an access token that
    verifies with the access secret and whose subject is an existing
    account. Everything else is rejected with a 401-kind error; the precise
    cause travels in ``AuthenticationError.reason`` for the logs.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        self.tokens = token_provider

    def authenticate(self, token: str | None) -> AuthContext:
        """
        :param token: Access token from the cookie or bearer header.
        :returns: Immutable context for the current request.
        :raises AuthenticationError: When no identity can be established.
        """
        result = self.tokens.verify_access(token)
        if not result.ok:
            if result.reason is TokenFailure.MISSING:
                raise AuthenticationError("Unauthorized request", reason=result.reason.value)
            reason = result.reason.value if result.reason else None
            raise AuthenticationError("Invalid access token", reason=reason)

        account_id = parse_subject(result.subject)
        if account_id is None:
            raise AuthenticationError("Invalid access token", reason=TokenFailure.MALFORMED.value)

        with self.ro_uow() as uow:
            user = uow.users.get(account_id)
            if user is None:
                raise AuthenticationError("Invalid access token", reason="account-not-found")
            account = AccountOut.from_model(user)

        return AuthContext(account=account, claims=dict(result.claims))
