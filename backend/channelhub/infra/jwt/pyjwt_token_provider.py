# channelhub/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from channelhub.core.config import TokenSettings
from channelhub.services._shared.ports import (
    AccessClaims,
    TokenFailure,
    TokenKind,
    TokenProvider,
    TokenVerification,
)

log = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "type", "iat", "exp", "jti"]


class JWTTokenProvider(TokenProvider):
    """
    Adapter issuing and verifying HS256 JWTs with PyJWT.

    Access and refresh tokens are signed with different secrets, so a token
    of one kind never verifies as the other even before the ``type`` claim
    is inspected.

    :param settings: Secrets, lifetimes and algorithm, fixed at startup.
    """

    def __init__(self, settings: TokenSettings) -> None:
        self.settings = settings

    # ------------------------------ Issuing --------------------------------

    def _encode(
        self, *, subject: int, kind: TokenKind, ttl: timedelta, secret: str, extra: dict[str, Any]
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject),
            **extra,
            "type": kind.value,
            "iat": now,
            "exp": now + ttl,
            # Unique per call: identical claims never produce the same token.
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def issue_access(self, claims: AccessClaims) -> str:
        """Sign an access token carrying the account's public identity."""
        return self._encode(
            subject=claims.account_id,
            kind=TokenKind.ACCESS,
            ttl=self.settings.access_ttl,
            secret=self.settings.access_secret,
            extra={
                "username": claims.username,
                "email": claims.email,
                "fullName": claims.full_name,
            },
        )

    def issue_refresh(self, account_id: int) -> str:
        """Sign a refresh token; it identifies the account and nothing else."""
        return self._encode(
            subject=account_id,
            kind=TokenKind.REFRESH,
            ttl=self.settings.refresh_ttl,
            secret=self.settings.refresh_secret,
            extra={},
        )

    # ----------------------------- Verifying -------------------------------

    def verify(
        self, token: str | None, secret: str, *, expected_type: TokenKind | None = None
    ) -> TokenVerification:
        """
        Check signature, expiry and (optionally) the ``type`` claim.

        The signature is checked before the claims, so a token signed with
        another secret reports ``bad-signature`` even when it is also expired.

        :param token: Compact JWT, or ``None``/empty when nothing was sent.
        :param secret: Key the token must be signed with.
        :param expected_type: Required ``type`` claim, if any.
        :returns: Verification result; never raises for bad input.
        """
        if not token:
            return TokenVerification(ok=False, reason=TokenFailure.MISSING)
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            return TokenVerification(ok=False, reason=TokenFailure.EXPIRED)
        except jwt.InvalidSignatureError:
            return TokenVerification(ok=False, reason=TokenFailure.BAD_SIGNATURE)
        except jwt.InvalidTokenError as exc:
            log.debug("token.malformed: %s", exc)
            return TokenVerification(ok=False, reason=TokenFailure.MALFORMED)

        if expected_type is not None and claims.get("type") != expected_type.value:
            return TokenVerification(ok=False, reason=TokenFailure.MALFORMED)
        return TokenVerification(ok=True, claims=claims)

    def verify_access(self, token: str | None) -> TokenVerification:
        return self.verify(token, self.settings.access_secret, expected_type=TokenKind.ACCESS)

    def verify_refresh(self, token: str | None) -> TokenVerification:
        return self.verify(token, self.settings.refresh_secret, expected_type=TokenKind.REFRESH)
