from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Value of the ``type`` claim; each kind has its own signing secret."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenFailure(str, Enum):
    """Why a presented token was rejected."""

    EXPIRED = "expired"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad-signature"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """Identity claims embedded in an access token."""

    account_id: int
    username: str
    email: str
    full_name: str


@dataclass(frozen=True, slots=True)
class TokenVerification:
    """
    Outcome of verifying a token.

    :param ok: ``True`` when signature, expiry and type all check out.
    :param claims: Decoded payload (empty on failure).
    :param reason: Failure cause, ``None`` on success.
    """

    ok: bool
    claims: Mapping[str, Any] = field(default_factory=dict)
    reason: TokenFailure | None = None

    @property
    def subject(self) -> str | None:
        sub = self.claims.get("sub")
        return str(sub) if sub is not None else None


class TokenProvider(Protocol):
    """Port for issuing and verifying access and refresh tokens."""

    def issue_access(self, claims: AccessClaims) -> str: ...

    def issue_refresh(self, account_id: int) -> str: ...

    def verify_access(self, token: str | None) -> TokenVerification: ...

    def verify_refresh(self, token: str | None) -> TokenVerification: ...
