# channelhub/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from channelhub.services.accounts.dto import AccountOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Channel handle; optional when ``email`` is given.
    :param email: Email address; optional when ``username`` is given.
    :param password: Raw password (to be verified).
    """

    password: str
    username: str | None = None
    email: str | None = None


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    account: AccountOut
    tokens: TokenPair


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    Identity established for one request.

    :param account: The authenticated account, without secrets.
    :param claims: Verified access-token claims.
    """

    account: AccountOut
    claims: Mapping[str, Any]
