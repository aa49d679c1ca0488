# channelhub/services/accounts/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from channelhub.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param full_name: Display name.
    :param email: Email address (normalized by the model).
    :param username: Channel handle (normalized by the model).
    :param password: Raw password; hashed on assignment.
    """

    full_name: str
    email: str
    username: str
    password: str


@dataclass(frozen=True, slots=True)
class UpdateDetailsIn:
    full_name: str
    email: str


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountOut:
    """
    Public view of an account.

    Carries no password hash and no refresh token, so it is safe to render
    anywhere.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> AccountOut:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
