"""User repository: lookups, profile updates and refresh-token storage."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from channelhub.models.user import User
from channelhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never signs or verifies tokens; it only stores the one refresh token
    an account currently accepts.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        """Publicly allowed updatable fields (not including password)."""
        return {"full_name", "email", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive, trimmed)."""
        stmt = select(User).where(User.username == username.strip().lower())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_login(self, *, username: str | None, email: str | None) -> User | None:
        """Fetch the account matching ``username`` or ``email``.

        Either value may be ``None``; at least one must be given.

        :returns: Matching user or ``None``.
        """
        clauses = []
        if username:
            clauses.append(User.username == username.strip().lower())
        if email:
            clauses.append(User.email == email.strip().lower())
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username_or_email(self, *, username: str, email: str) -> bool:
        """Return ``True`` when either identifier is already registered."""
        stmt = select(User.id).where(
            or_(
                User.username == username.strip().lower(),
                User.email == email.strip().lower(),
            )
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` if another account already uses ``email``."""
        stmt = select(User.id).where(User.email == email.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Refresh token ----------------------------

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite (or clear, with ``None``) the stored refresh token.

        :returns: ``True`` if the account exists.
        """
        stmt = update(User).where(User.id == user_id).values(refresh_token=token)
        return self.session.execute(stmt).rowcount == 1

    def swap_refresh_token(self, user_id: int, expected: str, new: str) -> bool:
        """Replace the stored refresh token only if it still equals ``expected``.

        A single conditional ``UPDATE`` makes two concurrent rotations of the
        same token race at the database: exactly one sees a matched row.

        :returns: ``True`` if this call performed the swap.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new)
        )
        return self.session.execute(stmt).rowcount == 1
