# channelhub/services/accounts/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from channelhub.models.user import User
from channelhub.services._shared.base import BaseService
from channelhub.services._shared.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from channelhub.services._shared.ports import LocalFile, MediaStore
from channelhub.services.accounts.dto import AccountOut, RegisterIn, UpdateDetailsIn

log = logging.getLogger(__name__)

DUPLICATE_ACCOUNT = "User with email or username already exists"


class AccountService(BaseService):
    """
    Account lifecycle: registration and authenticated profile changes.

    Media files are pushed to the media host *before* the database
    transaction opens, so no row lock is held across a network round trip.
    """

    def __init__(self, *, media_store: MediaStore) -> None:
        self.media = media_store

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(
        self,
        dto: RegisterIn,
        *,
        avatar: LocalFile | None,
        cover_image: LocalFile | None = None,
    ) -> AccountOut:
        """
        Create an account.

        Checks run in this order: duplicate identity, avatar presence, then
        uploads. A duplicate is reported even when no avatar was sent.

        :raises ConflictError: If the username or email is taken.
        :raises InvalidInputError: If no avatar was provided.
        :raises UpstreamError: If the media host rejects an upload.
        """
        with self.ro_uow() as uow:
            if uow.users.exists_by_username_or_email(username=dto.username, email=dto.email):
                raise ConflictError(DUPLICATE_ACCOUNT)

        if avatar is None:
            raise InvalidInputError("Avatar file is required")

        avatar_url = self.media.upload(avatar).url
        cover_url = self.media.upload(cover_image).url if cover_image is not None else None

        try:
            with self.rw_uow() as uow:
                user = User(
                    full_name=dto.full_name,
                    email=dto.email,
                    username=dto.username,
                    avatar=avatar_url,
                    cover_image=cover_url,
                )
                user.password = dto.password
                uow.users.add(user)
                out = AccountOut.from_model(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration.
            raise ConflictError(DUPLICATE_ACCOUNT) from exc

        log.info("account.registered", extra={"account_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def change_password(self, account_id: int, *, old_password: str, new_password: str) -> None:
        """
        Replace the password after re-checking the current one.

        :raises InvalidInputError: If ``old_password`` does not match or
            ``new_password`` is empty.
        """
        if not new_password:
            raise InvalidInputError("New password is required")
        with self.rw_uow() as uow:
            user = self._load(uow, account_id)
            if not user.verify_password(old_password):
                raise InvalidInputError("Invalid old password")
            user.password = new_password
        log.info("account.password_changed", extra={"account_id": account_id})

    def update_details(self, account_id: int, dto: UpdateDetailsIn) -> AccountOut:
        """
        Update the display name and email.

        :raises InvalidInputError: If either field is blank.
        :raises ConflictError: If another account already uses the email.
        """
        if not dto.full_name.strip() or not dto.email.strip():
            raise InvalidInputError("All fields are required")
        try:
            with self.rw_uow() as uow:
                if uow.users.email_taken(dto.email, exclude_id=account_id):
                    raise ConflictError("Email is already in use")
                user = self._load(uow, account_id)
                uow.users.update(user, full_name=dto.full_name, email=dto.email)
                out = AccountOut.from_model(user)
        except IntegrityError as exc:
            raise ConflictError("Email is already in use") from exc
        return out

    def update_avatar(self, account_id: int, file: LocalFile | None) -> AccountOut:
        """:raises InvalidInputError: If no file was sent."""
        if file is None:
            raise InvalidInputError("Avatar file is missing")
        return self._replace_media(account_id, "avatar", file)

    def update_cover_image(self, account_id: int, file: LocalFile | None) -> AccountOut:
        """:raises InvalidInputError: If no file was sent."""
        if file is None:
            raise InvalidInputError("Cover image file is missing")
        return self._replace_media(account_id, "cover_image", file)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _replace_media(self, account_id: int, field: str, file: LocalFile) -> AccountOut:
        url = self.media.upload(file).url
        with self.rw_uow() as uow:
            user = self._load(uow, account_id)
            uow.users.update(user, **{field: url})
            return AccountOut.from_model(user)

    @staticmethod
    def _load(uow, account_id: int) -> User:
        user = uow.users.get(account_id)
        if user is None:
            raise NotFoundError("User", account_id, "User does not exist")
        return user
