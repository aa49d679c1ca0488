"""Password hashing built on :mod:`werkzeug.security`."""

from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


@dataclass(frozen=True, slots=True)
class PasswordHasher:
    """
    Salted one-way password hashing with a tunable work factor.

    :param method: Werkzeug method string, e.g. ``"scrypt"``,
        ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``. The numbers
        are the cost parameters; raising them makes each hash slower.
    :param salt_length: Length of the random salt.
    """

    method: str = DEFAULT_METHOD
    salt_length: int = 16

    def hash(self, plaintext: str) -> str:
        """
        Hash ``plaintext``.

        :raises ValueError: If ``plaintext`` is empty or not a string.
        """
        if not isinstance(plaintext, str) or not plaintext:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """
        Return ``True`` iff ``plaintext`` matches ``digest``.

        Never raises: empty input, a missing digest or a digest in an
        unknown format all yield ``False``.
        """
        if not isinstance(plaintext, str) or not plaintext or not digest:
            return False
        try:
            return bool(check_password_hash(digest, plaintext))
        except ValueError:
            return False
