"""Tests for the password hasher."""

from __future__ import annotations

import pytest
from channelhub.core.security import PasswordHasher


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(method="pbkdf2:sha256:1000")


class TestPasswordHasher:
    def test_hash_round_trip(self, hasher):
        digest = hasher.hash("correct horse")
        assert digest != "correct horse"
        assert hasher.verify("correct horse", digest) is True

    def test_wrong_password_is_rejected(self, hasher):
        digest = hasher.hash("correct horse")
        assert hasher.verify("battery staple", digest) is False

    def test_hashing_is_salted(self, hasher):
        assert hasher.hash("same") != hasher.hash("same")

    def test_digest_encodes_work_factor(self, hasher):
        assert hasher.hash("pw").startswith("pbkdf2:sha256:1000$")

    @pytest.mark.parametrize("bad", ["", None, 123])
    def test_hash_rejects_empty_or_non_string(self, hasher, bad):
        with pytest.raises(ValueError):
            hasher.hash(bad)

    @pytest.mark.parametrize("digest", [None, "", "not-a-digest", "md5$salt$abc"])
    def test_verify_never_raises_on_bad_digest(self, hasher, digest):
        assert hasher.verify("pw", digest) is False

    def test_verify_empty_plaintext_is_false(self, hasher):
        assert hasher.verify("", hasher.hash("pw")) is False
