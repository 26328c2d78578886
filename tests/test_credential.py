"""Tests for password credentials."""

import pytest

from src.modules.users import (
    Credential,
    HashingError,
    VerificationError,
)

# Minimum bcrypt cost keeps the suite fast
ROUNDS = 4


class TestCredential:
    """Tests for the Credential value."""

    def test_matches_original_password(self) -> None:
        """Should match the password it was derived from."""
        credential = Credential.from_plaintext("correct horse", rounds=ROUNDS)

        assert credential.matches("correct horse")

    def test_rejects_extended_password(self) -> None:
        """Should not match the password with an extra character."""
        credential = Credential.from_plaintext("correct horse", rounds=ROUNDS)

        assert not credential.matches("correct horsex")

    def test_rejects_other_password(self) -> None:
        """Should return False, not raise, for a wrong password."""
        credential = Credential.from_plaintext("correct horse", rounds=ROUNDS)

        assert credential.matches("battery staple") is False

    def test_max_length_password_rejects_extension(self) -> None:
        """A 72-byte password plus one byte must not match."""
        password = "p" * 72
        credential = Credential.from_plaintext(password, rounds=ROUNDS)

        assert credential.matches(password)
        assert not credential.matches(password + "x")

    def test_hash_is_bcrypt(self) -> None:
        """Should store a bcrypt hash, not the plaintext."""
        credential = Credential.from_plaintext("pa55word", rounds=ROUNDS)

        assert credential.hash.startswith(b"$2")
        assert b"pa55word" not in credential.hash

    def test_hashes_are_salted(self) -> None:
        """Should produce different hashes for the same password."""
        first = Credential.from_plaintext("same_password", rounds=ROUNDS)
        second = Credential.from_plaintext("same_password", rounds=ROUNDS)

        assert first.hash != second.hash
        assert first.matches("same_password")
        assert second.matches("same_password")

    def test_too_long_password_fails_to_hash(self) -> None:
        """Should refuse passwords over bcrypt's 72-byte limit."""
        with pytest.raises(HashingError):
            Credential.from_plaintext("p" * 73, rounds=ROUNDS)

    def test_limit_counts_bytes(self) -> None:
        """Should measure the limit in UTF-8 bytes, not characters."""
        with pytest.raises(HashingError):
            Credential.from_plaintext("é" * 37, rounds=ROUNDS)

    def test_corrupt_hash_raises(self) -> None:
        """Should raise VerificationError for a malformed stored hash."""
        credential = Credential(hash=b"not-a-bcrypt-hash")

        with pytest.raises(VerificationError):
            credential.matches("anything")

    def test_empty_hash_rejected(self) -> None:
        """Should not allow a credential without a hash."""
        with pytest.raises(ValueError, match="must not be empty"):
            Credential(hash=b"")

    def test_repr_hides_hash(self) -> None:
        """Should keep the hash out of repr output."""
        credential = Credential.from_plaintext("pa55word", rounds=ROUNDS)

        assert credential.hash.decode() not in repr(credential)

    def test_is_immutable(self) -> None:
        """Should not allow replacing the hash in place."""
        credential = Credential.from_plaintext("pa55word", rounds=ROUNDS)

        with pytest.raises(AttributeError):
            credential.hash = b"other"  # type: ignore[misc]
