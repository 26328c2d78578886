"""Tests for user validation rules."""

import pytest

from src.modules.users import (
    Credential,
    MissingCredentialError,
    User,
    ValidationError,
)
from src.modules.users.validation import (
    Validator,
    validate_email,
    validate_password_plaintext,
    validate_user,
)


@pytest.fixture(scope="module")
def credential() -> Credential:
    """A credential shared by tests that only need one to be present."""
    return Credential.from_plaintext("pa55word", rounds=4)


class TestValidator:
    """Tests for the error-collecting Validator."""

    def test_starts_valid(self) -> None:
        """A fresh validator has no errors."""
        assert Validator().valid()

    def test_keeps_first_error_per_field(self) -> None:
        """Should keep only the first message recorded for a field."""
        v = Validator()
        v.add_error("email", "must be provided")
        v.add_error("email", "must be a valid email address")

        assert v.errors == {"email": "must be provided"}

    def test_raise_if_invalid(self) -> None:
        """Should raise ValidationError carrying every field error."""
        v = Validator()
        v.check(False, "name", "must be provided")
        v.check(False, "email", "must be provided")

        with pytest.raises(ValidationError) as exc_info:
            v.raise_if_invalid()

        assert exc_info.value.errors == {
            "name": "must be provided",
            "email": "must be provided",
        }
        assert exc_info.value.field == "name"
        assert exc_info.value.reason == "must be provided"

    def test_raise_if_invalid_noop_when_valid(self) -> None:
        """Should not raise when every check passed."""
        v = Validator()
        v.check(True, "name", "must be provided")

        v.raise_if_invalid()


class TestValidateEmail:
    """Tests for email validation."""

    @pytest.mark.parametrize(
        "email",
        ["alice@example.com", "a.b+tag@sub.example.co.uk", "Bob@Mail.Example.org"],
    )
    def test_valid_emails(self, email: str) -> None:
        """Should accept well-formed addresses."""
        v = Validator()
        validate_email(v, email)
        assert v.valid()

    def test_empty_email(self) -> None:
        """Should report a missing email."""
        v = Validator()
        validate_email(v, "")
        assert v.errors == {"email": "must be provided"}

    @pytest.mark.parametrize(
        "email",
        [
            "no-at-sign",
            "@example.com",
            "alice@",
            "alice@-example.com",
            "a b@c.com",
            "x@localhost",
        ],
    )
    def test_malformed_emails(self, email: str) -> None:
        """Should reject malformed addresses."""
        v = Validator()
        validate_email(v, email)
        assert v.errors == {"email": "must be a valid email address"}


class TestValidatePasswordPlaintext:
    """Tests for password length rules."""

    @pytest.mark.parametrize("length", [8, 9, 40, 71, 72])
    def test_accepts_lengths_in_range(self, length: int) -> None:
        """Should accept passwords of 8 to 72 bytes."""
        v = Validator()
        validate_password_plaintext(v, "p" * length)
        assert v.valid()

    @pytest.mark.parametrize("length", [1, 7, 73, 100])
    def test_rejects_lengths_out_of_range(self, length: int) -> None:
        """Should reject passwords shorter than 8 or longer than 72 bytes."""
        v = Validator()
        validate_password_plaintext(v, "p" * length)
        assert set(v.errors) == {"password"}

    def test_empty_password(self) -> None:
        """Should report a missing password."""
        v = Validator()
        validate_password_plaintext(v, "")
        assert v.errors == {"password": "must be provided"}

    def test_counts_bytes_not_characters(self) -> None:
        """Multi-byte characters count by their UTF-8 size."""
        v = Validator()
        validate_password_plaintext(v, "é" * 36)  # 72 bytes
        assert v.valid()

        v = Validator()
        validate_password_plaintext(v, "é" * 37)  # 74 bytes
        assert v.errors == {"password": "must not be more than 72 bytes long"}

        v = Validator()
        validate_password_plaintext(v, "é" * 4)  # 8 bytes, 4 characters
        assert v.valid()


class TestValidateUser:
    """Tests for whole-user validation."""

    def test_valid_user(self, credential: Credential) -> None:
        """Should accept a complete user."""
        user = User(name="Alice", email="alice@example.com", credential=credential)

        v = Validator()
        validate_user(v, user)
        assert v.valid()

    def test_name_required(self, credential: Credential) -> None:
        """Should report a missing name."""
        user = User(name="", email="alice@example.com", credential=credential)

        v = Validator()
        validate_user(v, user)
        assert v.errors == {"name": "must be provided"}

    def test_name_too_long(self, credential: Credential) -> None:
        """Should reject names over 500 bytes."""
        user = User(name="n" * 501, email="alice@example.com", credential=credential)

        v = Validator()
        validate_user(v, user)
        assert v.errors == {"name": "must not be more than 500 bytes long"}

    def test_name_at_limit(self, credential: Credential) -> None:
        """Should accept a 500-byte name."""
        user = User(name="n" * 500, email="alice@example.com", credential=credential)

        v = Validator()
        validate_user(v, user)
        assert v.valid()

    def test_composes_email_validation(self, credential: Credential) -> None:
        """Should include email errors."""
        user = User(name="Alice", email="nope", credential=credential)

        v = Validator()
        validate_user(v, user)
        assert v.errors == {"email": "must be a valid email address"}

    def test_checks_password_when_given(self) -> None:
        """Should validate the plaintext supplied in the same call."""
        user = User(name="Alice", email="alice@example.com")

        v = Validator()
        validate_user(v, user, password="short")
        assert v.errors == {"password": "must be at least 8 bytes long"}

    def test_reports_all_fields_together(self) -> None:
        """Should collect errors for every failing field in one pass."""
        user = User(name="", email="", credential=None)

        v = Validator()
        validate_user(v, user, password="")
        assert set(v.errors) == {"name", "email", "password"}

    def test_missing_credential_is_a_defect(self) -> None:
        """Should fail loudly when neither credential nor password is present."""
        user = User(name="Alice", email="alice@example.com")

        with pytest.raises(MissingCredentialError):
            validate_user(Validator(), user)

    def test_missing_credential_is_not_a_validation_error(self) -> None:
        """The precondition failure must not be catchable as ValidationError."""
        assert not issubclass(MissingCredentialError, ValidationError)
        assert issubclass(MissingCredentialError, RuntimeError)
