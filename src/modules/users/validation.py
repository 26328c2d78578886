"""Field-level validation rules for users and passwords."""

from email_validator import EmailNotValidError
from email_validator import validate_email as check_email_address

from src.modules.users.exceptions import MissingCredentialError, ValidationError
from src.modules.users.models import User

MIN_PASSWORD_BYTES = 8
MAX_PASSWORD_BYTES = 72
MAX_NAME_BYTES = 500


class Validator:
    """Collects field errors so a caller can report all of them at once.

    Only the first error recorded for a field is kept.
    """

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)

    def raise_if_invalid(self) -> None:
        """Raise ValidationError carrying every recorded field error.

        Raises:
            ValidationError: If any check failed.
        """
        if self.errors:
            raise ValidationError(self.errors)


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_email(v: Validator, email: str) -> None:
    """Check that an email address is present and syntactically valid.

    Only the syntax is checked; no DNS lookup is made.
    """
    if email == "":
        v.add_error("email", "must be provided")
        return

    try:
        check_email_address(email, check_deliverability=False)
    except EmailNotValidError:
        v.add_error("email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    size = _byte_length(password)
    v.check(password != "", "password", "must be provided")
    v.check(size >= MIN_PASSWORD_BYTES, "password", "must be at least 8 bytes long")
    v.check(
        size <= MAX_PASSWORD_BYTES, "password", "must not be more than 72 bytes long"
    )


def validate_user(v: Validator, user: User, *, password: str | None = None) -> None:
    """Check a candidate user before it is handed to a store.

    Args:
        v: Validator collecting the errors.
        user: The candidate user.
        password: Plaintext password supplied in this call, if any. It is
            checked only when given and never stored on the user.

    Raises:
        MissingCredentialError: If the user has neither a credential nor a
            plaintext password. Callers must set one before validating.
    """
    v.check(user.name != "", "name", "must be provided")
    v.check(
        _byte_length(user.name) <= MAX_NAME_BYTES,
        "name",
        "must not be more than 500 bytes long",
    )

    validate_email(v, user.email)

    if password is not None:
        validate_password_plaintext(v, password)

    if user.credential is None and password is None:
        raise MissingCredentialError()
