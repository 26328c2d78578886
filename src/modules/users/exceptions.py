"""User module exceptions."""

from enum import StrEnum


class UserError(Exception):
    """Base exception for recoverable user and credential errors."""

    pass


class ValidationError(UserError):
    """Raised when caller input fails field-level validation.

    Attributes:
        errors: Mapping of field name to the first failure message for it.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        if not errors:
            raise ValueError("ValidationError requires at least one field error")
        self.errors = dict(errors)
        detail = ", ".join(f"{name}: {msg}" for name, msg in self.errors.items())
        super().__init__(f"Validation failed ({detail})")

    @property
    def field(self) -> str:
        """Name of the first field that failed."""
        return next(iter(self.errors))

    @property
    def reason(self) -> str:
        """Message for the first field that failed."""
        return self.errors[self.field]


class DuplicateEmailError(UserError):
    """Raised when an email address is already used by another user."""

    def __init__(self) -> None:
        super().__init__("Duplicate email")


class NotFoundError(UserError):
    """Raised when no user matches a lookup."""

    def __init__(self, lookup: str) -> None:
        self.lookup = lookup
        super().__init__(f"User not found by {lookup}")


class EditConflictError(UserError):
    """Raised when an update lost an optimistic-concurrency race.

    The stored row either changed since the caller read it or no longer
    exists. The caller should re-fetch and retry.
    """

    def __init__(self, user_id: int, version: int) -> None:
        self.user_id = user_id
        self.version = version
        super().__init__(f"Edit conflict on user {user_id} at version {version}")


class StoreErrorKind(StrEnum):
    """Classification of infrastructure failures in the user store."""

    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class StoreError(UserError):
    """Raised for infrastructure failures. Retryable, not user-actionable."""

    def __init__(self, kind: StoreErrorKind, operation: str) -> None:
        self.kind = kind
        self.operation = operation
        super().__init__(f"User store {operation} failed: {kind.value}")


class InvalidCredentialsError(UserError):
    """Raised when an email/password pair or a token does not authenticate."""

    pass


class HashingError(UserError):
    """Raised when a password cannot be hashed."""

    pass


class VerificationError(UserError):
    """Raised when a stored password hash cannot be checked at all."""

    pass


class MissingCredentialError(RuntimeError):
    """Raised when a user reaches validation or storage without a credential.

    This is a programming defect, not a recoverable condition, so it does
    not derive from UserError.
    """

    def __init__(self) -> None:
        super().__init__("missing password hash for user")
