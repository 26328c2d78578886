"""Password credentials backed by bcrypt."""

from dataclasses import dataclass, field

import bcrypt

from src.modules.users.exceptions import HashingError, VerificationError

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True, slots=True)
class Credential:
    """A user's password, held only as a salted one-way bcrypt hash.

    The plaintext is never stored on this object. It exists only as an
    argument to from_plaintext() and matches(), so a Credential can be
    persisted or logged without carrying the secret.

    Attributes:
        hash: The bcrypt hash, including its algorithm prefix, cost and salt.
    """

    hash: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not self.hash:
            raise ValueError("Credential hash must not be empty")

    @classmethod
    def from_plaintext(
        cls, plaintext: str, *, rounds: int = DEFAULT_ROUNDS
    ) -> "Credential":
        """Hash a plaintext password into a new credential.

        Args:
            plaintext: The password supplied by the user.
            rounds: bcrypt cost factor (log2 of the iteration count).

        Returns:
            Credential holding the new hash.

        Raises:
            HashingError: If the password exceeds bcrypt's input limit, or
                salt generation or hashing fails.
        """
        secret = plaintext.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise HashingError(
                f"Password must not be more than {MAX_PASSWORD_BYTES} bytes long"
            )

        try:
            hashed = bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds))
        except (ValueError, OSError) as e:
            raise HashingError("Failed to hash password") from e

        return cls(hash=hashed)

    def matches(self, candidate: str) -> bool:
        """Check a candidate plaintext password against the stored hash.

        The comparison is done by bcrypt.checkpw, which compares digests
        in constant time.

        Args:
            candidate: Plaintext password to check.

        Returns:
            True if the password matches, False otherwise.

        Raises:
            VerificationError: If the stored hash is malformed.
        """
        secret = candidate.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            # Nothing this long could have been hashed in the first place
            return False

        try:
            return bcrypt.checkpw(secret, self.hash)
        except ValueError as e:
            raise VerificationError("Stored password hash is invalid") from e
