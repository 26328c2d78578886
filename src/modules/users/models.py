"""User domain models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

from src.modules.users.credential import Credential


@dataclass
class User:
    """User domain model.

    Attributes:
        name: Display name.
        email: Unique email address.
        credential: Hashed password, or None until one has been set.
        activated: Whether the account has been activated.
        id: Identifier assigned by the store on insert (0 before).
        created_at: When the store created the user (None before insert).
        version: Optimistic-concurrency counter; 1 after insert and
            incremented by the store on each accepted update.
    """

    name: str = ""
    email: str = ""
    credential: Credential | None = None
    activated: bool = False
    id: int = 0
    created_at: datetime | None = None
    version: int = 0

    def set_password(self, plaintext: str, *, rounds: int | None = None) -> None:
        """Replace the user's credential with a hash of a new password.

        Args:
            plaintext: The new password.
            rounds: Optional bcrypt cost factor override.

        Raises:
            HashingError: If the password cannot be hashed.
        """
        if rounds is None:
            self.credential = Credential.from_plaintext(plaintext)
        else:
            self.credential = Credential.from_plaintext(plaintext, rounds=rounds)

    def is_anonymous(self) -> bool:
        """A stored or in-memory user is never the anonymous identity."""
        return False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        """Create a User from a database row.

        Args:
            row: Database row as a dictionary.

        Returns:
            User instance.
        """
        return cls(
            id=int(row["id"]),
            created_at=datetime.fromisoformat(str(row["created_at"])),
            name=str(row["name"]),
            email=str(row["email"]),
            credential=Credential(hash=bytes(row["password_hash"])),
            activated=bool(row["activated"]),
            version=int(row["version"]),
        )


@dataclass(frozen=True)
class Anonymous:
    """The identity of a request that presented no credentials."""

    def is_anonymous(self) -> bool:
        return True


@dataclass(frozen=True)
class Authenticated:
    """The identity of a request made on behalf of a known user."""

    user: User

    def is_anonymous(self) -> bool:
        return False


Identity = Anonymous | Authenticated

ANONYMOUS: Final = Anonymous()
