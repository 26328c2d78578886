"""Protocol definition for user stores."""

from typing import Protocol

from src.modules.users.models import User
from src.modules.users.tokens import TokenScope


class UserStore(Protocol):
    """Protocol for user store implementations.

    Implementations persist users and look them up by email or by an
    issued token. Every method raises only the exceptions from
    src.modules.users.exceptions, never backend-specific errors.
    """

    async def insert(self, user: User) -> None:
        """Persist a new user.

        On success the user's id, created_at and version (1) are set.

        Args:
            user: The validated user, with a credential set.

        Raises:
            DuplicateEmailError: If the email is already taken.
            StoreError: On infrastructure failure.
        """
        ...

    async def get_by_email(self, email: str) -> User:
        """Fetch the user registered under an email address.

        Args:
            email: Email address to look up.

        Returns:
            The matching user.

        Raises:
            NotFoundError: If no user has this email.
            StoreError: On infrastructure failure.
        """
        ...

    async def get_for_token(self, scope: TokenScope, plaintext_token: str) -> User:
        """Fetch the user owning an unexpired token of the given scope.

        Args:
            scope: Purpose the token must have been issued for.
            plaintext_token: The token as presented by the client.

        Returns:
            The token's user.

        Raises:
            NotFoundError: If the token is unknown, expired or of another scope.
            StoreError: On infrastructure failure.
        """
        ...

    async def update(self, user: User) -> None:
        """Write a modified user back if nobody else changed it first.

        The write only applies if the stored version still equals
        user.version. On success user.version is set to the new value.

        Args:
            user: The modified user.

        Raises:
            EditConflictError: If the stored version differs or the row is gone.
            DuplicateEmailError: If the new email is already taken.
            StoreError: On infrastructure failure.
        """
        ...
