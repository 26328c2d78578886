"""User repository for database operations."""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog

from src.infrastructure.database import Database, to_timestamp
from src.modules.users.exceptions import (
    DuplicateEmailError,
    EditConflictError,
    MissingCredentialError,
    NotFoundError,
    StoreError,
    StoreErrorKind,
    UserError,
)
from src.modules.users.models import User
from src.modules.users.tokens import TokenScope, token_digest

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 3.0

# Primary result codes that mean the database cannot serve us right now
_UNAVAILABLE_CODES = frozenset(
    {
        sqlite3.SQLITE_BUSY,
        sqlite3.SQLITE_LOCKED,
        sqlite3.SQLITE_CANTOPEN,
        sqlite3.SQLITE_IOERR,
        sqlite3.SQLITE_FULL,
        sqlite3.SQLITE_READONLY,
    }
)

_USER_COLUMNS = (
    "users.id, users.created_at, users.name, users.email, "
    "users.password_hash, users.activated, users.version"
)


def classify_error(error: sqlite3.Error, operation: str) -> UserError:
    """Map a SQLite error onto the user store error taxonomy.

    Classification uses the extended result code SQLite attaches to the
    exception, never the message text. The users table has exactly one
    UNIQUE constraint (email); the primary key violates with a different
    code, so a UNIQUE violation from a users statement is a duplicate
    email.

    Args:
        error: The exception raised by sqlite3/aiosqlite.
        operation: Store operation name, for the resulting error.

    Returns:
        The exception to raise in its place.
    """
    code = getattr(error, "sqlite_errorcode", None)

    if code == sqlite3.SQLITE_CONSTRAINT_UNIQUE:
        return DuplicateEmailError()

    if code is not None and (code & 0xFF) in _UNAVAILABLE_CODES:
        return StoreError(StoreErrorKind.UNAVAILABLE, operation)

    return StoreError(StoreErrorKind.UNKNOWN, operation)


class UserRepository:
    """Repository for User persistence.

    Every method runs a single SQL statement bounded by a timeout, so it
    is safe to call from any number of concurrent tasks. All mutable
    shared state lives in the database.
    """

    def __init__(
        self,
        database: Database,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the repository.

        Args:
            database: Database connection.
            timeout_seconds: Upper bound on each store call.
        """
        self._db = database
        self._timeout = timeout_seconds

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        """Bound a database call by the timeout and classify its failures.

        Raises:
            StoreError: On timeout, unavailability or unknown failure.
            DuplicateEmailError: On a unique email violation.
        """
        if not self._db.is_connected:
            logger.error("user_store_unavailable", operation=operation)
            raise StoreError(StoreErrorKind.UNAVAILABLE, operation)

        try:
            async with asyncio.timeout(self._timeout):
                yield
        except TimeoutError as e:
            logger.warning(
                "user_store_timeout",
                operation=operation,
                timeout_seconds=self._timeout,
            )
            raise StoreError(StoreErrorKind.TIMEOUT, operation) from e
        except sqlite3.Error as e:
            error = classify_error(e, operation)
            if isinstance(error, StoreError):
                logger.error(
                    "user_store_error",
                    operation=operation,
                    kind=error.kind.value,
                    sqlite_error=getattr(e, "sqlite_errorname", type(e).__name__),
                )
            raise error from e

    async def insert(self, user: User) -> None:
        """Insert a new user.

        Populates user.id, user.created_at and user.version on success.

        Args:
            user: Validated user with a credential.

        Raises:
            MissingCredentialError: If no credential has been set.
            DuplicateEmailError: If email already exists.
            StoreError: On infrastructure failure.
        """
        if user.credential is None:
            raise MissingCredentialError()

        now = to_timestamp(datetime.now(UTC))

        async with self._guard("insert"):
            row = await self._db.fetch_one(
                """
                INSERT INTO users (created_at, name, email, password_hash, activated)
                VALUES (?, ?, ?, ?, ?)
                RETURNING id, created_at, version
                """,
                (
                    now,
                    user.name,
                    user.email,
                    user.credential.hash,
                    int(user.activated),
                ),
            )

        if row is None:
            raise StoreError(StoreErrorKind.UNKNOWN, "insert")

        user.id = int(row["id"])
        user.created_at = datetime.fromisoformat(str(row["created_at"]))
        user.version = int(row["version"])

        logger.info("user_created", user_id=user.id, email=user.email)

    async def get_by_email(self, email: str) -> User:
        """Get a user by email.

        The email column compares case-insensitively, so letter case in
        the address does not matter.

        Args:
            email: The user's email address.

        Returns:
            The matching User.

        Raises:
            NotFoundError: If no user has this email.
            StoreError: On infrastructure failure.
        """
        async with self._guard("get_by_email"):
            row = await self._db.fetch_one(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",  # nosec B608
                (email,),
            )

        if row is None:
            raise NotFoundError("email")

        return User.from_row(dict(row))

    async def get_for_token(self, scope: TokenScope, plaintext_token: str) -> User:
        """Get the user owning an unexpired token of the given scope.

        Args:
            scope: Purpose the token was issued for.
            plaintext_token: Token as presented by the client.

        Returns:
            The token's User.

        Raises:
            NotFoundError: If no matching unexpired token exists.
            StoreError: On infrastructure failure.
        """
        now = to_timestamp(datetime.now(UTC))

        async with self._guard("get_for_token"):
            row = await self._db.fetch_one(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users
                INNER JOIN tokens ON users.id = tokens.user_id
                WHERE tokens.hash = ?
                AND tokens.scope = ?
                AND tokens.expiry > ?
                """,  # nosec B608 - fixed column list
                (token_digest(plaintext_token), str(scope), now),
            )

        if row is None:
            raise NotFoundError("token")

        return User.from_row(dict(row))

    async def update(self, user: User) -> None:
        """Update a user if its stored version still matches.

        The version check and the write are one UPDATE statement, so of
        two concurrent updates from the same version exactly one applies.

        Args:
            user: User with modified fields, carrying the version it was read at.

        Raises:
            MissingCredentialError: If no credential has been set.
            EditConflictError: If the stored version differs or the row is gone.
            DuplicateEmailError: If the new email is already taken.
            StoreError: On infrastructure failure.
        """
        if user.credential is None:
            raise MissingCredentialError()

        async with self._guard("update"):
            row = await self._db.fetch_one(
                """
                UPDATE users
                SET name = ?, email = ?, password_hash = ?, activated = ?,
                    version = version + 1
                WHERE id = ? AND version = ?
                RETURNING version
                """,
                (
                    user.name,
                    user.email,
                    user.credential.hash,
                    int(user.activated),
                    user.id,
                    user.version,
                ),
            )

        if row is None:
            logger.warning("user_edit_conflict", user_id=user.id, version=user.version)
            raise EditConflictError(user.id, user.version)

        user.version = int(row["version"])

        logger.info("user_updated", user_id=user.id, version=user.version)
