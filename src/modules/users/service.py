"""User service for registration, login and token-based flows."""

import structlog

from src.modules.users.credential import DEFAULT_ROUNDS
from src.modules.users.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingCredentialError,
    NotFoundError,
    ValidationError,
)
from src.modules.users.models import ANONYMOUS, Authenticated, Identity, User
from src.modules.users.protocol import UserStore
from src.modules.users.schemas import UserCreate
from src.modules.users.tokens import TokenScope
from src.modules.users.validation import (
    Validator,
    validate_email,
    validate_password_plaintext,
    validate_user,
)

logger = structlog.get_logger()


class UserService:
    """Service for user account operations.

    Works against any UserStore, so the same code runs on the SQLite
    repository and on StubUserStore in tests.
    """

    def __init__(
        self,
        store: UserStore,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        """Initialize the user service.

        Args:
            store: Store used for persistence.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self._store = store
        self._rounds = bcrypt_rounds

    async def register(self, data: UserCreate) -> User:
        """Register a new, not yet activated user.

        Args:
            data: Registration input.

        Returns:
            The persisted User.

        Raises:
            ValidationError: If any field is invalid or the email is taken.
            StoreError: On infrastructure failure.
        """
        password = data.password.get_secret_value()
        user = User(name=data.name, email=data.email.lower(), activated=False)

        v = Validator()
        validate_user(v, user, password=password)
        v.raise_if_invalid()

        user.set_password(password, rounds=self._rounds)

        try:
            await self._store.insert(user)
        except DuplicateEmailError as e:
            logger.warning("registration_duplicate_email", email=user.email)
            raise ValidationError(
                {"email": "a user with this email address already exists"}
            ) from e

        logger.info("user_registered", user_id=user.id, email=user.email)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Authenticate a user by email and password.

        Args:
            email: User's email address.
            password: Plain text password.

        Returns:
            The authenticated User.

        Raises:
            ValidationError: If the input is malformed.
            InvalidCredentialsError: If authentication fails.
            StoreError: On infrastructure failure.
        """
        v = Validator()
        validate_email(v, email)
        validate_password_plaintext(v, password)
        v.raise_if_invalid()

        try:
            user = await self._store.get_by_email(email.lower())
        except NotFoundError as e:
            logger.warning("auth_failed_user_not_found", email=email)
            raise InvalidCredentialsError("Invalid email or password") from e

        if user.credential is None:
            raise MissingCredentialError()

        if not user.credential.matches(password):
            logger.warning("auth_failed_invalid_password", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        logger.info("user_authenticated", user_id=user.id, email=email)
        return user

    async def activate(self, token: str) -> User:
        """Activate the account an activation token was issued for.

        Args:
            token: Plaintext activation token.

        Returns:
            The activated User with its new version.

        Raises:
            ValidationError: If the token is missing, unknown or expired.
            EditConflictError: If the user changed concurrently.
            StoreError: On infrastructure failure.
        """
        user = await self._user_for_token(TokenScope.ACTIVATION, token, "activation")

        user.activated = True
        await self._store.update(user)

        logger.info("user_activated", user_id=user.id, version=user.version)
        return user

    async def reset_password(self, token: str, password: str) -> User:
        """Set a new password using a password-reset token.

        Args:
            token: Plaintext password-reset token.
            password: The new password.

        Returns:
            The updated User.

        Raises:
            ValidationError: If the password or token is invalid.
            EditConflictError: If the user changed concurrently.
            StoreError: On infrastructure failure.
        """
        v = Validator()
        validate_password_plaintext(v, password)
        v.check(token != "", "token", "must be provided")
        v.raise_if_invalid()

        user = await self._user_for_token(
            TokenScope.PASSWORD_RESET, token, "password reset"
        )

        user.set_password(password, rounds=self._rounds)
        await self._store.update(user)

        logger.info("user_password_reset", user_id=user.id, version=user.version)
        return user

    async def resolve_identity(self, token: str | None) -> Identity:
        """Resolve the identity behind an optional authentication token.

        Args:
            token: Bearer token from the request, or None if none was sent.

        Returns:
            ANONYMOUS when no token was given, otherwise the token's user.

        Raises:
            InvalidCredentialsError: If a token was given but is not valid.
            StoreError: On infrastructure failure.
        """
        if token is None:
            return ANONYMOUS

        try:
            user = await self._store.get_for_token(TokenScope.AUTHENTICATION, token)
        except NotFoundError as e:
            logger.warning("token_invalid", scope=str(TokenScope.AUTHENTICATION))
            raise InvalidCredentialsError(
                "Invalid or expired authentication token"
            ) from e

        return Authenticated(user)

    async def _user_for_token(
        self, scope: TokenScope, token: str, purpose: str
    ) -> User:
        v = Validator()
        v.check(token != "", "token", "must be provided")
        v.raise_if_invalid()

        try:
            return await self._store.get_for_token(scope, token)
        except NotFoundError as e:
            logger.warning("token_invalid", scope=str(scope))
            raise ValidationError(
                {"token": f"invalid or expired {purpose} token"}
            ) from e
