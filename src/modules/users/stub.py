"""In-memory user store double driven by named scenarios."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from src.modules.users.credential import Credential
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
from src.modules.users.tokens import TokenScope


class Scenario(StrEnum):
    """Outcome a StubUserStore operation should produce."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    EDIT_CONFLICT = "edit_conflict"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    UNKNOWN_ERROR = "unknown_error"


_STORE_ERROR_KINDS = {
    Scenario.TIMEOUT: StoreErrorKind.TIMEOUT,
    Scenario.UNAVAILABLE: StoreErrorKind.UNAVAILABLE,
    Scenario.UNKNOWN_ERROR: StoreErrorKind.UNKNOWN,
}

# Scenarios each operation can actually fail with; anything else succeeds
_APPLICABLE = {
    "insert": {Scenario.DUPLICATE_EMAIL, *_STORE_ERROR_KINDS},
    "get_by_email": {Scenario.NOT_FOUND, *_STORE_ERROR_KINDS},
    "get_for_token": {Scenario.NOT_FOUND, *_STORE_ERROR_KINDS},
    "update": {Scenario.DUPLICATE_EMAIL, Scenario.EDIT_CONFLICT, *_STORE_ERROR_KINDS},
}

OPERATIONS = tuple(_APPLICABLE)


@dataclass
class Call:
    """A recorded call made against the stub."""

    operation: str
    args: tuple[object, ...]


@dataclass
class StubUserStore:
    """User store double for exercising callers without a database.

    Each operation's outcome is chosen by a Scenario: ``scenario`` applies
    to every operation and ``overrides`` replaces it per operation name.
    Scenarios that do not apply to an operation (e.g. NOT_FOUND for
    insert) fall through to success. Successful fetches return a copy of
    ``fixture``, whose password is FIXTURE_PASSWORD.

    Example:
        store = StubUserStore(overrides={"update": Scenario.EDIT_CONFLICT})
    """

    FIXTURE_PASSWORD = "fixture-pa55word"
    FIXTURE_ROUNDS = 4

    scenario: Scenario = Scenario.SUCCESS
    overrides: dict[str, Scenario] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    fixture: User | None = None

    def __post_init__(self) -> None:
        self.scenario = Scenario(self.scenario)
        self.overrides = {op: Scenario(s) for op, s in self.overrides.items()}

        unknown = set(self.overrides) - set(OPERATIONS)
        if unknown:
            raise ValueError(f"Unknown stub operations: {sorted(unknown)}")

        if self.fixture is None:
            self.fixture = User(
                id=1,
                created_at=datetime.now(UTC),
                name="Test",
                email="test@example.com",
                credential=Credential.from_plaintext(
                    self.FIXTURE_PASSWORD, rounds=self.FIXTURE_ROUNDS
                ),
                activated=True,
                version=1,
            )

    def _outcome(self, operation: str, *args: object, user: User | None = None) -> None:
        """Record the call and raise the configured failure, if any."""
        self.calls.append(Call(operation, args))

        scenario = self.overrides.get(operation, self.scenario)
        if scenario not in _APPLICABLE[operation]:
            return

        error: UserError
        if scenario in _STORE_ERROR_KINDS:
            error = StoreError(_STORE_ERROR_KINDS[scenario], operation)
        elif scenario == Scenario.NOT_FOUND:
            error = NotFoundError("token" if operation == "get_for_token" else "email")
        elif scenario == Scenario.DUPLICATE_EMAIL:
            error = DuplicateEmailError()
        elif user is not None:
            error = EditConflictError(user.id, user.version)
        else:
            return
        raise error

    def _copy_fixture(self) -> User:
        fixture = self.fixture
        if fixture is None:
            raise RuntimeError("StubUserStore fixture missing")
        return User(
            id=fixture.id,
            created_at=fixture.created_at,
            name=fixture.name,
            email=fixture.email,
            credential=fixture.credential,
            activated=fixture.activated,
            version=fixture.version,
        )

    def called(self, operation: str) -> int:
        """Count recorded calls of an operation."""
        return sum(1 for call in self.calls if call.operation == operation)

    async def insert(self, user: User) -> None:
        if user.credential is None:
            raise MissingCredentialError()
        self._outcome("insert", user, user=user)
        user.id = 1
        user.created_at = datetime.now(UTC)
        user.version = 1

    async def get_by_email(self, email: str) -> User:
        self._outcome("get_by_email", email)
        user = self._copy_fixture()
        user.email = email
        return user

    async def get_for_token(self, scope: TokenScope, plaintext_token: str) -> User:
        self._outcome("get_for_token", scope, plaintext_token)
        return self._copy_fixture()

    async def update(self, user: User) -> None:
        if user.credential is None:
            raise MissingCredentialError()
        self._outcome("update", user, user=user)
        user.version += 1
