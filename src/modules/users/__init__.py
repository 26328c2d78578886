"""User module: credentials, validation and persistence of user records."""

from src.modules.users.credential import Credential
from src.modules.users.exceptions import (
    DuplicateEmailError,
    EditConflictError,
    HashingError,
    InvalidCredentialsError,
    MissingCredentialError,
    NotFoundError,
    StoreError,
    StoreErrorKind,
    UserError,
    ValidationError,
    VerificationError,
)
from src.modules.users.models import ANONYMOUS, Anonymous, Authenticated, Identity, User
from src.modules.users.protocol import UserStore
from src.modules.users.repository import UserRepository
from src.modules.users.schemas import UserCreate, UserResponse
from src.modules.users.service import UserService
from src.modules.users.stub import Scenario, StubUserStore
from src.modules.users.tokens import TokenScope, token_digest

__all__ = [
    "ANONYMOUS",
    "Anonymous",
    "Authenticated",
    "Credential",
    "DuplicateEmailError",
    "EditConflictError",
    "HashingError",
    "Identity",
    "InvalidCredentialsError",
    "MissingCredentialError",
    "NotFoundError",
    "Scenario",
    "StoreError",
    "StoreErrorKind",
    "StubUserStore",
    "TokenScope",
    "User",
    "UserCreate",
    "UserError",
    "UserRepository",
    "UserResponse",
    "UserService",
    "UserStore",
    "ValidationError",
    "VerificationError",
    "token_digest",
]
