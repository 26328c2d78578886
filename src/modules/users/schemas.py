"""Pydantic schemas for user input and output."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, SecretStr

from src.modules.users.models import User


class UserCreate(BaseModel):
    """Schema for registering a new user.

    The email shape is checked on construction; name and password
    rules live in src.modules.users.validation so that every failure
    there is reported per field in one pass.
    """

    name: str
    email: EmailStr
    password: SecretStr


class UserResponse(BaseModel):
    """Schema for user output. Has no credential field at all."""

    id: int
    created_at: datetime | None
    name: str
    email: str
    activated: bool

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            created_at=user.created_at,
            name=user.name,
            email=user.email,
            activated=user.activated,
        )
