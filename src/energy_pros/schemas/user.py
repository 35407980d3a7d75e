"""User-related Pydantic schemas."""

import re

from pydantic import EmailStr, Field, field_validator

from energy_pros.schemas.common import CamelModel

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class RegisterRequest(CamelModel):
    """Schema for invite-gated registration."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=100)
    invite_code: str | None = Field(None, description="Single-use invite code")

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("may only contain letters, digits, '.', '_' and '-'")
        return value

    @field_validator("email", mode="after")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(CamelModel):
    """Schema for login submissions."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.lower()


class UserPublic(CamelModel):
    """Identity other members are allowed to see."""

    id: int
    username: str
    full_name: str


class UserResponse(UserPublic):
    """The signed-in member's own account, never including the password."""

    email: str
    invited_by_user_id: int | None = None
