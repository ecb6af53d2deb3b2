"""
Request and result models for the auth endpoints.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, model_validator

from tasklist.core.models import UserResponse


PASSWORD_MIN_LENGTH = 6
NAME_MIN_LENGTH = 2

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=NAME_MIN_LENGTH, max_length=100)]


class UserCreate(BaseModel):
    """User registration data."""
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)
    first_name: Name
    last_name: Name


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ProfileUpdate(BaseModel):
    """
    Editable profile fields. Absent fields stay as they are.

    Email and password cannot be changed here.
    """
    first_name: Name | None = None
    last_name: Name | None = None

    @model_validator(mode="after")
    def _reject_nulls(self) -> ProfileUpdate:
        nulls = [
            name for name in ("first_name", "last_name")
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


class AuthResult(BaseModel):
    """A user and a freshly issued token."""
    user: UserResponse
    token: str
