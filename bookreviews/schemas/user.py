"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (email, username, password)
- UserResponse: The account as seen by its owner (never the password)
- UserPublicResponse: Public profile embedded in reviews
- TokenResponse: Access token returned by login
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Shared user fields."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["john@example.com"],
    )

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters, alphanumeric and underscores)",
        examples=["johndoe", "jane_doe123"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """
        Validate username format.

        Must start with a letter and contain only letters, numbers and
        underscores. Stored lowercase.
        """
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_]*$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, numbers, and underscores"
            )
        return v.lower()


class UserCreate(UserBase):
    """Schema for user registration."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Password (min 8 chars, must include uppercase, lowercase and number)",
        examples=["SecurePass123"],
    )

    full_name: str | None = Field(
        default=None,
        max_length=255,
        description="User's full display name",
        examples=["John Doe"],
    )

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v


class UserResponse(BaseModel):
    """
    Schema for user responses.

    SECURITY: Never includes password or hashed password.
    """

    id: int = Field(..., description="Unique user identifier")
    email: EmailStr = Field(..., description="User's email address")
    username: str = Field(..., description="Unique username")
    full_name: str | None = Field(default=None, description="User's full display name")
    is_active: bool = Field(..., description="Whether the account is active")
    is_superuser: bool = Field(..., description="Whether the user can moderate")
    created_at: datetime = Field(..., description="When the user registered")

    model_config = ConfigDict(from_attributes=True)


class UserPublicResponse(BaseModel):
    """Public profile shown next to a user's reviews."""

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Unique username")
    full_name: str | None = Field(default=None, description="User's display name")
    created_at: datetime = Field(..., description="When the user joined")

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Bearer token returned by a successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Always 'bearer'")
    expires_in: int = Field(..., description="Token lifetime in seconds")
