"""Pydantic schemas for self-service account operations."""

from pydantic import BaseModel, EmailStr, Field

from sentinel.core.constants import MAX_PASSWORD_LENGTH, MAX_SLUG_LENGTH
from sentinel.modules.users.schemas import UserResponse


class RegisterRequest(BaseModel):
    """Schema for registering into an existing tenant."""

    tenant_slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    confirm_password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)


class RegisterResponse(BaseModel):
    """Schema for registration response. The account stays inactive until verified."""

    user: UserResponse
    message: str = "Check your email to verify your account."


class VerifyResponse(BaseModel):
    """Schema for a successful email verification."""

    user: UserResponse
    message: str = "Email verified."


class LoginRequest(BaseModel):
    """Schema for tenant, email and password sign-in."""

    tenant_slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    scope: str | None = Field(None, description="Space-delimited scopes to request")
