"""Pydantic schemas for user operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from sentinel.core.constants import MAX_PASSWORD_LENGTH


class UserCreate(BaseModel):
    """Schema for an administrator creating a user.

    The password floor comes from ``MIN_PASSWORD_LENGTH`` and is checked by
    the service.
    """

    tenant_id: UUID
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)
    is_active: bool = True
    is_admin: bool = False


class UserResponse(BaseModel):
    """Schema for user response data."""

    id: UUID
    tenant_id: UUID
    email: EmailStr
    is_active: bool
    is_admin: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int
