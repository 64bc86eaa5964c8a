"""Pydantic schemas for tenant operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sentinel.core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH


class TenantBase(BaseModel):
    """Base schema for tenant data."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    slug: str = Field(..., min_length=1, max_length=MAX_SLUG_LENGTH)


class TenantCreate(TenantBase):
    """Schema for creating a tenant. The slug is normalized before storage."""


class TenantUpdate(TenantBase):
    """Schema for replacing a tenant's name and slug."""


class TenantResponse(BaseModel):
    """Schema for tenant response data."""

    id: UUID
    name: str
    slug: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
