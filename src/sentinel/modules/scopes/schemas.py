"""Pydantic schemas for scope operations."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sentinel.core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH


class ScopeBase(BaseModel):
    """Base schema for scope data. A missing ``tenant_id`` makes the scope global."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    tenant_id: UUID | None = None


class ScopeCreate(ScopeBase):
    """Schema for creating a scope."""


class ScopeUpdate(ScopeBase):
    """Schema for replacing a scope."""


class ScopeResponse(BaseModel):
    """Schema for scope response data."""

    id: UUID
    tenant_id: UUID | None
    name: str
    description: str | None

    model_config = ConfigDict(from_attributes=True)
