"""Pydantic schemas for client operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sentinel.core.constants import MAX_CLIENT_ID_LENGTH, MAX_NAME_LENGTH
from sentinel.modules.clients.models import ClientType


class ClientUpdate(BaseModel):
    """Schema for replacing a client's mutable fields.

    ``type`` is matched case-insensitively against Confidential and Public.
    Confidential clients must send a ``client_secret``.
    """

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    type: str = "Confidential"
    client_secret: str | None = None
    redirect_uris: list[str] | None = None
    allowed_scopes: list[str] | None = None


class ClientCreate(ClientUpdate):
    """Schema for registering a client under a tenant."""

    tenant_id: UUID
    client_id: str = Field(..., min_length=1, max_length=MAX_CLIENT_ID_LENGTH)


class ClientResponse(BaseModel):
    """Schema for client response data. Secret hashes are never returned."""

    id: UUID
    tenant_id: UUID
    client_id: str
    name: str
    type: ClientType
    redirect_uris: list[str]
    allowed_scopes: list[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
