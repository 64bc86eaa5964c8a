"""Schemas exchanged with the OAuth/OIDC engine collaborator."""

from uuid import UUID

from pydantic import BaseModel, Field


class AuthenticatedPrincipal(BaseModel):
    """A verified principal with its approved scopes.

    Attributes:
        subject_id: Client identifier for machine clients, user id for users
        tenant_id: The owning tenant
        granted_scopes: Scopes approved for this request
    """

    subject_id: str
    tenant_id: UUID
    granted_scopes: list[str] = Field(default_factory=list)


class ApplicationDescriptor(BaseModel):
    """Projection of a Client pushed to the engine's application registry.

    The Client table is the source of truth; the engine only ever receives
    this derived view.
    """

    client_id: str
    display_name: str
    client_type: str
    redirect_uris: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)
    require_pkce: bool = False


class ClientCredentials(BaseModel):
    """Client identifier and secret extracted from a token request."""

    client_id: str
    client_secret: str | None = None
