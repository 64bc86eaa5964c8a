"""Client service for business logic.

The Client table is the single source of truth for client identity. After
every create, update or delete is flushed, the matching application record
is pushed to the OAuth engine. If the push fails the request fails with
DependencyFailure and the surrounding transaction rolls back, so the two
stores never disagree about a committed client.
"""

from collections.abc import Awaitable
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.core.auth.engine import Engine
from sentinel.core.auth.schemas import ApplicationDescriptor
from sentinel.core.errors import AppException, DependencyFailure, NotFoundError, ValidationError
from sentinel.core.security import Hasher
from sentinel.modules.clients.models import Client, ClientType
from sentinel.modules.clients.repos import ClientRepo
from sentinel.modules.clients.schemas import ClientCreate, ClientUpdate
from sentinel.modules.tenants.registry import Registry
from sentinel.modules.tenants.repos import TenantRepo


logger = structlog.get_logger()

# Permissions granted to every application in the engine
BASE_PERMISSIONS = (
    "endpoint:authorization",
    "endpoint:token",
    "endpoint:revocation",
    "endpoint:introspection",
    "grant_type:authorization_code",
    "grant_type:refresh_token",
    "response_type:code",
    "scope:openid",
)
CLIENT_CREDENTIALS_PERMISSION = "grant_type:client_credentials"


def build_application_descriptor(client: Client) -> ApplicationDescriptor:
    """Project a client onto the engine's application model.

    Public clients must use PKCE and never get the client-credentials grant.
    """
    permissions = list(BASE_PERMISSIONS)
    if client.is_confidential:
        permissions.append(CLIENT_CREDENTIALS_PERMISSION)
    for scope in client.allowed_scopes:
        permission = f"scope:{scope}"
        if permission not in permissions:
            permissions.append(permission)

    return ApplicationDescriptor(
        client_id=client.client_id,
        display_name=client.name,
        client_type=client.type.value,
        redirect_uris=list(client.redirect_uris),
        permissions=permissions,
        require_pkce=not client.is_confidential,
    )


class ClientService:
    """Service for client administration."""

    def __init__(
        self,
        repo: ClientRepo,
        tenants: TenantRepo,
        registry: Registry,
        hasher: Hasher,
        engine: Engine,
    ) -> None:
        self.repo = repo
        self.tenants = tenants
        self.registry = registry
        self.hasher = hasher
        self.engine = engine

    async def list_clients(self, tenant_id: UUID | None = None) -> list[Client]:
        return await self.repo.list_all(tenant_id)

    async def get_client(self, id: UUID) -> Client:
        client = await self.repo.get_by_id(id)
        if not client:
            raise NotFoundError("Client not found", resource="client", resource_id=str(id))
        return client

    def _apply_secret(self, client: Client, secret: str | None) -> None:
        if client.is_confidential:
            if not secret or not secret.strip():
                raise ValidationError(
                    "Client secret is required for confidential clients.",
                    field="client_secret",
                )
            client.set_secret_hash(self.hasher.hash(secret))
        else:
            client.set_secret_hash(None)

    async def _ensure_tenant(self, tenant_id: UUID) -> None:
        if not await self.tenants.exists(tenant_id):
            raise ValidationError("Tenant does not exist.", field="tenant_id")

    async def create_client(self, data: ClientCreate) -> Client:
        """Register a client.

        Raises:
            ValidationError: Unknown type, unknown tenant, or a confidential
                client without a secret
            ConflictError: If the tenant already has this client_id
            DependencyFailure: If the OAuth engine rejects the application
        """
        client_type = ClientType.parse(data.type)
        await self._ensure_tenant(data.tenant_id)

        client = Client.create(data.tenant_id, data.client_id, data.name, client_type)
        self._apply_secret(client, data.client_secret)
        client.replace_redirect_uris(data.redirect_uris)
        client.replace_allowed_scopes(data.allowed_scopes)

        await self.registry.ensure_unique_client_id(client.tenant_id, client.client_id)
        client = await self.repo.create(client)
        await self._project(client)

        logger.info(
            "client_created",
            client_id=client.client_id,
            tenant_id=str(client.tenant_id),
            type=client.type.value,
        )
        return client

    async def update_client(self, id: UUID, data: ClientUpdate) -> Client:
        """Replace name, type, redirect URIs, scopes and secret.

        Switching to Public drops the stored secret; Confidential requires
        a new secret on every update.
        """
        client = await self.get_client(id)

        client_type = ClientType.parse(data.type)
        client.rename(data.name)
        client.set_type(client_type)
        client.replace_redirect_uris(data.redirect_uris)
        client.replace_allowed_scopes(data.allowed_scopes)
        self._apply_secret(client, data.client_secret)

        client = await self.repo.update(client)
        await self._project(client)

        logger.info("client_updated", client_id=client.client_id, tenant_id=str(client.tenant_id))
        return client

    async def delete_client(self, id: UUID) -> None:
        client = await self.get_client(id)
        client_id = client.client_id
        await self.repo.delete(client)

        await self._call_engine(self.engine.delete_application(client_id), client_id)
        logger.info("client_deleted", client_id=client_id)

    async def _project(self, client: Client) -> None:
        descriptor = build_application_descriptor(client)
        await self._call_engine(self.engine.upsert_application(descriptor), client.client_id)

    async def _call_engine(self, call: Awaitable[None], client_id: str) -> None:
        try:
            await call
        except AppException:
            raise
        except Exception as e:
            logger.error("application_projection_failed", client_id=client_id, error=str(e))
            raise DependencyFailure(
                "OAuth engine unavailable", dependency="oauth_engine"
            ) from e


# Type alias for dependency injection
ClientSvc = Annotated[ClientService, Depends(ClientService)]
