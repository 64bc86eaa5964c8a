"""Uniqueness guards used by administrative write paths.

Each guard reads immediately before the caller writes. The read is not
atomic with the write, so two concurrent writers can both pass; the unique
constraints on the tables catch the loser at flush time and raise the same
ConflictError (see ``flush_or_conflict``).
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.api.dependencies import DBSession
from sentinel.core.errors import ConflictError, ValidationError
from sentinel.core.utils.text import normalize_email, normalize_slug
from sentinel.modules.clients.repos import CLIENT_ID_CONFLICT, ClientRepository
from sentinel.modules.scopes.repos import SCOPE_NAME_CONFLICT, ScopeRepository
from sentinel.modules.tenants.repos import TENANT_SLUG_CONFLICT, TenantRepository
from sentinel.modules.users.repos import USER_EMAIL_CONFLICT, UserRepository


logger = structlog.get_logger()


class TenantRegistry:
    """Friendly conflict checks for tenant, client, scope and user keys."""

    def __init__(self, session: DBSession) -> None:
        self.tenants = TenantRepository(session)
        self.clients = ClientRepository(session)
        self.scopes = ScopeRepository(session)
        self.users = UserRepository(session)

    async def ensure_unique_tenant_slug(
        self,
        slug: str,
        exclude_id: UUID | None = None,
    ) -> str:
        """Normalize ``slug`` and make sure no other tenant holds it.

        Returns:
            The normalized slug, which is also what gets stored

        Raises:
            ValidationError: If the slug is blank
            ConflictError: If another tenant already uses the normalized slug
        """
        if not slug or not slug.strip():
            raise ValidationError("Tenant slug is required.", field="slug")
        normalized = normalize_slug(slug)
        if await self.tenants.slug_taken(normalized, exclude_id=exclude_id):
            logger.info("tenant_slug_conflict", slug=normalized)
            raise ConflictError(TENANT_SLUG_CONFLICT, error_code="tenant_slug_exists")
        return normalized

    async def ensure_unique_client_id(
        self,
        tenant_id: UUID,
        client_id: str,
        exclude_id: UUID | None = None,
    ) -> None:
        if await self.clients.client_id_taken(tenant_id, client_id, exclude_id=exclude_id):
            logger.info("client_id_conflict", tenant_id=str(tenant_id), client_id=client_id)
            raise ConflictError(CLIENT_ID_CONFLICT, error_code="client_id_exists")

    async def ensure_unique_scope_name(
        self,
        tenant_id: UUID | None,
        name: str,
        exclude_id: UUID | None = None,
    ) -> None:
        """Check the name within its namespace: global when ``tenant_id`` is None."""
        if await self.scopes.name_taken(name, tenant_id, exclude_id=exclude_id):
            logger.info(
                "scope_name_conflict",
                tenant_id=str(tenant_id) if tenant_id else None,
                name=name,
            )
            raise ConflictError(SCOPE_NAME_CONFLICT, error_code="scope_name_exists")

    async def ensure_unique_user_email(
        self,
        tenant_id: UUID,
        email: str,
        exclude_id: UUID | None = None,
    ) -> str:
        """Normalize ``email`` and make sure the tenant has no user with it.

        Returns:
            The normalized email
        """
        normalized = normalize_email(email)
        if await self.users.email_taken(tenant_id, normalized, exclude_id=exclude_id):
            logger.info("user_email_conflict", tenant_id=str(tenant_id))
            raise ConflictError(USER_EMAIL_CONFLICT, error_code="user_email_exists")
        return normalized


# Type alias for dependency injection
Registry = Annotated[TenantRegistry, Depends(TenantRegistry)]
