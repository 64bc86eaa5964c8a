"""Tenant service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.core.errors import ConflictError, NotFoundError
from sentinel.modules.tenants.models import Tenant
from sentinel.modules.tenants.registry import Registry
from sentinel.modules.tenants.repos import TenantRepo
from sentinel.modules.tenants.schemas import TenantCreate, TenantUpdate


logger = structlog.get_logger()


class TenantService:
    """Service for tenant administration.

    Slugs are normalized before the uniqueness check and before storage,
    so "Acme Corp" and "acme-corp" collide.
    """

    def __init__(self, repo: TenantRepo, registry: Registry) -> None:
        self.repo = repo
        self.registry = registry

    async def list_tenants(self) -> list[Tenant]:
        return await self.repo.list_all()

    async def get_tenant(self, tenant_id: UUID) -> Tenant:
        """Get a tenant by ID.

        Raises:
            NotFoundError: If tenant not found
        """
        tenant = await self.repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundError(
                "Tenant not found",
                resource="tenant",
                resource_id=str(tenant_id),
            )
        return tenant

    async def create_tenant(self, data: TenantCreate) -> Tenant:
        """Create a tenant.

        Raises:
            ValidationError: If name or slug is blank
            ConflictError: If the normalized slug is already in use
        """
        tenant = Tenant.create(data.name, data.slug)
        await self.registry.ensure_unique_tenant_slug(tenant.slug)
        tenant = await self.repo.create(tenant)

        logger.info("tenant_created", tenant_id=str(tenant.id), slug=tenant.slug)
        return tenant

    async def update_tenant(self, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        tenant = await self.get_tenant(tenant_id)
        slug = await self.registry.ensure_unique_tenant_slug(data.slug, exclude_id=tenant.id)
        tenant.rename(data.name, slug)
        tenant = await self.repo.update(tenant)

        logger.info("tenant_updated", tenant_id=str(tenant.id), slug=tenant.slug)
        return tenant

    async def delete_tenant(self, tenant_id: UUID) -> None:
        """Delete a tenant that no client or user references.

        Raises:
            NotFoundError: If tenant not found
            ConflictError: If clients or users still belong to the tenant
        """
        tenant = await self.get_tenant(tenant_id)
        if await self.repo.has_dependents(tenant.id):
            raise ConflictError(
                "Tenant has dependent clients/users.",
                error_code="tenant_has_dependents",
            )
        await self.repo.delete(tenant)
        logger.info("tenant_deleted", tenant_id=str(tenant_id))


# Type alias for dependency injection
TenantSvc = Annotated[TenantService, Depends(TenantService)]
