"""Scope service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.core.errors import ConflictError, NotFoundError, ValidationError
from sentinel.modules.clients.repos import ClientRepo
from sentinel.modules.scopes.models import Scope
from sentinel.modules.scopes.repos import ScopeRepo
from sentinel.modules.scopes.schemas import ScopeCreate, ScopeUpdate
from sentinel.modules.tenants.registry import Registry
from sentinel.modules.tenants.repos import TenantRepo


logger = structlog.get_logger()


class ScopeService:
    """Service for scope administration.

    Global scopes (no tenant) share one namespace; each tenant has its own.
    """

    def __init__(
        self,
        repo: ScopeRepo,
        clients: ClientRepo,
        tenants: TenantRepo,
        registry: Registry,
    ) -> None:
        self.repo = repo
        self.clients = clients
        self.tenants = tenants
        self.registry = registry

    async def list_scopes(self) -> list[Scope]:
        return await self.repo.list_all()

    async def get_scope(self, scope_id: UUID) -> Scope:
        scope = await self.repo.get_by_id(scope_id)
        if not scope:
            raise NotFoundError("Scope not found", resource="scope", resource_id=str(scope_id))
        return scope

    async def _ensure_tenant(self, tenant_id: UUID | None) -> None:
        if tenant_id is not None and not await self.tenants.exists(tenant_id):
            raise ValidationError("Tenant does not exist.", field="tenant_id")

    async def create_scope(self, data: ScopeCreate) -> Scope:
        """Create a scope.

        Raises:
            ValidationError: If the name is blank or the tenant is unknown
            ConflictError: If the name exists in the same namespace
        """
        scope = Scope.create(data.name, data.description, data.tenant_id)
        await self._ensure_tenant(scope.tenant_id)
        await self.registry.ensure_unique_scope_name(scope.tenant_id, scope.name)
        scope = await self.repo.create(scope)

        logger.info("scope_created", scope_id=str(scope.id), name=scope.name)
        return scope

    async def update_scope(self, scope_id: UUID, data: ScopeUpdate) -> Scope:
        scope = await self.get_scope(scope_id)
        name = data.name.strip()
        if not name:
            raise ValidationError("Scope name is required.", field="name")

        await self._ensure_tenant(data.tenant_id)
        await self.registry.ensure_unique_scope_name(data.tenant_id, name, exclude_id=scope.id)
        scope.update(name, data.description, data.tenant_id)
        scope = await self.repo.update(scope)

        logger.info("scope_updated", scope_id=str(scope.id), name=scope.name)
        return scope

    async def delete_scope(self, scope_id: UUID) -> None:
        """Delete a scope no client lists as allowed.

        Raises:
            ConflictError: If any client in the scope's reach still allows it
        """
        scope = await self.get_scope(scope_id)
        if await self.clients.any_references_scope(scope.name, scope.tenant_id):
            raise ConflictError(
                "Scope is used by one or more clients.",
                error_code="scope_in_use",
            )
        await self.repo.delete(scope)
        logger.info("scope_deleted", scope_id=str(scope_id), name=scope.name)


# Type alias for dependency injection
ScopeSvc = Annotated[ScopeService, Depends(ScopeService)]
