"""Tenant repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import delete, exists, select

from sentinel.api.dependencies import DBSession
from sentinel.core.database import flush_or_conflict
from sentinel.modules.clients.models import Client
from sentinel.modules.scopes.models import Scope
from sentinel.modules.tenants.models import Tenant
from sentinel.modules.users.models import User


TENANT_SLUG_CONFLICT = "Slug already exists."


class TenantRepository:
    """Repository for Tenant database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, tenant: Tenant) -> Tenant:
        """Insert a tenant; a slug collision raises ConflictError."""
        self.session.add(tenant)
        await flush_or_conflict(self.session, TENANT_SLUG_CONFLICT, "tenant_slug_exists")
        return tenant

    async def update(self, tenant: Tenant) -> Tenant:
        await flush_or_conflict(self.session, TENANT_SLUG_CONFLICT, "tenant_slug_exists")
        return tenant

    async def get_by_id(self, tenant_id: UUID) -> Tenant | None:
        return await self.session.get(Tenant, tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        """Get a tenant by its already-normalized slug."""
        stmt = select(Tenant).where(Tenant.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, tenant_id: UUID) -> bool:
        stmt = select(exists().where(Tenant.id == tenant_id))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def slug_taken(self, slug: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another tenant already uses the slug."""
        condition = Tenant.slug == slug
        if exclude_id is not None:
            condition = condition & (Tenant.id != exclude_id)
        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def has_dependents(self, tenant_id: UUID) -> bool:
        """True while any client or user still references the tenant."""
        has_clients = await self.session.execute(
            select(exists().where(Client.tenant_id == tenant_id))
        )
        if has_clients.scalar():
            return True
        has_users = await self.session.execute(
            select(exists().where(User.tenant_id == tenant_id))
        )
        return bool(has_users.scalar())

    async def list_all(self) -> list[Tenant]:
        result = await self.session.execute(select(Tenant).order_by(Tenant.name))
        return list(result.scalars().all())

    async def delete(self, tenant: Tenant) -> None:
        """Delete a tenant together with the scopes it owns."""
        await self.session.execute(delete(Scope).where(Scope.tenant_id == tenant.id))
        await self.session.execute(delete(Tenant).where(Tenant.id == tenant.id))
        await self.session.flush()


# Type alias for dependency injection
TenantRepo = Annotated[TenantRepository, Depends(TenantRepository)]
