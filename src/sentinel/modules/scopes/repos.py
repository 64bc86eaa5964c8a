"""Scope repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists, select

from sentinel.api.dependencies import DBSession
from sentinel.core.database import flush_or_conflict
from sentinel.modules.scopes.models import Scope


SCOPE_NAME_CONFLICT = "Scope name already exists for this tenant."


class ScopeRepository:
    """Repository for Scope database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, scope: Scope) -> Scope:
        self.session.add(scope)
        await flush_or_conflict(self.session, SCOPE_NAME_CONFLICT, "scope_name_exists")
        return scope

    async def update(self, scope: Scope) -> Scope:
        await flush_or_conflict(self.session, SCOPE_NAME_CONFLICT, "scope_name_exists")
        return scope

    async def get_by_id(self, scope_id: UUID) -> Scope | None:
        return await self.session.get(Scope, scope_id)

    async def get_by_name(self, name: str, tenant_id: UUID | None) -> Scope | None:
        """Get a scope by name within the global or one tenant's namespace."""
        stmt = select(Scope).where(Scope.name == name)
        if tenant_id is None:
            stmt = stmt.where(Scope.tenant_id.is_(None))
        else:
            stmt = stmt.where(Scope.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def name_taken(
        self,
        name: str,
        tenant_id: UUID | None,
        exclude_id: UUID | None = None,
    ) -> bool:
        condition = Scope.name == name
        if tenant_id is None:
            condition = condition & Scope.tenant_id.is_(None)
        else:
            condition = condition & (Scope.tenant_id == tenant_id)
        if exclude_id is not None:
            condition = condition & (Scope.id != exclude_id)
        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def list_all(self) -> list[Scope]:
        result = await self.session.execute(select(Scope).order_by(Scope.name))
        return list(result.scalars().all())

    async def delete(self, scope: Scope) -> None:
        await self.session.delete(scope)
        await self.session.flush()


# Type alias for dependency injection
ScopeRepo = Annotated[ScopeRepository, Depends(ScopeRepository)]
