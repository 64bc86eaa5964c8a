"""Client repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists, select

from sentinel.api.dependencies import DBSession
from sentinel.core.database import flush_or_conflict
from sentinel.modules.clients.models import Client


CLIENT_ID_CONFLICT = "ClientId already exists for this tenant."


class ClientRepository:
    """Repository for Client database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, client: Client) -> Client:
        """Insert a client; a (tenant, client_id) collision raises ConflictError."""
        self.session.add(client)
        await flush_or_conflict(self.session, CLIENT_ID_CONFLICT, "client_id_exists")
        return client

    async def update(self, client: Client) -> Client:
        await flush_or_conflict(self.session, CLIENT_ID_CONFLICT, "client_id_exists")
        return client

    async def get_by_id(self, id: UUID) -> Client | None:
        return await self.session.get(Client, id)

    async def get_by_client_id(self, client_id: str) -> Client | None:
        """Resolve a client by its identifier alone.

        Used by the client-credentials grant, where no tenant is presented.
        When more than one tenant registered the identifier the oldest
        registration wins.
        """
        stmt = (
            select(Client)
            .where(Client.client_id == client_id)
            .order_by(Client.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def client_id_taken(
        self,
        tenant_id: UUID,
        client_id: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        condition = (Client.tenant_id == tenant_id) & (Client.client_id == client_id)
        if exclude_id is not None:
            condition = condition & (Client.id != exclude_id)
        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def list_all(self, tenant_id: UUID | None = None) -> list[Client]:
        stmt = select(Client).order_by(Client.created_at)
        if tenant_id is not None:
            stmt = stmt.where(Client.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def any_references_scope(self, scope_name: str, tenant_id: UUID | None) -> bool:
        """Check whether any client lists ``scope_name`` as allowed.

        A global scope (``tenant_id`` None) is checked against every client,
        a tenant scope only against that tenant's clients. Allowed scopes
        are stored as JSON arrays, so matching happens here, exactly and
        case-sensitively.
        """
        stmt = select(Client.allowed_scopes)
        if tenant_id is not None:
            stmt = stmt.where(Client.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return any(scope_name in (scopes or []) for scopes in result.scalars())

    async def delete(self, client: Client) -> None:
        await self.session.delete(client)
        await self.session.flush()


# Type alias for dependency injection
ClientRepo = Annotated[ClientRepository, Depends(ClientRepository)]
