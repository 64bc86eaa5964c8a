"""User repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists, func, select

from sentinel.api.dependencies import DBSession
from sentinel.core.database import flush_or_conflict
from sentinel.modules.users.models import User


USER_EMAIL_CONFLICT = "A user with this email already exists for the tenant."


class UserRepository:
    """Repository for User database operations.

    Emails passed in are expected to be normalized already.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Insert a user; a (tenant, email) collision raises ConflictError."""
        self.session.add(user)
        await flush_or_conflict(self.session, USER_EMAIL_CONFLICT, "user_email_exists")
        return user

    async def update(self, user: User) -> User:
        await flush_or_conflict(self.session, USER_EMAIL_CONFLICT, "user_email_exists")
        return user

    async def get_by_id(self, user_id: UUID, tenant_id: UUID | None = None) -> User | None:
        stmt = select(User).where(User.id == user_id)
        if tenant_id:
            stmt = stmt.where(User.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str, tenant_id: UUID) -> User | None:
        stmt = select(User).where(User.email == email, User.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_taken(
        self,
        tenant_id: UUID,
        email: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        condition = (User.tenant_id == tenant_id) & (User.email == email)
        if exclude_id is not None:
            condition = condition & (User.id != exclude_id)
        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def list_by_tenant(
        self,
        tenant_id: UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users, optionally for one tenant, with pagination.

        Returns:
            Tuple of (users list, total count)
        """
        count_stmt = select(func.count()).select_from(User)
        stmt = select(User).order_by(User.created_at.desc())
        if tenant_id is not None:
            count_stmt = count_stmt.where(User.tenant_id == tenant_id)
            stmt = stmt.where(User.tenant_id == tenant_id)

        total = (await self.session.execute(count_stmt)).scalar_one()

        offset = (page - 1) * page_size
        result = await self.session.execute(stmt.offset(offset).limit(page_size))
        return list(result.scalars().all()), total


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
