"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.config import settings
from sentinel.core.errors import NotFoundError, ValidationError
from sentinel.core.security import Hasher
from sentinel.modules.tenants.registry import Registry
from sentinel.modules.tenants.repos import TenantRepo
from sentinel.modules.users.models import User
from sentinel.modules.users.repos import UserRepo
from sentinel.modules.users.schemas import UserCreate


logger = structlog.get_logger()


def validate_password(password: str) -> str:
    """Check a new password against the configured minimum length.

    Raises:
        ValidationError: If the password is blank or too short
    """
    if not password or not password.strip():
        raise ValidationError("Password is required.", field="password")
    if len(password) < settings.min_password_length:
        raise ValidationError(
            f"Password must be at least {settings.min_password_length} characters.",
            field="password",
        )
    return password


class UserService:
    """Service for user administration.

    Users are never hard-deleted; administrators deactivate them instead.
    """

    def __init__(
        self,
        repo: UserRepo,
        tenants: TenantRepo,
        registry: Registry,
        hasher: Hasher,
    ) -> None:
        self.repo = repo
        self.tenants = tenants
        self.registry = registry
        self.hasher = hasher

    async def create_user(self, data: UserCreate) -> User:
        """Create a user with a hashed password.

        Args:
            data: User creation data

        Returns:
            The created user

        Raises:
            ValidationError: If the tenant is unknown or the password too short
            ConflictError: If the tenant already has a user with this email
        """
        validate_password(data.password)
        if not await self.tenants.exists(data.tenant_id):
            raise ValidationError("Tenant does not exist.", field="tenant_id")

        email = await self.registry.ensure_unique_user_email(data.tenant_id, data.email)
        user = User.create(
            tenant_id=data.tenant_id,
            email=email,
            password_hash=self.hasher.hash(data.password),
            is_active=data.is_active,
            is_admin=data.is_admin,
        )
        user = await self.repo.create(user)

        logger.info("user_created", user_id=str(user.id), tenant_id=str(user.tenant_id))
        return user

    async def get_user(self, user_id: UUID, tenant_id: UUID | None = None) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id, tenant_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def list_users(
        self,
        tenant_id: UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users, optionally limited to one tenant.

        Returns:
            Tuple of (users list, total count)
        """
        return await self.repo.list_by_tenant(tenant_id, page, page_size)

    async def activate_user(self, user_id: UUID) -> User:
        user = await self.get_user(user_id)
        user.activate()
        logger.info("user_activated", user_id=str(user.id))
        return await self.repo.update(user)

    async def deactivate_user(self, user_id: UUID) -> User:
        user = await self.get_user(user_id)
        user.deactivate()
        logger.info("user_deactivated", user_id=str(user.id))
        return await self.repo.update(user)


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
