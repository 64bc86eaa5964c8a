"""Unit tests for UserService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from sentinel.core.errors import ConflictError, NotFoundError, ValidationError
from sentinel.core.security import SecretHasher
from sentinel.modules.users.models import User
from sentinel.modules.users.schemas import UserCreate
from sentinel.modules.users.services import UserService, validate_password


def make_service(hasher: SecretHasher) -> UserService:
    mock_repo = AsyncMock()
    mock_repo.create.side_effect = lambda user: user
    mock_repo.update.side_effect = lambda user: user
    mock_tenants = AsyncMock()
    mock_tenants.exists.return_value = True
    registry = AsyncMock()
    registry.ensure_unique_user_email.side_effect = (
        lambda tenant_id, email, exclude_id=None: email.strip().lower()
    )
    return UserService(repo=mock_repo, tenants=mock_tenants, registry=registry, hasher=hasher)


class TestValidatePassword:
    """Tests for validate_password."""

    @pytest.mark.parametrize("password", ["", "   ", "abc"])
    def test_rejected(self, password: str):
        with pytest.raises(ValidationError):
            validate_password(password)

    def test_accepted(self):
        assert validate_password("correct-horse") == "correct-horse"


class TestCreateUser:
    """Tests for UserService.create_user."""

    @pytest.mark.asyncio
    async def test_create_user_success(self, hasher: SecretHasher):
        """Verify user is created with a normalized email and a password hash."""
        tenant_id = uuid4()
        service = make_service(hasher)

        user = await service.create_user(
            UserCreate(tenant_id=tenant_id, email="Alice@Example.com", password="correct-horse")
        )

        assert user.email == "alice@example.com"
        assert user.is_active is True
        assert hasher.verify("correct-horse", user.password_hash)
        service.repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_conflict(self, hasher: SecretHasher):
        service = make_service(hasher)
        service.registry.ensure_unique_user_email.side_effect = ConflictError(
            "A user with this email already exists for the tenant."
        )

        with pytest.raises(ConflictError):
            await service.create_user(
                UserCreate(tenant_id=uuid4(), email="alice@example.com", password="correct-horse")
            )

        service.repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, hasher: SecretHasher):
        service = make_service(hasher)
        service.tenants.exists.return_value = False

        with pytest.raises(ValidationError):
            await service.create_user(
                UserCreate(tenant_id=uuid4(), email="alice@example.com", password="correct-horse")
            )


class TestActivation:
    """Tests for activate_user and deactivate_user."""

    @pytest.mark.asyncio
    async def test_deactivate_then_activate(self, hasher: SecretHasher):
        user = User.create(uuid4(), "alice@example.com", hasher.hash("correct-horse"))
        service = make_service(hasher)
        service.repo.get_by_id.return_value = user

        assert (await service.deactivate_user(user.id)).is_active is False
        assert (await service.activate_user(user.id)).is_active is True
        assert service.repo.update.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_user(self, hasher: SecretHasher):
        service = make_service(hasher)
        service.repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.activate_user(uuid4())


class TestUserModel:
    """Tests for User entity rules."""

    def test_password_hash_required(self):
        with pytest.raises(ValidationError):
            User.create(uuid4(), "alice@example.com", "")

    def test_admin_gets_admin_scope(self):
        user = User.create(uuid4(), "alice@example.com", "hash", is_admin=True)

        assert "manage:clients" in user.allowed_scopes
        assert {"openid", "profile", "email"} <= user.allowed_scopes
