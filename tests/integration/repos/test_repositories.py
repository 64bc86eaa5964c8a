"""Integration tests for repositories against a real database session."""

import asyncio
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from sentinel.core.database import Base
from sentinel.core.errors import ConflictError
from sentinel.models import Client, ClientType, EmailVerificationToken, Scope, Tenant, User
from sentinel.modules.clients.repos import ClientRepository
from sentinel.modules.scopes.repos import ScopeRepository
from sentinel.modules.tenants.repos import TenantRepository
from sentinel.modules.verification.repos import EmailVerificationTokenRepository


pytestmark = pytest.mark.integration

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
async def token(db: AsyncSession, user: User) -> EmailVerificationToken:
    record = EmailVerificationToken.create(user.id, "tok-1", timedelta(hours=1), now=NOW)
    db.add(record)
    await db.commit()
    return record


class TestMarkConsumed:
    """The conditional update consumes a token at most once."""

    async def test_first_call_wins(
        self,
        token: EmailVerificationToken,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            repo = EmailVerificationTokenRepository(session)
            first = await repo.mark_consumed(token.id, NOW)
            second = await repo.mark_consumed(token.id, NOW)
            await session.commit()

        assert first is True
        assert second is False

        async with session_factory() as session:
            stored = await EmailVerificationTokenRepository(session).get_by_token("tok-1")
            assert stored is not None
            assert stored.is_consumed

    async def test_expired_token_not_consumed(
        self,
        token: EmailVerificationToken,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            repo = EmailVerificationTokenRepository(session)
            assert await repo.mark_consumed(token.id, NOW + timedelta(hours=2)) is False

    async def test_duplicate_token_string(self, token: EmailVerificationToken, db: AsyncSession, user: User):
        repo = EmailVerificationTokenRepository(db)

        with pytest.raises(ConflictError):
            await repo.create(EmailVerificationToken.create(user.id, "tok-1", timedelta(hours=1)))
        await db.rollback()


class TestMarkConsumedAcrossConnections:
    """Two sessions on separate connections race for the same token."""

    @pytest.fixture
    async def file_engine(self, tmp_path) -> AsyncGenerator[AsyncEngine, None]:
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
            connect_args={"timeout": 10},
        )
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield engine
        await engine.dispose()

    async def test_exactly_one_session_consumes(self, file_engine: AsyncEngine, hasher):
        sessions = async_sessionmaker(bind=file_engine, expire_on_commit=False)
        async with sessions() as session:
            tenant = Tenant.create("Acme Corp", "acme")
            session.add(tenant)
            await session.flush()
            user = User.create(tenant.id, "race@example.com", hasher.hash("correct-horse"))
            session.add(user)
            await session.flush()
            record = EmailVerificationToken.create(user.id, "tok-race", timedelta(hours=1), now=NOW)
            session.add(record)
            await session.commit()

        async def consume() -> bool:
            async with sessions() as session:
                consumed = await EmailVerificationTokenRepository(session).mark_consumed(
                    record.id, NOW
                )
                await session.commit()
                return consumed

        results = await asyncio.gather(consume(), consume())

        assert sorted(results) == [False, True]


class TestClientRepository:
    """Client lookups."""

    async def test_get_by_client_id_prefers_oldest(self, db: AsyncSession, tenant: Tenant):
        other = Tenant.create("Globex", "globex")
        db.add(other)
        first = Client.create(tenant.id, "shared", "First", ClientType.PUBLIC)
        first.created_at = NOW
        second = Client.create(other.id, "shared", "Second", ClientType.PUBLIC)
        second.created_at = NOW + timedelta(minutes=1)
        db.add_all([first, second])
        await db.commit()

        found = await ClientRepository(db).get_by_client_id("shared")

        assert found is not None
        assert found.id == first.id

    async def test_any_references_scope(self, db: AsyncSession, confidential_client: Client):
        repo = ClientRepository(db)

        assert await repo.any_references_scope("api", None) is True
        assert await repo.any_references_scope("API", None) is False
        assert await repo.any_references_scope("api", confidential_client.tenant_id) is True

    async def test_unique_client_id_per_tenant(self, db: AsyncSession, confidential_client: Client):
        repo = ClientRepository(db)

        with pytest.raises(ConflictError) as exc_info:
            await repo.create(Client.create(confidential_client.tenant_id, "svc", "Dup", "Public"))

        assert exc_info.value.message == "ClientId already exists for this tenant."
        await db.rollback()


class TestTenantRepository:
    """Tenant lookups and constraints."""

    async def test_has_dependents(self, db: AsyncSession, tenant: Tenant, user: User):
        assert await TenantRepository(db).has_dependents(tenant.id) is True

    async def test_no_dependents(self, db: AsyncSession, tenant: Tenant):
        assert await TenantRepository(db).has_dependents(tenant.id) is False

    async def test_slug_constraint(self, db: AsyncSession, tenant: Tenant):
        with pytest.raises(ConflictError) as exc_info:
            await TenantRepository(db).create(Tenant.create("Again", "ACME"))

        assert exc_info.value.message == "Slug already exists."
        await db.rollback()


class TestScopeRepository:
    """Scope namespaces."""

    async def test_global_names_unique(self, db: AsyncSession):
        repo = ScopeRepository(db)
        await repo.create(Scope.create("api"))

        with pytest.raises(ConflictError):
            await repo.create(Scope.create("api"))
        await db.rollback()

    async def test_name_taken_per_namespace(self, db: AsyncSession, tenant: Tenant):
        repo = ScopeRepository(db)
        await repo.create(Scope.create("api", tenant_id=tenant.id))
        await db.commit()

        assert await repo.name_taken("api", tenant.id) is True
        assert await repo.name_taken("api", None) is False
