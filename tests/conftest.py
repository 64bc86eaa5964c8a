"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from typing import Any
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sentinel.core.auth.schemas import ApplicationDescriptor, AuthenticatedPrincipal
from sentinel.core.constants import ADMIN_SCOPE
from sentinel.core.database import Base, get_db
from sentinel.core.email import get_email_sender
from sentinel.core.security import SecretHasher
from sentinel.main import create_app

# Import all models to ensure they're registered with Base.metadata
from sentinel.models import Client, ClientType, Tenant, User


TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_TOKEN = "admin-token"
READER_TOKEN = "reader-token"


class FakeOAuthEngine:
    """In-memory OAuth engine that records what the core pushes to it."""

    def __init__(self) -> None:
        self.applications: dict[str, ApplicationDescriptor] = {}
        self.deleted: list[str] = []
        self.issued: list[AuthenticatedPrincipal] = []
        self.tokens: dict[str, AuthenticatedPrincipal] = {}
        self.fail_with: Exception | None = None

    async def issue_token(self, principal: AuthenticatedPrincipal) -> dict[str, Any]:
        self.issued.append(principal)
        return {
            "access_token": f"token-for-{principal.subject_id}",
            "token_type": "Bearer",
            "expires_in": 3600,
            "scope": " ".join(principal.granted_scopes),
        }

    async def validate_access_token(self, token: str) -> AuthenticatedPrincipal | None:
        return self.tokens.get(token)

    async def upsert_application(self, descriptor: ApplicationDescriptor) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.applications[descriptor.client_id] = descriptor

    async def delete_application(self, client_id: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.applications.pop(client_id, None)
        self.deleted.append(client_id)


class FakeEmailSender:
    """Collects outgoing messages instead of sending them."""

    def __init__(self) -> None:
        self.messages: list[dict[str, str]] = []
        self.fail_with: Exception | None = None

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def hasher() -> SecretHasher:
    """Hasher at the minimum supported iteration count."""
    return SecretHasher()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory test database shared by every session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and reading results outside a request."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def oauth_engine() -> FakeOAuthEngine:
    fake = FakeOAuthEngine()
    fake.tokens[ADMIN_TOKEN] = AuthenticatedPrincipal(
        subject_id="admin-cli",
        tenant_id=uuid4(),
        granted_scopes=[ADMIN_SCOPE],
    )
    fake.tokens[READER_TOKEN] = AuthenticatedPrincipal(
        subject_id="reader-cli",
        tenant_id=uuid4(),
        granted_scopes=["api"],
    )
    return fake


@pytest.fixture
def mailer() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
async def app(
    session_factory: async_sessionmaker[AsyncSession],
    oauth_engine: FakeOAuthEngine,
    mailer: FakeEmailSender,
):
    """Create test application instance."""
    application = create_app(oauth_engine=oauth_engine)

    # One transaction per request, like the real dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_email_sender] = lambda: mailer

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def admin_client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client carrying a bearer token with the admin scope."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {ADMIN_TOKEN}"},
    ) as client:
        yield client


# ============================================================
# Tenant, User and Client Fixtures
# ============================================================


@pytest.fixture
async def tenant(db: AsyncSession) -> Tenant:
    """Create and commit a test tenant."""
    tenant = Tenant.create("Acme Corp", "acme")
    db.add(tenant)
    await db.commit()
    return tenant


@pytest.fixture
async def confidential_client(db: AsyncSession, tenant: Tenant, hasher: SecretHasher) -> Client:
    """Confidential client ``svc`` with secret ``s3cret`` allowed ``api`` and ``read``."""
    client = Client.create(tenant.id, "svc", "Service", ClientType.CONFIDENTIAL)
    client.set_secret_hash(hasher.hash("s3cret"))
    client.replace_allowed_scopes(["api", "read"])
    db.add(client)
    await db.commit()
    return client


@pytest.fixture
async def public_client(db: AsyncSession, tenant: Tenant) -> Client:
    client = Client.create(tenant.id, "spa", "Single Page App", ClientType.PUBLIC)
    client.replace_redirect_uris(["https://spa.example.com/callback"])
    client.replace_allowed_scopes(["api"])
    db.add(client)
    await db.commit()
    return client


@pytest.fixture
async def user(db: AsyncSession, tenant: Tenant, hasher: SecretHasher) -> User:
    """Active user ``alice@example.com`` with password ``correct-horse``."""
    user = User.create(
        tenant_id=tenant.id,
        email="alice@example.com",
        password_hash=hasher.hash("correct-horse"),
    )
    db.add(user)
    await db.commit()
    return user
