#!/usr/bin/env python
"""
Seed a development database with a tenant, an administrator and a demo client.
"""

import argparse
import asyncio
import sys

from sqlalchemy import select


# Add src to path for imports
sys.path.insert(0, "src")

from sentinel.core.constants import ADMIN_SCOPE
from sentinel.core.database import Base, async_engine, async_session_factory
from sentinel.core.security import SecretHasher
from sentinel.models import Client, ClientType, Scope, Tenant, User


DEFAULT_TENANT_SLUG = "default"
DEMO_CLIENT_ID = "demo-client"
DEMO_SCOPE = "api"


async def create_tables() -> None:
    """Create all tables that do not exist yet."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created")


async def seed_default(admin_email: str, admin_password: str, client_secret: str) -> None:
    """Create the default tenant, an admin user and a confidential demo client."""
    hasher = SecretHasher()

    async with async_session_factory() as session:
        result = await session.execute(
            select(Tenant).where(Tenant.slug == DEFAULT_TENANT_SLUG)
        )
        tenant = result.scalar_one_or_none()

        if tenant:
            print(f"Default tenant already exists: {tenant.name}")
        else:
            tenant = Tenant.create("Default Organization", DEFAULT_TENANT_SLUG)
            session.add(tenant)
            await session.flush()
            print(f"Created default tenant: {tenant.name} ({tenant.id})")

        result = await session.execute(
            select(Scope).where(Scope.name == DEMO_SCOPE, Scope.tenant_id.is_(None))
        )
        if result.scalar_one_or_none() is None:
            session.add(Scope.create(DEMO_SCOPE, "Demo API access"))
            print(f"Created global scope: {DEMO_SCOPE}")

        result = await session.execute(
            select(User).where(
                User.tenant_id == tenant.id,
                User.email == admin_email.strip().lower(),
            )
        )
        if result.scalar_one_or_none():
            print(f"Admin user already exists: {admin_email}")
        else:
            admin = User.create(
                tenant_id=tenant.id,
                email=admin_email,
                password_hash=hasher.hash(admin_password),
                is_active=True,
                is_admin=True,
            )
            session.add(admin)
            print(f"Created admin user: {admin.email}")

        result = await session.execute(
            select(Client).where(
                Client.tenant_id == tenant.id,
                Client.client_id == DEMO_CLIENT_ID,
            )
        )
        if result.scalar_one_or_none():
            print(f"Demo client already exists: {DEMO_CLIENT_ID}")
        else:
            client = Client.create(
                tenant_id=tenant.id,
                client_id=DEMO_CLIENT_ID,
                name="Demo Client",
                type=ClientType.CONFIDENTIAL,
            )
            client.set_secret_hash(hasher.hash(client_secret))
            # The admin scope lets the demo client call the management API
            client.replace_allowed_scopes([DEMO_SCOPE, ADMIN_SCOPE])
            session.add(client)
            print(f"Created demo client: {DEMO_CLIENT_ID}")

        await session.commit()


async def main(args: argparse.Namespace) -> None:
    """Run the seeding."""
    if args.create_tables:
        await create_tables()
    await seed_default(args.admin_email, args.admin_password, args.client_secret)
    await async_engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with development data")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="change-me-please")
    parser.add_argument("--client-secret", default="demo-secret")
    args = parser.parse_args()

    asyncio.run(main(args))
