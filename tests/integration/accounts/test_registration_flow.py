"""Integration tests for registration, email verification and sign-in."""

import re
from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sentinel.core.errors import DependencyFailure
from sentinel.models import Tenant, User


pytestmark = pytest.mark.integration

REGISTER_URL = "/api/v1/account/register"
LOGIN_URL = "/api/v1/account/login"

REGISTRATION = {
    "tenant_slug": "acme",
    "email": "bob@example.com",
    "password": "correct-horse",
    "confirm_password": "correct-horse",
}
LOGIN = {"tenant_slug": "acme", "email": "bob@example.com", "password": "correct-horse"}


def link_from(message: dict[str, str]) -> str:
    match = re.search(r"https?://\S+", message["body"])
    assert match is not None
    return match.group(0)


def without_trace(body: dict) -> dict:
    return {k: v for k, v in body.items() if k != "trace_id"}


class TestRegistrationFlow:
    """Register, verify once, then sign in."""

    async def test_full_flow(self, client: AsyncClient, tenant: Tenant, mailer):
        registered = await client.post(REGISTER_URL, json=REGISTRATION)
        assert registered.status_code == 201
        assert registered.json()["user"]["is_active"] is False

        before = await client.post(LOGIN_URL, json=LOGIN)
        assert before.status_code == 401

        link = urlparse(link_from(mailer.messages[0]))
        assert link.path == "/api/v1/account/verify"
        token = parse_qs(link.query)["token"][0]

        verified = await client.get(link.path, params={"token": token})
        assert verified.status_code == 200
        assert verified.json()["user"]["is_active"] is True

        again = await client.get(link.path, params={"token": token})
        assert again.status_code == 400
        assert again.json()["detail"] == "Invalid or expired token."

        after = await client.post(LOGIN_URL, json=LOGIN)
        assert after.status_code == 200
        assert after.json()["subject_id"] == registered.json()["user"]["id"]
        assert after.json()["granted_scopes"] == ["email", "openid", "profile"]

    async def test_mail_goes_to_registrant(self, client: AsyncClient, tenant: Tenant, mailer):
        await client.post(REGISTER_URL, json=REGISTRATION)

        assert len(mailer.messages) == 1
        assert mailer.messages[0]["to"] == "bob@example.com"

    async def test_unknown_token(self, client: AsyncClient):
        response = await client.get("/api/v1/account/verify", params={"token": "nope"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired token."

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/account/verify")

        assert response.status_code == 400


class TestRegistrationFailures:
    """Registration rejections."""

    async def test_unknown_tenant(self, client: AsyncClient):
        response = await client.post(REGISTER_URL, json={**REGISTRATION, "tenant_slug": "ghost"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Tenant not found."

    async def test_password_mismatch(self, client: AsyncClient, tenant: Tenant):
        response = await client.post(
            REGISTER_URL, json={**REGISTRATION, "confirm_password": "other-horse"}
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Passwords do not match."

    async def test_duplicate_email(self, client: AsyncClient, tenant: Tenant, user: User):
        response = await client.post(
            REGISTER_URL, json={**REGISTRATION, "email": "Alice@Example.com"}
        )

        assert response.status_code == 409

    async def test_mail_failure_persists_nothing(
        self,
        client: AsyncClient,
        tenant: Tenant,
        mailer,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        mailer.fail_with = DependencyFailure("Email transport unavailable", dependency="email")

        response = await client.post(REGISTER_URL, json=REGISTRATION)

        assert response.status_code == 503
        async with session_factory() as session:
            users = (await session.execute(select(User))).scalars().all()
            assert users == []


class TestLogin:
    """Sign-in failures share one response."""

    async def test_wrong_password_matches_unknown_email(
        self, client: AsyncClient, user: User
    ):
        wrong = await client.post(
            LOGIN_URL,
            json={"tenant_slug": "acme", "email": "alice@example.com", "password": "wrong-horse"},
        )
        unknown = await client.post(
            LOGIN_URL,
            json={"tenant_slug": "acme", "email": "nobody@example.com", "password": "wrong-horse"},
        )

        assert wrong.status_code == unknown.status_code == 401
        assert without_trace(wrong.json()) == without_trace(unknown.json())
        assert wrong.json()["detail"] == "Invalid credentials."
        assert "WWW-Authenticate" not in wrong.headers

    async def test_active_user_signs_in(self, client: AsyncClient, user: User):
        response = await client.post(
            LOGIN_URL,
            json={"tenant_slug": "ACME", "email": "Alice@example.com", "password": "correct-horse"},
        )

        assert response.status_code == 200
        assert response.json()["tenant_id"] == str(user.tenant_id)
