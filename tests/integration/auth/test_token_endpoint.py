"""Integration tests for the client-credentials token endpoint."""

import base64

import pytest
from httpx import AsyncClient

from sentinel.models import Client


pytestmark = pytest.mark.integration

TOKEN_URL = "/connect/token"


def basic(client_id: str, secret: str) -> dict[str, str]:
    encoded = base64.b64encode(f"{client_id}:{secret}".encode()).decode()
    return {"Authorization": f"Basic {encoded}"}


def without_trace(body: dict) -> dict:
    return {k: v for k, v in body.items() if k != "trace_id"}


class TestClientCredentialsGrant:
    """Successful token exchanges."""

    async def test_form_credentials(
        self, client: AsyncClient, confidential_client: Client, oauth_engine
    ):
        response = await client.post(
            TOKEN_URL,
            data={
                "grant_type": "client_credentials",
                "client_id": "svc",
                "client_secret": "s3cret",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == "token-for-svc"
        assert body["scope"] == "api read"
        assert oauth_engine.issued[0].tenant_id == confidential_client.tenant_id

    async def test_basic_header_credentials(self, client: AsyncClient, confidential_client: Client):
        response = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials", "scope": "read"},
            headers=basic("svc", "s3cret"),
        )

        assert response.status_code == 200
        assert response.json()["scope"] == "read"


class TestTokenFailures:
    """Every credential failure produces the same response."""

    async def test_wrong_secret_matches_unknown_client(
        self, client: AsyncClient, confidential_client: Client
    ):
        wrong = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials", "client_id": "svc", "client_secret": "s3creT"},
        )
        unknown = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials", "client_id": "ghost", "client_secret": "s3cret"},
        )

        assert wrong.status_code == unknown.status_code == 401
        assert without_trace(wrong.json()) == without_trace(unknown.json())
        assert wrong.json()["detail"] == "Client authentication failed."
        assert wrong.headers["WWW-Authenticate"].startswith("Basic")

    async def test_public_client_cannot_use_grant(self, client: AsyncClient, public_client: Client):
        response = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials", "client_id": "spa", "client_secret": "x"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Client authentication failed."

    async def test_disallowed_scope(self, client: AsyncClient, confidential_client: Client):
        response = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials", "scope": "read write"},
            headers=basic("svc", "s3cret"),
        )

        assert response.status_code == 401

    async def test_malformed_basic_header(self, client: AsyncClient, confidential_client: Client):
        response = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials"},
            headers={"Authorization": "Basic not-base64!"},
        )

        assert response.status_code == 401

    async def test_unsupported_grant_type(self, client: AsyncClient, confidential_client: Client):
        response = await client.post(
            TOKEN_URL,
            data={"grant_type": "password", "client_id": "svc", "client_secret": "s3cret"},
        )

        assert response.status_code == 422
        assert response.json()["type"].endswith("/unsupported_grant_type")

    async def test_missing_grant_type(self, client: AsyncClient):
        response = await client.post(TOKEN_URL, data={"client_id": "svc"})

        assert response.status_code == 422


class TestUserinfo:
    """Tests for the bearer token principal endpoint."""

    async def test_returns_principal(self, admin_client: AsyncClient):
        response = await admin_client.get("/connect/userinfo")

        assert response.status_code == 200
        assert response.json()["subject_id"] == "admin-cli"

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/connect/userinfo")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_token")
        assert "WWW-Authenticate" not in response.headers
