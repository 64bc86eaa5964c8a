"""Unit tests for the HTTP OAuth engine client."""

import json
from uuid import uuid4

import httpx
import pytest

from sentinel.core.auth import ApplicationDescriptor, AuthenticatedPrincipal, HttpOAuthEngine
from sentinel.core.errors import DependencyFailure


def engine_with(handler) -> HttpOAuthEngine:
    """Engine whose requests are answered by ``handler``."""
    engine = HttpOAuthEngine("https://engine.test/api", api_key="k3y")

    def _client() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=engine.base_url,
            headers={"Authorization": f"Bearer {engine.api_key}"},
            transport=httpx.MockTransport(handler),
        )

    engine._client = _client
    return engine


class TestHttpOAuthEngine:
    """Tests for HttpOAuthEngine."""

    @pytest.mark.asyncio
    async def test_issue_token_posts_principal(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "abc", "token_type": "Bearer"})

        tenant_id = uuid4()
        principal = AuthenticatedPrincipal(subject_id="svc", tenant_id=tenant_id, granted_scopes=["api"])

        response = await engine_with(handler).issue_token(principal)

        assert response["access_token"] == "abc"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/tokens"
        assert json.loads(seen[0].content) == {
            "subject_id": "svc",
            "tenant_id": str(tenant_id),
            "granted_scopes": ["api"],
        }

    @pytest.mark.asyncio
    async def test_validate_active_token(self):
        tenant_id = uuid4()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"active": True, "sub": "svc", "tenant_id": str(tenant_id), "scope": "api read"},
            )

        principal = await engine_with(handler).validate_access_token("abc")

        assert principal is not None
        assert principal.tenant_id == tenant_id
        assert principal.granted_scopes == ["api", "read"]

    @pytest.mark.asyncio
    async def test_validate_inactive_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"active": False})

        assert await engine_with(handler).validate_access_token("abc") is None

    @pytest.mark.asyncio
    async def test_upsert_application_puts_descriptor(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        descriptor = ApplicationDescriptor(
            client_id="svc",
            display_name="Service",
            client_type="Confidential",
        )
        await engine_with(handler).upsert_application(descriptor)

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/api/applications/svc"
        assert "client_secret" not in json.loads(seen[0].content)

    @pytest.mark.asyncio
    async def test_error_status_becomes_dependency_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        with pytest.raises(DependencyFailure):
            await engine_with(handler).delete_application("svc")

    @pytest.mark.asyncio
    async def test_transport_error_becomes_dependency_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DependencyFailure):
            await engine_with(handler).delete_application("svc")

    @pytest.mark.asyncio
    async def test_client_id_is_escaped_into_one_path_segment(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        await engine_with(handler).delete_application("a/../../admin?x=1#frag")

        assert len(seen) == 1
        assert seen[0].url.raw_path == b"/api/applications/a%2F..%2F..%2Fadmin%3Fx%3D1%23frag"
        assert seen[0].url.query == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"active": True, "tenant_id": "00000000-0000-0000-0000-000000000001"},
            {"active": True, "sub": "svc"},
            {"active": True, "sub": "svc", "tenant_id": "not-a-uuid"},
        ],
    )
    async def test_incomplete_introspection_is_invalid_token(self, body):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        assert await engine_with(handler).validate_access_token("abc") is None
