"""Unit tests for administrative authorization dependencies."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from sentinel.core.auth import (
    AuthenticatedPrincipal,
    get_admin_principal,
    get_current_principal,
    get_oauth_engine,
)
from sentinel.core.constants import ADMIN_SCOPE
from sentinel.core.errors import AuthFailure, DependencyFailure, ForbiddenError


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def principal(*scopes: str) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(subject_id="svc", tenant_id=uuid4(), granted_scopes=list(scopes))


class TestGetCurrentPrincipal:
    """Tests for get_current_principal."""

    @pytest.mark.asyncio
    async def test_missing_token(self):
        engine = AsyncMock()

        with pytest.raises(AuthFailure) as exc_info:
            await get_current_principal(None, engine)

        assert exc_info.value.error_code == "invalid_token"
        engine.validate_access_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_engine_rejects_token(self):
        engine = AsyncMock()
        engine.validate_access_token.return_value = None

        with pytest.raises(AuthFailure) as exc_info:
            await get_current_principal(bearer("expired"), engine)

        assert exc_info.value.reason == "invalid_token"

    @pytest.mark.asyncio
    async def test_valid_token(self):
        engine = AsyncMock()
        engine.validate_access_token.return_value = principal("api")

        result = await get_current_principal(bearer("good"), engine)

        assert result.subject_id == "svc"
        engine.validate_access_token.assert_awaited_once_with("good")


class TestGetAdminPrincipal:
    """Tests for get_admin_principal."""

    @pytest.mark.asyncio
    async def test_admin_scope_passes(self):
        admin = principal(ADMIN_SCOPE)

        assert await get_admin_principal(admin) is admin

    @pytest.mark.asyncio
    async def test_missing_scope_forbidden(self):
        with pytest.raises(ForbiddenError) as exc_info:
            await get_admin_principal(principal("api"))

        assert exc_info.value.error_code == "insufficient_scope"


class TestGetOAuthEngine:
    """Tests for get_oauth_engine."""

    def test_returns_engine_from_app_state(self):
        request = MagicMock()
        engine = object()
        request.app.state.oauth_engine = engine

        assert get_oauth_engine(request) is engine

    def test_unconfigured_engine(self):
        request = MagicMock()
        request.app.state.oauth_engine = None

        with pytest.raises(DependencyFailure):
            get_oauth_engine(request)
