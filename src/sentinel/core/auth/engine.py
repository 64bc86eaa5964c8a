"""OAuth/OIDC engine collaborator.

Token minting, signing, introspection and the engine's own application
registry live outside this service. The core talks to the engine only
through the ``OAuthEngine`` protocol: it hands over verified principals and
keeps the engine's application records in step with the Client table.
"""

from typing import Annotated, Any, Protocol
from urllib.parse import quote

import httpx
import structlog
from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError

from sentinel.config import settings
from sentinel.core.auth.schemas import ApplicationDescriptor, AuthenticatedPrincipal
from sentinel.core.errors import DependencyFailure


logger = structlog.get_logger()


class OAuthEngine(Protocol):
    """Operations the core consumes from the OAuth/OIDC engine."""

    async def issue_token(self, principal: AuthenticatedPrincipal) -> dict[str, Any]:
        """Mint a token response for an authenticated, authorized principal."""
        ...

    async def validate_access_token(self, token: str) -> AuthenticatedPrincipal | None:
        """Resolve a bearer token to its principal, or None if invalid."""
        ...

    async def upsert_application(self, descriptor: ApplicationDescriptor) -> None: ...

    async def delete_application(self, client_id: str) -> None: ...


class HttpOAuthEngine:
    """OAuthEngine backed by the engine's HTTP management API.

    Endpoints (relative to ``base_url``):
        POST   tokens                     issue a token for a principal
        POST   introspect                 validate an access token
        PUT    applications/{client_id}   create or replace an application
        DELETE applications/{client_id}   remove an application

    Transport errors and non-2xx responses raise DependencyFailure.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.api_key = api_key
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPError as e:
            logger.error("oauth_engine_request_failed", method=method, path=path, error=str(e))
            raise DependencyFailure(
                "OAuth engine unavailable", dependency="oauth_engine"
            ) from e

    async def issue_token(self, principal: AuthenticatedPrincipal) -> dict[str, Any]:
        response = await self._request(
            "POST", "tokens", json=principal.model_dump(mode="json")
        )
        return response.json()

    async def validate_access_token(self, token: str) -> AuthenticatedPrincipal | None:
        response = await self._request("POST", "introspect", data={"token": token})
        data = response.json()
        if not data.get("active"):
            return None
        try:
            return AuthenticatedPrincipal(
                subject_id=data["sub"],
                tenant_id=data["tenant_id"],
                granted_scopes=(data.get("scope") or "").split(),
            )
        except (KeyError, PydanticValidationError):
            # An active token without a usable subject or tenant grants nothing
            logger.warning("oauth_engine_incomplete_introspection", fields=sorted(data))
            return None

    async def upsert_application(self, descriptor: ApplicationDescriptor) -> None:
        await self._request(
            "PUT",
            _application_path(descriptor.client_id),
            json=descriptor.model_dump(mode="json"),
        )

    async def delete_application(self, client_id: str) -> None:
        await self._request("DELETE", _application_path(client_id))


def _application_path(client_id: str) -> str:
    # One opaque path segment; "/", "?" and "#" must not reach the URL structure
    return f"applications/{quote(client_id, safe='')}"

def build_oauth_engine() -> OAuthEngine | None:
    """Build the configured engine, or None when no engine URL is set."""
    if not settings.oauth_engine_url:
        return None
    return HttpOAuthEngine(
        settings.oauth_engine_url,
        api_key=settings.oauth_engine_api_key,
        timeout=settings.oauth_engine_timeout_seconds,
    )


def get_oauth_engine(request: Request) -> OAuthEngine:
    """Return the engine attached to the application at startup.

    Raises:
        DependencyFailure: If no engine is configured
    """
    engine = getattr(request.app.state, "oauth_engine", None)
    if engine is None:
        raise DependencyFailure("OAuth engine not configured", dependency="oauth_engine")
    return engine


# Type alias for dependency injection
Engine = Annotated[OAuthEngine, Depends(get_oauth_engine)]
