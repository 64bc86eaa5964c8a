"""Client-credentials token endpoint and bearer token introspection.

The endpoint authenticates the client and approves its scopes, then asks
the OAuth engine to mint the token. The engine's response is returned as
is; nothing here builds or signs tokens.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Form, Header

from sentinel.core.auth.credentials import extract_client_credentials
from sentinel.core.auth.dependencies import CurrentPrincipal
from sentinel.core.auth.engine import Engine
from sentinel.core.auth.schemas import AuthenticatedPrincipal
from sentinel.core.auth.service import ClientValidator
from sentinel.core.constants import CLIENT_CREDENTIALS_GRANT
from sentinel.core.errors import ValidationError
from sentinel.core.utils.text import parse_scope_string


router = APIRouter(prefix="/connect", tags=["oauth"])


@router.post(
    "/token",
    summary="Client-credentials token exchange",
    description=(
        "Form-encoded token request. Only grant_type=client_credentials is handled. "
        "Credentials come from client_id/client_secret fields or an HTTP Basic header."
    ),
)
async def exchange_token(
    validator: ClientValidator,
    engine: Engine,
    grant_type: Annotated[str, Form()],
    client_id: Annotated[str | None, Form()] = None,
    client_secret: Annotated[str | None, Form()] = None,
    scope: Annotated[str | None, Form()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Exchange client credentials for an access token."""
    if grant_type != CLIENT_CREDENTIALS_GRANT:
        raise ValidationError(
            "Unsupported grant type.",
            error_code="unsupported_grant_type",
            field="grant_type",
        )

    credentials = extract_client_credentials(client_id, client_secret, authorization)
    principal = await validator.authenticate(
        credentials.client_id,
        credentials.client_secret,
        parse_scope_string(scope),
    )
    return await engine.issue_token(principal)


@router.get(
    "/userinfo",
    response_model=AuthenticatedPrincipal,
    summary="Bearer token principal",
    description="Returns the subject, tenant and scopes the engine resolves for the bearer token.",
)
async def userinfo(principal: CurrentPrincipal) -> AuthenticatedPrincipal:
    """Describe the caller's access token."""
    return principal
