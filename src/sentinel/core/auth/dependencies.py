"""FastAPI dependencies for administrative authorization.

Administrative routes accept a bearer access token minted by the OAuth
engine. The engine resolves it to a principal; the principal must hold the
``manage:clients`` scope.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sentinel.core.auth.engine import Engine
from sentinel.core.auth.schemas import AuthenticatedPrincipal
from sentinel.core.constants import ADMIN_SCOPE
from sentinel.core.errors import AccessTokenFailure, ForbiddenError


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    engine: Engine,
) -> AuthenticatedPrincipal:
    """Resolve the bearer token to a principal.

    Raises:
        AccessTokenFailure: If the token is missing or the engine rejects it
    """
    if not credentials or not credentials.credentials:
        raise AccessTokenFailure("missing_token")

    principal = await engine.validate_access_token(credentials.credentials)
    if principal is None:
        raise AccessTokenFailure("invalid_token")
    return principal


async def get_admin_principal(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
) -> AuthenticatedPrincipal:
    """Require the administrative scope.

    Raises:
        ForbiddenError: If the principal lacks ``manage:clients``
    """
    if ADMIN_SCOPE not in principal.granted_scopes:
        raise ForbiddenError(
            "Administrative scope required",
            error_code="insufficient_scope",
        )
    return principal


# Type aliases for cleaner dependency injection
CurrentPrincipal = Annotated[AuthenticatedPrincipal, Depends(get_current_principal)]
AdminPrincipal = Annotated[AuthenticatedPrincipal, Depends(get_admin_principal)]
