"""Authentication of clients and users, scope authorization and the token endpoint."""

from sentinel.core.auth.credentials import extract_client_credentials, parse_basic_authorization
from sentinel.core.auth.dependencies import (
    AdminPrincipal,
    CurrentPrincipal,
    get_admin_principal,
    get_current_principal,
)
from sentinel.core.auth.engine import (
    Engine,
    HttpOAuthEngine,
    OAuthEngine,
    build_oauth_engine,
    get_oauth_engine,
)
from sentinel.core.auth.middleware import RequestIdMiddleware
from sentinel.core.auth.schemas import (
    ApplicationDescriptor,
    AuthenticatedPrincipal,
    ClientCredentials,
)
from sentinel.core.auth.scopes import ScopeAuthorizer


__all__ = [
    # Dependencies
    "AdminPrincipal",
    # Schemas
    "ApplicationDescriptor",
    "AuthenticatedPrincipal",
    "ClientCredentials",
    "CurrentPrincipal",
    # Engine
    "Engine",
    "HttpOAuthEngine",
    "OAuthEngine",
    # Middleware
    "RequestIdMiddleware",
    # Authorization
    "ScopeAuthorizer",
    "build_oauth_engine",
    # Credentials
    "extract_client_credentials",
    "get_admin_principal",
    "get_current_principal",
    "get_oauth_engine",
    "parse_basic_authorization",
]
