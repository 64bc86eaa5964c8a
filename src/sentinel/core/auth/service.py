"""Authentication of machine clients and users.

Both authenticators collapse every failure cause into one AuthFailure.
The cause is kept in ``AuthFailure.reason`` and in the log line, never in
the response.
"""

from collections.abc import Iterable
from typing import Annotated

import structlog
from fastapi import Depends

from sentinel.core.auth.schemas import AuthenticatedPrincipal
from sentinel.core.auth.scopes import ScopeAuthorizer
from sentinel.core.errors import AuthFailure, UserAuthFailure
from sentinel.core.security import Hasher
from sentinel.core.utils.text import normalize_email, normalize_slug
from sentinel.modules.clients.models import Client
from sentinel.modules.clients.repos import ClientRepo
from sentinel.modules.tenants.repos import TenantRepo
from sentinel.modules.users.models import User
from sentinel.modules.users.repos import UserRepo


logger = structlog.get_logger()


class ClientCredentialValidator:
    """Authenticates confidential clients for the client-credentials grant."""

    def __init__(self, clients: ClientRepo, hasher: Hasher) -> None:
        self.clients = clients
        self.hasher = hasher
        self.authorizer = ScopeAuthorizer()

    async def authenticate(
        self,
        client_id: str,
        client_secret: str | None,
        requested_scopes: Iterable[str] = (),
    ) -> AuthenticatedPrincipal:
        """Verify a client's secret and approve its requested scopes.

        Args:
            client_id: Identifier the client presented
            client_secret: Secret the client presented, if any
            requested_scopes: Scope names from the request's ``scope`` field

        Returns:
            Principal for the OAuth engine: the client identifier as subject,
            its tenant and the granted scopes

        Raises:
            AuthFailure: On unknown client, public client, missing or wrong
                secret, or a scope outside the client's allowed set
        """
        try:
            client = await self._verify_client(client_id, client_secret)
            granted = self.authorizer.authorize(requested_scopes, client.allowed_scopes)
        except AuthFailure as e:
            logger.warning("client_authentication_failed", client_id=client_id, reason=e.reason)
            raise

        logger.info(
            "client_authenticated",
            client_id=client.client_id,
            tenant_id=str(client.tenant_id),
            scopes=sorted(granted),
        )
        return AuthenticatedPrincipal(
            subject_id=client.client_id,
            tenant_id=client.tenant_id,
            granted_scopes=sorted(granted),
        )

    async def _verify_client(self, client_id: str, client_secret: str | None) -> Client:
        client = await self.clients.get_by_client_id(client_id)
        if client is None:
            self.hasher.dummy_verify()
            raise AuthFailure("unknown_client")

        if not client.is_confidential:
            self.hasher.dummy_verify()
            raise AuthFailure("public_client")

        if not client_secret or not client.client_secret_hash:
            self.hasher.dummy_verify()
            raise AuthFailure("missing_secret")

        if not self.hasher.verify(client_secret, client.client_secret_hash):
            raise AuthFailure("invalid_secret")

        return client


class UserAuthenticator:
    """Authenticates users by tenant, email and password."""

    def __init__(self, tenants: TenantRepo, users: UserRepo, hasher: Hasher) -> None:
        self.tenants = tenants
        self.users = users
        self.hasher = hasher
        self.authorizer = ScopeAuthorizer()

    async def authenticate(
        self,
        tenant_slug: str,
        email: str,
        password: str,
        requested_scopes: Iterable[str] = (),
    ) -> AuthenticatedPrincipal:
        """Verify a user's password and approve the requested scopes.

        Unknown tenant, unknown email, wrong password, inactive account and
        disallowed scope all raise the same UserAuthFailure.
        """
        try:
            user = await self._verify_user(tenant_slug, email, password)
            granted = self.authorizer.authorize(requested_scopes, user.allowed_scopes)
        except AuthFailure as e:
            logger.warning("user_authentication_failed", tenant=tenant_slug, reason=e.reason)
            raise UserAuthFailure(e.reason) from None

        logger.info("user_authenticated", user_id=str(user.id), tenant_id=str(user.tenant_id))
        return AuthenticatedPrincipal(
            subject_id=str(user.id),
            tenant_id=user.tenant_id,
            granted_scopes=sorted(granted),
        )

    async def _verify_user(self, tenant_slug: str, email: str, password: str) -> User:
        if not tenant_slug or not email or not password:
            raise AuthFailure("missing_credentials")

        tenant = await self.tenants.get_by_slug(normalize_slug(tenant_slug))
        user = None
        if tenant is not None:
            user = await self.users.get_by_email(normalize_email(email), tenant.id)

        if user is None:
            self.hasher.dummy_verify()
            raise AuthFailure("unknown_user")

        if not self.hasher.verify(password, user.password_hash):
            raise AuthFailure("invalid_password")

        if not user.is_active:
            raise AuthFailure("inactive_user")

        return user


# Type aliases for dependency injection
ClientValidator = Annotated[ClientCredentialValidator, Depends(ClientCredentialValidator)]
UserAuth = Annotated[UserAuthenticator, Depends(UserAuthenticator)]
