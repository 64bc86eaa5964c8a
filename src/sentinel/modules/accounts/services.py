"""Self-service registration."""

from typing import Annotated
from urllib.parse import urlencode

import structlog
from fastapi import Depends

from sentinel.config import settings
from sentinel.core.email import Mailer
from sentinel.core.errors import ValidationError
from sentinel.core.security import Hasher
from sentinel.core.utils.text import normalize_slug
from sentinel.modules.accounts.schemas import RegisterRequest
from sentinel.modules.tenants.registry import Registry
from sentinel.modules.tenants.repos import TenantRepo
from sentinel.modules.users.models import User
from sentinel.modules.users.repos import UserRepo
from sentinel.modules.users.services import validate_password
from sentinel.modules.verification.services import TokenManager


logger = structlog.get_logger()

VERIFY_PATH = "/api/v1/account/verify"
VERIFICATION_SUBJECT = "Verify your email"


def build_verification_link(token: str) -> str:
    """Return the public URL that consumes ``token``."""
    base = settings.public_base_url.rstrip("/")
    return f"{base}{VERIFY_PATH}?{urlencode({'token': token})}"


def build_verification_body(link: str) -> str:
    return (
        "Confirm your email address to activate your account:\n\n"
        f"{link}\n\n"
        "If you did not create an account, ignore this message."
    )


class RegistrationService:
    """Creates inactive users and sends them a verification link."""

    def __init__(
        self,
        tenants: TenantRepo,
        users: UserRepo,
        registry: Registry,
        hasher: Hasher,
        tokens: TokenManager,
        mailer: Mailer,
    ) -> None:
        self.tenants = tenants
        self.users = users
        self.registry = registry
        self.hasher = hasher
        self.tokens = tokens
        self.mailer = mailer

    async def register(self, data: RegisterRequest) -> User:
        """Register a user into an existing tenant.

        The user, the token and the email go out in one transaction: if the
        email collaborator fails, nothing is persisted.

        Raises:
            ValidationError: Blank slug, mismatched or short password, or
                unknown tenant
            ConflictError: If the tenant already has a user with this email
            DependencyFailure: If the email cannot be sent
        """
        if not data.tenant_slug.strip():
            raise ValidationError("Missing tenant slug.", field="tenant_slug")
        if data.password != data.confirm_password:
            raise ValidationError("Passwords do not match.", field="confirm_password")
        validate_password(data.password)

        tenant = await self.tenants.get_by_slug(normalize_slug(data.tenant_slug))
        if tenant is None:
            raise ValidationError("Tenant not found.", field="tenant_slug")

        email = await self.registry.ensure_unique_user_email(tenant.id, data.email)
        user = User.create(
            tenant_id=tenant.id,
            email=email,
            password_hash=self.hasher.hash(data.password),
            is_active=False,
        )
        user = await self.users.create(user)

        token = await self.tokens.issue(user.id)
        link = build_verification_link(token)
        await self.mailer.send(user.email, VERIFICATION_SUBJECT, build_verification_body(link))

        logger.info("account_registered", user_id=str(user.id), tenant_id=str(tenant.id))
        return user


# Type alias for dependency injection
RegistrationSvc = Annotated[RegistrationService, Depends(RegistrationService)]
