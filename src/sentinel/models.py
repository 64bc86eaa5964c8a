"""Import every model so relationships resolve and Base.metadata is complete."""

from sentinel.modules.clients.models import Client, ClientType
from sentinel.modules.scopes.models import Scope
from sentinel.modules.tenants.models import Tenant
from sentinel.modules.users.models import User
from sentinel.modules.verification.models import EmailVerificationToken


__all__ = [
    "Client",
    "ClientType",
    "EmailVerificationToken",
    "Scope",
    "Tenant",
    "User",
]
