"""Client database models."""

import enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, Enum, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sentinel.core.constants import MAX_CLIENT_ID_LENGTH, MAX_NAME_LENGTH
from sentinel.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from sentinel.core.errors import ValidationError
from sentinel.core.utils.text import dedupe_preserving_order


if TYPE_CHECKING:
    from sentinel.modules.tenants.models import Tenant


# ClientId is a single path segment in the engine's application URLs
_RESERVED_CLIENT_ID_CHARS = frozenset("/?#")


class ClientType(str, enum.Enum):
    """Whether a client can keep a secret."""

    CONFIDENTIAL = "Confidential"
    PUBLIC = "Public"

    @classmethod
    def parse(cls, value: "str | ClientType") -> "ClientType":
        """Parse a type name case-insensitively.

        Raises:
            ValidationError: If the value names neither type
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if isinstance(value, str) and value.strip().lower() == member.value.lower():
                return member
        raise ValidationError(
            "Invalid client type. Use Confidential or Public.",
            field="type",
        )


class Client(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A registered OAuth application owned by a tenant.

    Attributes:
        client_id: Identifier presented by the application, unique per tenant
        name: Display name
        type: Confidential or Public
        client_secret_hash: SecretHasher record, present only for confidential clients
        redirect_uris: Ordered redirect URIs without duplicates
        allowed_scopes: Scope names the client may request, without duplicates
    """

    __tablename__ = "clients"
    __table_args__ = (
        UniqueConstraint("tenant_id", "client_id", name="uq_clients_tenant_client_id"),
    )

    client_id: Mapped[str] = mapped_column(
        String(MAX_CLIENT_ID_LENGTH),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    type: Mapped[ClientType] = mapped_column(
        Enum(
            ClientType,
            name="client_type",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    client_secret_hash: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    # Lists are replaced, never mutated in place, so change tracking sees them
    redirect_uris: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )
    allowed_scopes: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    tenant: Mapped["Tenant"] = relationship(
        "Tenant",
        lazy="selectin",
    )

    @classmethod
    def create(
        cls,
        tenant_id: UUID,
        client_id: str,
        name: str,
        type: "ClientType | str",
    ) -> "Client":
        """Build a validated client without secret, redirect URIs or scopes."""
        if tenant_id is None:
            raise ValidationError("TenantId is required.", field="tenant_id")
        if not client_id or not client_id.strip():
            raise ValidationError("ClientId is required.", field="client_id")
        if _RESERVED_CLIENT_ID_CHARS.intersection(client_id) or client_id.strip() in (".", ".."):
            raise ValidationError(
                "ClientId cannot contain '/', '?' or '#', or be '.' or '..'.",
                field="client_id",
            )
        client = cls(
            id=uuid4(),
            tenant_id=tenant_id,
            client_id=client_id.strip(),
            type=ClientType.parse(type),
            client_secret_hash=None,
            redirect_uris=[],
            allowed_scopes=[],
        )
        client.rename(name)
        return client

    @property
    def is_confidential(self) -> bool:
        return self.type == ClientType.CONFIDENTIAL

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Name is required.", field="name")
        self.name = name.strip()

    def set_type(self, type: "ClientType | str") -> None:
        """Change the client type; becoming public drops any secret."""
        self.type = ClientType.parse(type)
        if self.type == ClientType.PUBLIC:
            self.client_secret_hash = None

    def set_secret_hash(self, secret_hash: str | None) -> None:
        """Store a SecretHasher record, or clear it with None.

        Raises:
            ValidationError: If a public client is given a secret
        """
        if self.type == ClientType.PUBLIC and secret_hash:
            raise ValidationError("Public clients cannot have secrets.", field="client_secret")
        self.client_secret_hash = secret_hash or None

    def add_redirect_uri(self, uri: str) -> None:
        if not uri or not uri.strip():
            raise ValidationError("Redirect URI is required.", field="redirect_uris")
        if uri not in self.redirect_uris:
            self.redirect_uris = [*self.redirect_uris, uri]

    def add_scope(self, scope: str) -> None:
        if not scope or not scope.strip():
            raise ValidationError("Scope is required.", field="allowed_scopes")
        if scope not in self.allowed_scopes:
            self.allowed_scopes = [*self.allowed_scopes, scope]

    def replace_redirect_uris(self, uris: list[str] | None) -> None:
        self.redirect_uris = dedupe_preserving_order(uris)

    def replace_allowed_scopes(self, scopes: list[str] | None) -> None:
        self.allowed_scopes = dedupe_preserving_order(scopes)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, client_id={self.client_id}, tenant_id={self.tenant_id})>"
