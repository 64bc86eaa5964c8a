"""User database models."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sentinel.core.constants import ADMIN_SCOPE, MAX_EMAIL_LENGTH, USER_BASE_SCOPES
from sentinel.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from sentinel.core.errors import ValidationError
from sentinel.core.utils.text import normalize_email


if TYPE_CHECKING:
    from sentinel.modules.tenants.models import Tenant
    from sentinel.modules.verification.models import EmailVerificationToken


class User(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A human principal bound to one tenant.

    Attributes:
        email: Normalized (trimmed, lowercased) address, unique within the tenant
        password_hash: SecretHasher record, always present
        is_active: Whether the user can sign in
        is_admin: Whether the user administers clients and tenants
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
    )

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(
        "Tenant",
        lazy="selectin",
    )
    verification_tokens: Mapped[list["EmailVerificationToken"]] = relationship(
        "EmailVerificationToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    @classmethod
    def create(
        cls,
        tenant_id: UUID,
        email: str,
        password_hash: str,
        is_active: bool = True,
        is_admin: bool = False,
    ) -> "User":
        """Build a validated user. Users start active unless told otherwise."""
        if tenant_id is None:
            raise ValidationError("TenantId is required.", field="tenant_id")
        if not email or not email.strip():
            raise ValidationError("Email is required.", field="email")
        user = cls(
            id=uuid4(),
            tenant_id=tenant_id,
            email=normalize_email(email),
            is_active=is_active,
            is_admin=is_admin,
        )
        user.set_password_hash(password_hash)
        return user

    def set_password_hash(self, password_hash: str) -> None:
        if not password_hash or not password_hash.strip():
            raise ValidationError("Password hash is required.", field="password")
        self.password_hash = password_hash

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    @property
    def allowed_scopes(self) -> set[str]:
        """Scopes a user may be granted when signing in."""
        scopes = set(USER_BASE_SCOPES)
        if self.is_admin:
            scopes.add(ADMIN_SCOPE)
        return scopes

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, tenant_id={self.tenant_id})>"
