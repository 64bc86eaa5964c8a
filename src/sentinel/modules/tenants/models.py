"""Tenant database models."""

from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from sentinel.core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH
from sentinel.core.database.base import Base, TimestampMixin, UUIDMixin
from sentinel.core.errors import ValidationError
from sentinel.core.utils.text import normalize_slug


class Tenant(Base, UUIDMixin, TimestampMixin):
    """Tenant model representing an isolated organization boundary.

    Clients, users and tenant-scoped scopes reference this table via
    tenant_id. Only ``name`` and ``slug`` change after creation, and only
    through ``rename``.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )

    @classmethod
    def create(cls, name: str, slug: str) -> "Tenant":
        """Build a validated tenant with a normalized slug."""
        tenant = cls(id=uuid4())
        tenant.rename(name, slug)
        return tenant

    def rename(self, name: str, slug: str) -> None:
        """Replace name and slug after validating both."""
        if not name or not name.strip():
            raise ValidationError("Tenant name is required.", field="name")
        if not slug or not slug.strip():
            raise ValidationError("Tenant slug is required.", field="slug")
        self.name = name.strip()
        self.slug = normalize_slug(slug)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, slug={self.slug})>"
