"""Scope database models."""

from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from sentinel.core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from sentinel.core.database.base import Base, TimestampMixin, UUIDMixin
from sentinel.core.errors import ValidationError


class Scope(Base, UUIDMixin, TimestampMixin):
    """A named permission, global (no tenant) or owned by one tenant.

    Global names are unique across the system, tenant names unique within
    their tenant. NULL tenant ids never collide under a plain composite
    unique constraint, hence the two partial indexes.
    """

    __tablename__ = "scopes"
    __table_args__ = (
        Index(
            "uq_scopes_global_name",
            "name",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
        Index(
            "uq_scopes_tenant_name",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=text("tenant_id IS NOT NULL"),
            sqlite_where=text("tenant_id IS NOT NULL"),
        ),
    )

    tenant_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    @classmethod
    def create(
        cls,
        name: str,
        description: str | None = None,
        tenant_id: UUID | None = None,
    ) -> "Scope":
        scope = cls(id=uuid4())
        scope.update(name, description, tenant_id)
        return scope

    def update(self, name: str, description: str | None, tenant_id: UUID | None) -> None:
        """Replace name, description and owning tenant after validation."""
        if not name or not name.strip():
            raise ValidationError("Scope name is required.", field="name")
        self.name = name.strip()
        self.description = description.strip() if description else None
        self.tenant_id = tenant_id

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None

    def __repr__(self) -> str:
        return f"<Scope(id={self.id}, name={self.name}, tenant_id={self.tenant_id})>"
