"""Email verification token models."""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sentinel.core.constants import MAX_TOKEN_LENGTH
from sentinel.core.database.base import Base, UUIDMixin, as_utc, utc_now
from sentinel.core.errors import ValidationError


if TYPE_CHECKING:
    from sentinel.modules.users.models import User


class EmailVerificationToken(Base, UUIDMixin):
    """Single-use proof of email ownership.

    A token is valid while it is unconsumed and ``now <= expires_at``.
    Expiry is evaluated when the token is read, never stored as a state.
    Consumption is terminal.
    """

    __tablename__ = "email_verification_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(
        String(MAX_TOKEN_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    consumed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="verification_tokens",
        lazy="raise",
    )

    @classmethod
    def create(
        cls,
        user_id: UUID,
        token: str,
        lifetime: timedelta,
        now: datetime | None = None,
    ) -> "EmailVerificationToken":
        if user_id is None:
            raise ValidationError("UserId is required.", field="user_id")
        if not token or not token.strip():
            raise ValidationError("Token is required.", field="token")
        if lifetime <= timedelta(0):
            raise ValidationError("Token lifetime must be positive.", field="lifetime")
        now = now or utc_now()
        return cls(
            id=uuid4(),
            user_id=user_id,
            token=token,
            expires_at=now + lifetime,
            created_at=now,
            consumed_at=None,
        )

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) > as_utc(self.expires_at)

    def is_valid(self, now: datetime) -> bool:
        return not self.is_consumed and not self.is_expired(now)

    def __repr__(self) -> str:
        return (
            f"<EmailVerificationToken(id={self.id}, user_id={self.user_id}, "
            f"consumed={self.is_consumed})>"
        )
