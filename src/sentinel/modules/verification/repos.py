"""Email verification token repository."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select, update

from sentinel.api.dependencies import DBSession
from sentinel.core.database import flush_or_conflict
from sentinel.modules.verification.models import EmailVerificationToken


class EmailVerificationTokenRepository:
    """Repository for EmailVerificationToken database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, token: EmailVerificationToken) -> EmailVerificationToken:
        self.session.add(token)
        await flush_or_conflict(self.session, "Token collision.", "token_exists")
        return token

    async def get_by_token(self, token: str) -> EmailVerificationToken | None:
        """Look a token up by its exact string."""
        stmt = select(EmailVerificationToken).where(EmailVerificationToken.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_consumed(self, token_id: UUID, now: datetime) -> bool:
        """Consume a token if, and only if, it is still valid.

        Issues one conditional UPDATE. Of any number of concurrent callers
        exactly one sees a matched row; the rest get ``False``.
        """
        stmt = (
            update(EmailVerificationToken)
            .where(
                EmailVerificationToken.id == token_id,
                EmailVerificationToken.consumed_at.is_(None),
                EmailVerificationToken.expires_at >= now,
            )
            .values(consumed_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1


# Type alias for dependency injection
TokenRepo = Annotated[
    EmailVerificationTokenRepository, Depends(EmailVerificationTokenRepository)
]
