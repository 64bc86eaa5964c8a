"""Issuing and consuming email verification tokens."""

import secrets
from datetime import datetime, timedelta
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sentinel.config import settings
from sentinel.core.database import utc_now
from sentinel.core.errors import TokenFailure
from sentinel.modules.users.models import User
from sentinel.modules.users.repos import UserRepo
from sentinel.modules.verification.models import EmailVerificationToken
from sentinel.modules.verification.repos import TokenRepo


logger = structlog.get_logger()


def generate_token(num_bytes: int | None = None) -> str:
    """Return an unpadded URL-safe token from ``num_bytes`` random bytes."""
    return secrets.token_urlsafe(num_bytes or settings.verification_token_bytes)


class VerificationTokenManager:
    """Single-use, time-bound proof of email ownership.

    A token goes from issued to consumed exactly once. Expiry is checked on
    read and is terminal as well. Consuming activates the owning user in
    the caller's transaction, so a rollback undoes both.
    """

    def __init__(self, tokens: TokenRepo, users: UserRepo) -> None:
        self.tokens = tokens
        self.users = users

    async def issue(
        self,
        user_id: UUID,
        lifetime: timedelta | None = None,
        now: datetime | None = None,
    ) -> str:
        """Create and persist a token for ``user_id``.

        Args:
            user_id: Owner of the token
            lifetime: Validity window, defaults to the configured lifetime
            now: Issue time, defaults to the current UTC time

        Returns:
            The raw token string to embed in the verification link
        """
        if lifetime is None:
            lifetime = timedelta(minutes=settings.verification_token_lifetime_minutes)

        record = EmailVerificationToken.create(
            user_id=user_id,
            token=generate_token(),
            lifetime=lifetime,
            now=now or utc_now(),
        )
        await self.tokens.create(record)

        logger.info(
            "verification_token_issued",
            user_id=str(user_id),
            expires_at=record.expires_at.isoformat(),
        )
        return record.token

    async def consume(self, token: str, now: datetime | None = None) -> User:
        """Consume ``token`` and activate its owner.

        Raises:
            TokenFailure: If the token is unknown, expired or already consumed.
                All three render identically; ``reason`` tells them apart.
        """
        now = now or utc_now()

        if not token or not token.strip():
            raise TokenFailure(TokenFailure.NOT_FOUND)

        record = await self.tokens.get_by_token(token)
        if record is None:
            raise TokenFailure(TokenFailure.NOT_FOUND)
        if record.is_consumed:
            raise TokenFailure(TokenFailure.ALREADY_CONSUMED)
        if record.is_expired(now):
            raise TokenFailure(TokenFailure.EXPIRED)

        # The conditional update decides between concurrent consumers
        if not await self.tokens.mark_consumed(record.id, now):
            logger.info("verification_token_race_lost", token_id=str(record.id))
            raise TokenFailure(TokenFailure.ALREADY_CONSUMED)

        user = await self.users.get_by_id(record.user_id)
        if user is None:
            raise TokenFailure(TokenFailure.NOT_FOUND)

        user.activate()
        await self.users.update(user)

        logger.info(
            "verification_token_consumed",
            token_id=str(record.id),
            user_id=str(user.id),
        )
        return user


# Type alias for dependency injection
TokenManager = Annotated[VerificationTokenManager, Depends(VerificationTokenManager)]
