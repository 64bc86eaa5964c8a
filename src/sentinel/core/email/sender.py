"""Outbound email collaborators."""

from typing import Annotated, Protocol

import httpx
import structlog
from fastapi import Depends

from sentinel.config import settings
from sentinel.core.errors import DependencyFailure


logger = structlog.get_logger()


class EmailSender(Protocol):
    """Delivers a plain-text message to one recipient."""

    async def send(self, to: str, subject: str, body: str) -> None: ...


class LogEmailSender:
    """Development sender that writes messages to the log instead of sending.

    The body is not logged: verification messages carry a live token.
    """

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info("email_logged", to=to, subject=subject, body_length=len(body))


class BrevoEmailSender:
    """Sends through the Brevo transactional email HTTP API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        base_url: str = "https://api.brevo.com/v3/",
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url
        self.timeout = timeout

    async def send(self, to: str, subject: str, body: str) -> None:
        """Post one message to ``smtp/email``.

        Raises:
            DependencyFailure: If no API key is configured, the transport
                fails, or Brevo answers with a non-2xx status
        """
        if not self.api_key:
            logger.error("email_provider_not_configured", provider="brevo")
            raise DependencyFailure("Email transport is not configured", dependency="email")

        payload = {
            "sender": {"email": self.sender},
            "to": [{"email": to}],
            "subject": subject,
            "textContent": body,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"api-key": self.api_key, "Accept": "application/json"},
                timeout=self.timeout,
            ) as client:
                response = await client.post("smtp/email", json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "email_send_failed",
                provider="brevo",
                status_code=e.response.status_code,
                response=e.response.text,
            )
            raise DependencyFailure("Email transport unavailable", dependency="email") from e
        except httpx.HTTPError as e:
            logger.error("email_send_failed", provider="brevo", error=str(e))
            raise DependencyFailure("Email transport unavailable", dependency="email") from e

        logger.info("email_sent", provider="brevo", subject=subject)


def get_email_sender() -> EmailSender:
    """Return the sender selected by ``EMAIL_PROVIDER``."""
    if settings.email_provider == "brevo":
        return BrevoEmailSender(
            api_key=settings.brevo_api_key,
            sender=settings.email_from,
            base_url=settings.brevo_api_url,
            timeout=settings.email_timeout_seconds,
        )
    return LogEmailSender()


# Type alias for dependency injection
Mailer = Annotated[EmailSender, Depends(get_email_sender)]
