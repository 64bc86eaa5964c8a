"""Email delivery collaborators."""

from sentinel.core.email.sender import (
    BrevoEmailSender,
    EmailSender,
    LogEmailSender,
    Mailer,
    get_email_sender,
)


__all__ = [
    "BrevoEmailSender",
    "EmailSender",
    "LogEmailSender",
    "Mailer",
    "get_email_sender",
]
