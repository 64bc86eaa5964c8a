"""Logging module with structured logging and request tracking."""

from sentinel.core.logging.config import configure_logging
from sentinel.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
