"""Database layer - session management, base models, and mixins."""

from sentinel.core.database.base import (
    Base,
    TenantMixin,
    TimestampMixin,
    UUIDMixin,
    as_utc,
    utc_now,
)
from sentinel.core.database.session import (
    async_engine,
    async_session_factory,
    flush_or_conflict,
    get_db,
)


__all__ = [
    "Base",
    "TenantMixin",
    "TimestampMixin",
    "UUIDMixin",
    "as_utc",
    "async_engine",
    "async_session_factory",
    "flush_or_conflict",
    "get_db",
    "utc_now",
]
