"""Error taxonomy and RFC 7807 Problem Details rendering."""

from sentinel.core.errors.exceptions import (
    AccessTokenFailure,
    AppException,
    AuthFailure,
    ConflictError,
    DependencyFailure,
    ForbiddenError,
    NotFoundError,
    TokenFailure,
    UserAuthFailure,
    ValidationError,
)
from sentinel.core.errors.handlers import ProblemDetail, register_exception_handlers


__all__ = [
    "AccessTokenFailure",
    "AppException",
    "AuthFailure",
    "ConflictError",
    "DependencyFailure",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "TokenFailure",
    "UserAuthFailure",
    "ValidationError",
    "register_exception_handlers",
]
