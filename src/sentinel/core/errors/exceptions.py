"""Error taxonomy for the identity core.

Each exception maps to one RFC 7807 problem response (see ``handlers``):

- ``ValidationError``: malformed input, rejected before any write (422)
- ``ConflictError``: uniqueness or dependent-row violation (409)
- ``AuthFailure``: credential or grant failure, deliberately opaque (401)
- ``TokenFailure``: verification token unusable for any reason (400)
- ``DependencyFailure``: persistence, email or engine unreachable (503)
"""

from typing import Any


class AppException(Exception):
    """Base for errors rendered as problem details.

    Subclasses set ``status_code``, a default ``message`` and an
    ``error_code`` that becomes the last segment of the problem ``type``.
    """

    status_code: int = 500
    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details if details is not None else {}
        super().__init__(self.message)


class NotFoundError(AppException):
    status_code = 404
    message = "Resource not found"
    error_code = "not_found"

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        details = {
            key: value
            for key, value in (("resource", resource), ("resource_id", resource_id))
            if value
        }
        super().__init__(message, details=details)


class ConflictError(AppException):
    """Duplicate slug, client id, scope name or email; or a delete blocked by dependents."""

    status_code = 409
    message = "Resource conflict"
    error_code = "conflict"


class ValidationError(AppException):
    """Input rejected before persistence.

    Example:
        raise ValidationError("Public clients cannot have secrets.", field="client_secret")
    """

    status_code = 422
    message = "Validation error"
    error_code = "validation_error"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        error_code: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field:
            details["errors"] = [{"field": field, "message": message or self.message}]
        super().__init__(message, error_code=error_code, details=details)


class AuthFailure(AppException):
    """Client credential or grant failure.

    The response never varies with the cause: unknown client, wrong secret,
    missing secret hash, public client and disallowed scope look identical.
    ``reason`` is for server logs only.
    """

    status_code = 401
    message = "Client authentication failed."
    error_code = "invalid_client"

    def __init__(self, reason: str = "unspecified") -> None:
        self.reason = reason
        super().__init__()


class UserAuthFailure(AuthFailure):
    """Sign-in failure; every cause renders the same response."""

    message = "Invalid credentials."
    error_code = "invalid_credentials"


class AccessTokenFailure(AuthFailure):
    """Bearer token missing or rejected by the OAuth engine."""

    message = "Invalid or missing access token."
    error_code = "invalid_token"


class ForbiddenError(AppException):
    status_code = 403
    message = "Access forbidden"
    error_code = "forbidden"


class TokenFailure(AppException):
    """Verification token not found, expired or already consumed.

    All three collapse to one response; ``reason`` keeps the distinction
    for logs and tests.
    """

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ALREADY_CONSUMED = "already_consumed"

    status_code = 400
    message = "Invalid or expired token."
    error_code = "invalid_token"

    def __init__(self, reason: str = NOT_FOUND) -> None:
        self.reason = reason
        super().__init__()


class DependencyFailure(AppException):
    """A collaborator could not be reached; never retried here.

    Example:
        raise DependencyFailure("Email transport unavailable", dependency="email")
    """

    status_code = 503
    message = "Service temporarily unavailable"
    error_code = "dependency_failure"

    def __init__(self, message: str | None = None, dependency: str | None = None) -> None:
        super().__init__(message, details={"dependency": dependency} if dependency else None)
