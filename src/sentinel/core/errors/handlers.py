"""RFC 7807 Problem Details exception handlers.

Every domain failure leaves the service as a Problem Details document.
Authentication and token failures render a fixed body regardless of their
internal ``reason``; the reason is written to the log only.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from sentinel.config import settings
from sentinel.core.errors.exceptions import (
    AppException,
    AuthFailure,
    DependencyFailure,
    ValidationError,
)


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

# "body", "query" and "form" location prefixes are transport detail
_TRANSPORT_LOCS = ("body", "query", "form")


class FieldError(BaseModel):
    """A single field-level validation message."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: Request path that produced the problem
        errors: Field-level errors (validation failures only)
        trace_id: Request trace ID for debugging
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    error_code: str,
    status_code: int,
    detail: str,
    errors: list[FieldError] | None = None,
) -> dict[str, Any]:
    return ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc if part not in _TRANSPORT_LOCS) or "unknown"


def _respond(
    request: Request,
    error_code: str,
    status_code: int,
    detail: str,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content = _problem(request, error_code, status_code, detail, errors)
    for key, value in (extra or {}).items():
        content.setdefault(key, value)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render a domain exception; opaque failures keep their ``reason`` in the log only."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        reason=getattr(exc, "reason", None),
        details=exc.details,
    )

    # Only client authentication offers the Basic scheme as a retry
    headers = None
    if type(exc) is AuthFailure:
        headers = {"WWW-Authenticate": 'Basic realm="sentinel"'}
    return _respond(
        request,
        exc.error_code,
        exc.status_code,
        exc.message,
        extra=exc.details,
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request binding errors with the same shape as ValidationError."""
    errors = [
        FieldError(
            field=_field_name(error.get("loc", ())),
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))

    return _respond(
        request,
        ValidationError.error_code,
        ValidationError.status_code,
        "Request validation failed",
        errors=errors,
    )


async def persistence_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Treat an escaped persistence error as an unreachable dependency."""
    logger.error("persistence_failure", path=request.url.path, error_type=type(exc).__name__)
    return _respond(
        request,
        DependencyFailure.error_code,
        DependencyFailure.status_code,
        DependencyFailure.message,
        extra={"dependency": "database"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    return _respond(
        request,
        AppException.error_code,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        AppException.message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    handlers: list[tuple[type[Exception], Any]] = [
        (AppException, app_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (SQLAlchemyError, persistence_exception_handler),
        (Exception, generic_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, cast("ExceptionHandler", handler))
