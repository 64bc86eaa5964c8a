"""Request tracing middleware.

Every response carries an ``X-Request-ID`` header and every problem detail
carries the same value as ``trace_id``.
"""

import re
import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied IDs end up in logs and response headers
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(header_value: str | None) -> str:
    """Reuse the caller's request ID when it is safe to echo, else mint one."""
    if header_value and _SAFE_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to ``request.state.trace_id`` and the structlog context."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        trace_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.trace_id = trace_id

        structlog.contextvars.bind_contextvars(request_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = trace_id
        return response
